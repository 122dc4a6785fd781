"""Configuration sanity checks.

Checks general and per-path configuration before points are generated or
a file is exported.  Unlike field assignment, these checks never raise;
they collect every problem into a report.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..core.units import Quantity, UnitOfLength
from .fields import ObservableConfig
from .general import GeneralConfig
from .path_config import PathConfig

# Bounds applied to user-entered point density and robot size
MIN_LENGTH = Quantity(0.1, UnitOfLength.CENTIMETER)
MAX_LENGTH = Quantity(100, UnitOfLength.CENTIMETER)


@dataclass
class ValidationIssue:
    """A single configuration problem."""

    severity: str  # "error" or "warning"
    message: str


@dataclass
class ValidationResult:
    """Result of validating one or more configuration objects."""

    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(i.severity == "error" for i in self.issues)

    @property
    def has_warnings(self) -> bool:
        return any(i.severity == "warning" for i in self.issues)

    @property
    def is_ok(self) -> bool:
        return len(self.issues) == 0

    def extend(self, other: ValidationResult) -> None:
        self.issues.extend(other.issues)


def _check_fields(config: ObservableConfig, prefix: str, result: ValidationResult) -> None:
    for name, f in config.validated_fields().items():
        value = getattr(config, name)
        if not f.predicate(config, value):
            result.issues.append(ValidationIssue(
                "error", f"{prefix}.{name} {f.reason} ({value!r})",
            ))


def validate_general_config(gc: GeneralConfig) -> ValidationResult:
    """Check *gc* field domains and user-entry length bounds.

    Checks performed:
    - Every field satisfies its declared predicate
    - Point density and robot size within [0.1 cm, 100 cm]
    """
    result = ValidationResult()
    _check_fields(gc, "general", result)
    if result.has_errors:
        return result

    lo = MIN_LENGTH.to(gc.uol)
    hi = MAX_LENGTH.to(gc.uol)
    unit = gc.uol.label()
    for name in ("point_density", "robot_width", "robot_height"):
        value = getattr(gc, name)
        if value < lo or value > hi:
            result.issues.append(ValidationIssue(
                "warning",
                f"general.{name}={value:g}{unit} outside [{lo:g}, {hi:g}]{unit}",
            ))
    return result


def validate_path_config(pc: PathConfig) -> ValidationResult:
    """Check *pc* before its path is sampled.

    Checks performed:
    - Every field satisfies its declared predicate
    - Speed range upper bound is non-zero
    - Range bounds are ordered (warning only)
    """
    result = ValidationResult()
    _check_fields(pc, "path", result)
    for name in ("speed_limit", "bent_rate_applicable_range"):
        _check_fields(getattr(pc, name), f"path.{name}", result)
    if result.has_errors:
        return result

    speed = pc.speed_limit
    if speed.to == 0:
        result.issues.append(ValidationIssue(
            "error", "path.speed_limit.to is 0, the robot would never move",
        ))
    if speed.from_ > speed.to:
        result.issues.append(ValidationIssue(
            "warning",
            f"path.speed_limit.from ({speed.from_:g}) exceeds to ({speed.to:g})",
        ))
    bent = pc.bent_rate_applicable_range
    if bent.from_ > bent.to:
        result.issues.append(ValidationIssue(
            "warning",
            f"path.bent_rate_applicable_range.from ({bent.from_:g}) "
            f"exceeds to ({bent.to:g})",
        ))
    return result
