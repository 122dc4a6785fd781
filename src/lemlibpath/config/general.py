"""Format-wide configuration (persisted to disk as JSON)."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from ..core.units import UnitConverter, UnitOfLength
from .fields import (
    ObservableConfig,
    ValidatedField,
    is_boolean,
    is_positive,
    member_of,
    nested_valid,
)

if TYPE_CHECKING:
    from ..formats.base import Format

logger = logging.getLogger(__name__)


class FieldImageOriginType(Enum):
    BUILT_IN = "built-in"
    EXTERNAL = "external"
    LOCAL = "local"


@dataclass
class FieldImageSignatureAndOrigin:
    """Reference to the background field image, resolved by the host."""

    signature: str
    origin: FieldImageOriginType = FieldImageOriginType.BUILT_IN

    def is_valid(self) -> bool:
        return (
            isinstance(self.signature, str)
            and self.signature != ""
            and isinstance(self.origin, FieldImageOriginType)
        )

    def to_dict(self) -> dict:
        return {"signature": self.signature, "origin": self.origin.value}

    @classmethod
    def from_dict(cls, d: dict) -> FieldImageSignatureAndOrigin:
        return cls(signature=d["signature"], origin=FieldImageOriginType(d["origin"]))


def default_field_image() -> FieldImageSignatureAndOrigin:
    return FieldImageSignatureAndOrigin("VRC 2023-2024 Over Under (Official)")


# Length-valued fields, rescaled when the unit of length changes
LENGTH_FIELDS = ("robot_width", "robot_height", "point_density", "control_magnet_distance")

# attribute name -> JSON key
_JSON_KEYS = {
    "robot_width": "robotWidth",
    "robot_height": "robotHeight",
    "robot_is_holonomic": "robotIsHolonomic",
    "show_robot": "showRobot",
    "uol": "uol",
    "point_density": "pointDensity",
    "control_magnet_distance": "controlMagnetDistance",
    "field_image": "fieldImage",
}


class GeneralConfig(ObservableConfig):
    """Display unit, sampling density and robot footprint for one format instance."""

    robot_width = ValidatedField(is_positive, "must be positive")
    robot_height = ValidatedField(is_positive, "must be positive")
    robot_is_holonomic = ValidatedField(is_boolean, "must be a boolean")
    show_robot = ValidatedField(is_boolean, "must be a boolean")
    uol = ValidatedField(member_of(UnitOfLength), "unknown unit of length")
    point_density = ValidatedField(is_positive, "must be positive")
    control_magnet_distance = ValidatedField(is_positive, "must be positive")
    field_image = ValidatedField(
        nested_valid(FieldImageSignatureAndOrigin), "invalid field image reference"
    )

    def __init__(self, format: Optional[Format] = None):
        super().__init__()
        self.format = format
        self.robot_width = 12
        self.robot_height = 12
        self.robot_is_holonomic = False
        self.show_robot = False
        self.uol = UnitOfLength.INCH
        self.point_density = 2  # inches
        self.control_magnet_distance = 5 / 2.54
        self.field_image = default_field_image()
        self.changed.subscribe(self._on_changed)

    def _on_changed(self, name: str, old: Any, new: Any) -> None:
        if name != "uol":
            return
        uc = UnitConverter(old, new)
        for attr in LENGTH_FIELDS:
            setattr(self, attr, uc.from_a_to_b(getattr(self, attr)))
        logger.debug("Unit of length changed %s -> %s", old.label(), new.label())

    # -- persistence ---------------------------------------------------------

    def to_dict(self) -> dict:
        d: dict[str, Any] = {}
        for name, f in self.validated_fields().items():
            if not f.exposed:
                continue
            value = getattr(self, name)
            if isinstance(value, UnitOfLength):
                value = value.label()
            elif isinstance(value, FieldImageSignatureAndOrigin):
                value = value.to_dict()
            d[_JSON_KEYS[name]] = value
        return d

    def apply_dict(self, data: dict) -> None:
        """Restore fields from :meth:`to_dict` output; unknown keys are ignored.

        The unit is applied first, so stored lengths are taken as already
        expressed in the stored unit.
        """
        reverse = {v: k for k, v in _JSON_KEYS.items()}
        values: dict[str, Any] = {}
        for key, value in data.items():
            name = reverse.get(key)
            if name is None:
                continue
            if name == "uol":
                value = UnitOfLength.from_label(value)
            elif name == "field_image":
                value = FieldImageSignatureAndOrigin.from_dict(value)
            values[name] = value
        uol = values.pop("uol", None)
        if uol is not None and uol is not self.uol:
            self.uol = uol
        self.update(**values)

    @classmethod
    def from_dict(cls, data: dict, format: Optional[Format] = None) -> GeneralConfig:
        gc = cls(format)
        gc.apply_dict(data)
        return gc

    def save(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), indent=2))

    @classmethod
    def load(cls, path: Path, format: Optional[Format] = None) -> GeneralConfig:
        if path.exists():
            return cls.from_dict(json.loads(path.read_text()), format)
        return cls(format)
