"""Per-path configuration: speed range, bent-rate range, deceleration limit."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from .fields import ObservableConfig, ValidatedField, member_of, nested_valid, number_in

if TYPE_CHECKING:
    from ..core.path import Path
    from ..formats.base import Format


@dataclass(frozen=True)
class NumberLimit:
    value: float
    label: str


def _within_limits(rng: "EditableNumberRange", value: Any) -> bool:
    return number_in(rng.min_limit.value, rng.max_limit.value)(rng, value)


class EditableNumberRange(ObservableConfig):
    """A ``from_``..``to`` interval the user may move inside fixed limits.

    Each bound must lie within ``[min_limit, max_limit]``; ``from_ <= to``
    is not enforced here.
    """

    from_ = ValidatedField(_within_limits, "outside range limits")
    to = ValidatedField(_within_limits, "outside range limits")

    def __init__(
        self,
        min_limit: NumberLimit,
        max_limit: NumberLimit,
        step: float,
        from_: float,
        to: float,
    ):
        super().__init__()
        if min_limit.value > max_limit.value:
            raise ValueError("min_limit must not exceed max_limit")
        self.min_limit = min_limit
        self.max_limit = max_limit
        self.step = step
        self.from_ = from_
        self.to = to

    def is_valid(self) -> bool:
        return (
            self.min_limit.value <= self.max_limit.value
            and _within_limits(self, self.from_)
            and _within_limits(self, self.to)
        )

    def clamp(self, value: float) -> float:
        return max(self.min_limit.value, min(self.max_limit.value, value))

    def to_dict(self) -> dict:
        return {
            "minLimit": {"value": self.min_limit.value, "label": self.min_limit.label},
            "maxLimit": {"value": self.max_limit.value, "label": self.max_limit.label},
            "step": self.step,
            "from": self.from_,
            "to": self.to,
        }

    def __repr__(self) -> str:
        return (
            f"EditableNumberRange({self.from_}..{self.to} in "
            f"[{self.min_limit.value}, {self.max_limit.value}])"
        )


class BentRateApplicationDirection(Enum):
    HIGH_TO_LOW = "high_to_low"   # higher bent rate, lower speed
    LOW_TO_HIGH = "low_to_high"


class PathConfig(ObservableConfig):
    """Configuration owned by exactly one :class:`~lemlibpath.core.path.Path`."""

    speed_limit = ValidatedField(nested_valid(EditableNumberRange), "invalid speed range")
    bent_rate_applicable_range = ValidatedField(
        nested_valid(EditableNumberRange), "invalid bent rate range"
    )
    bent_rate_application_direction = ValidatedField(
        member_of(BentRateApplicationDirection), "unknown direction", exposed=False
    )
    max_deceleration_rate = ValidatedField(
        number_in(0, 255, lo_inclusive=False), "must be in (0, 255]"
    )

    def __init__(self, format: Optional[Format] = None):
        super().__init__()
        self.format = format
        self.path: Optional[Path] = None
        self.speed_limit = EditableNumberRange(
            min_limit=NumberLimit(0, "0"),
            max_limit=NumberLimit(127, "127"),
            step=1,
            from_=20,
            to=100,
        )
        self.bent_rate_applicable_range = EditableNumberRange(
            min_limit=NumberLimit(0, "0"),
            max_limit=NumberLimit(1, "1"),
            step=0.001,
            from_=0,
            to=0.1,
        )
        self.bent_rate_application_direction = BentRateApplicationDirection.HIGH_TO_LOW
        self.max_deceleration_rate = 127
        self._forward(self.speed_limit, "speed_limit")
        self._forward(self.bent_rate_applicable_range, "bent_rate_applicable_range")

    def _forward(self, rng: EditableNumberRange, prefix: str) -> None:
        rng.changed.subscribe(
            lambda name, old, new: self.changed.publish(f"{prefix}.{name}", old, new)
        )

    def to_dict(self) -> dict:
        return {
            "speedLimit": self.speed_limit.to_dict(),
            "bentRateApplicableRange": self.bent_rate_applicable_range.to_dict(),
            "maxDecelerationRate": self.max_deceleration_rate,
        }

    def apply_dict(self, data: dict) -> None:
        """Restore exposed fields from :meth:`to_dict` output, validating each."""
        if "speedLimit" in data:
            rng = data["speedLimit"]
            self.speed_limit.update(from_=rng["from"], to=rng["to"])
        if "bentRateApplicableRange" in data:
            rng = data["bentRateApplicableRange"]
            self.bent_rate_applicable_range.update(from_=rng["from"], to=rng["to"])
        if "maxDecelerationRate" in data:
            self.max_deceleration_rate = data["maxDecelerationRate"]
