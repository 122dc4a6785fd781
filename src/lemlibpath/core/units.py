"""Unit-of-length enum, conversion helpers and unit-tagged quantities."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class UnitOfLength(Enum):
    """Length units.  The value is the number of millimetres per unit."""

    MILLIMETER = 1.0
    CENTIMETER = 10.0
    METER = 1000.0
    INCH = 25.4
    FOOT = 304.8

    def to_mm(self, value: float) -> float:
        return value * self.value

    def from_mm(self, value: float) -> float:
        return value / self.value

    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def from_label(cls, label: str) -> "UnitOfLength":
        for unit, text in _LABELS.items():
            if text == label:
                return unit
        raise ValueError(f"Unknown unit of length: {label!r}")


_LABELS = {
    UnitOfLength.MILLIMETER: "mm",
    UnitOfLength.CENTIMETER: "cm",
    UnitOfLength.METER: "m",
    UnitOfLength.INCH: "in",
    UnitOfLength.FOOT: "ft",
}


class UnitConverter:
    """Convert lengths between unit *a* and unit *b*."""

    def __init__(self, a: UnitOfLength, b: UnitOfLength):
        self.a = a
        self.b = b

    def from_a_to_b(self, value: float) -> float:
        if self.a is self.b:
            return value
        return self.b.from_mm(self.a.to_mm(value))

    def from_b_to_a(self, value: float) -> float:
        if self.a is self.b:
            return value
        return self.a.from_mm(self.b.to_mm(value))


@dataclass(frozen=True)
class Quantity:
    """A length magnitude tagged with its unit."""

    value: float
    unit: UnitOfLength

    def to(self, unit: UnitOfLength) -> float:
        """Magnitude of this quantity expressed in *unit*."""
        return UnitConverter(self.unit, unit).from_a_to_b(self.value)

    def __str__(self) -> str:
        return f"{self.value:g} {self.unit.label()}"


def round_user(value: float, decimals: int = 3) -> float:
    """Round *value* to the precision shown to users and written to files."""
    result = round(value, decimals)
    return 0.0 if result == 0 else result  # drop negative zero


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


_NUMBER_RE = re.compile(r"^[0-9]+(\.[0-9]*)?$")


def parse_number_in_string(
    text: str,
    uol: UnitOfLength,
    min_q: Quantity,
    max_q: Quantity,
) -> Optional[float]:
    """Parse a non-negative decimal typed by a user in unit *uol*.

    Returns the value clamped into ``[min_q, max_q]`` (both converted to
    *uol*) and rounded to user precision, or None if *text* is not a
    plain decimal number.
    """
    text = text.strip()
    if not _NUMBER_RE.match(text):
        return None
    value = float(text)
    lo = min_q.to(uol)
    hi = max_q.to(uol)
    return round_user(clamp(value, lo, hi))
