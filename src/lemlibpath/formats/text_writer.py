"""Low-level line formatting helpers for the LemLib path text format."""

from __future__ import annotations

from typing import Iterable

from ..core.geometry import Vector
from ..core.units import round_user


def fmt(value: float, decimals: int = 3) -> str:
    """Format a float at user precision, stripping trailing zeros."""
    text = f"{value:.{decimals}f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def fmt_number(value: float) -> str:
    """Format a header value at user precision (``127.0`` -> ``127``)."""
    value = round_user(float(value))
    if value.is_integer():
        return str(int(value))
    return repr(value)


def point_line(x: float, y: float, speed: float) -> str:
    """``x, y, speed`` record for one sample point."""
    return f"{fmt(x)}, {fmt(y)}, {fmt(speed)}"


def controls_line(controls: Iterable[Vector]) -> str:
    """``x1, y1, x2, y2, ...`` record for the control points of one segment."""
    return ", ".join(f"{fmt(c.x)}, {fmt(c.y)}" for c in controls)
