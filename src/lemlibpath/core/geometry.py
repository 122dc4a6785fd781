"""Core path geometry data structures."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Union


@dataclass
class Vector:
    """A 2D point or direction in the display unit of length."""
    x: float
    y: float

    def add(self, other: Vector) -> Vector:
        return Vector(self.x + other.x, self.y + other.y)

    def divide(self, divisor: float) -> Vector:
        return Vector(self.x / divisor, self.y / divisor)

    def distance_to(self, other: Vector) -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def interpolate(self, other: Vector, distance: float) -> Vector:
        """Point on the ray from this point through *other*, *distance* away from this point.

        Coincident points return a copy of this point.
        """
        length = self.distance_to(other)
        if length == 0:
            return Vector(self.x, self.y)
        t = distance / length
        return Vector(
            self.x + (other.x - self.x) * t,
            self.y + (other.y - self.y) * t,
        )

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass
class Control(Vector):
    """An interior (handle) control point of a cubic segment."""


@dataclass
class EndControl(Control):
    """A segment end point.  The LemLib format always uses heading 0."""
    heading: float = 0.0


SegmentControl = Union[EndControl, Control]


class Segment:
    """A linear (2 end controls) or cubic (end, control, control, end) curve."""

    def __init__(self, *controls: SegmentControl):
        if len(controls) not in (2, 4):
            raise ValueError(
                f"A segment needs 2 or 4 control points, got {len(controls)}"
            )
        if not isinstance(controls[0], EndControl) or not isinstance(controls[-1], EndControl):
            raise TypeError("The first and last control points must be EndControl")
        self.controls: list[SegmentControl] = list(controls)

    @property
    def first(self) -> EndControl:
        return self.controls[0]  # type: ignore[return-value]

    @property
    def last(self) -> EndControl:
        return self.controls[-1]  # type: ignore[return-value]

    def is_linear(self) -> bool:
        return len(self.controls) == 2

    def is_cubic(self) -> bool:
        return len(self.controls) == 4

    def map_coordinates(self, fn: Callable[[float], float]) -> Segment:
        """New segment with *fn* applied to every coordinate (headings kept)."""
        controls: list[SegmentControl] = []
        for c in self.controls:
            if isinstance(c, EndControl):
                controls.append(EndControl(fn(c.x), fn(c.y), c.heading))
            else:
                controls.append(Control(fn(c.x), fn(c.y)))
        return Segment(*controls)

    def __repr__(self) -> str:
        pts = ", ".join(f"({c.x:g}, {c.y:g})" for c in self.controls)
        return f"Segment({pts})"


@dataclass
class SamplePoint(Vector):
    """A discretized point along a path.

    ``distance`` is the cumulative arc length from the path start and
    ``speed`` the target speed at this point.  ``segment_index`` is the
    segment the point was sampled from.
    """
    distance: float = 0.0
    speed: float = 0.0
    bent_rate: float = 0.0
    segment_index: int = 0
