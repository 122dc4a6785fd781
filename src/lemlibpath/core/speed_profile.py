"""Deceleration limit applied to sampled path points.

The path has to come to a stop at its end point, which is the
second-to-last sample (the last one is a terminal duplicate).  Walking
backward from that stop, each point's speed is capped by what the robot
can still brake from over the distance to its successor::

    v = sqrt(v_next^2 + 2 * a * d)

and floored at the path's minimum speed.
"""

from __future__ import annotations

import math
from typing import Sequence

from .geometry import SamplePoint
from .units import UnitConverter


def apply_deceleration_limit(
    points: Sequence[SamplePoint],
    rate: float,
    min_speed: float,
    uc: UnitConverter,
) -> None:
    """Adjust the speeds of *points* in place.

    Parameters
    ----------
    points:
        Samples ordered along the path.
    rate:
        Maximum deceleration, in the length unit ``uc.b`` per unit time squared.
    min_speed:
        Lower bound for every adjusted speed.
    uc:
        Converter from the point coordinate unit (``a``) to the unit of *rate*.
    """
    if len(points) > 1:
        points[-2].speed = 0

    for i in range(len(points) - 3, -1, -1):
        last = points[i + 1]
        current = points[i]
        new_speed = math.sqrt(last.speed ** 2 + 2 * rate * uc.from_a_to_b(last.distance_to(current)))
        current.speed = max(min(current.speed, new_speed), min_speed)
