"""Fixed-density point sampling along a path.

Algorithm
---------
1. Flatten every segment into a dense polyline (Bernstein evaluation for
   cubic segments, the two end points for linear ones).
2. Join the polylines into one shapely ``LineString`` and walk it at arc
   lengths ``0, d, 2d, ...`` strictly below the total length.
3. Append the path end point as the last real sample, followed by a
   terminal duplicate of it with speed 0.
4. Estimate the bent rate of each sample from the heading change between
   its neighbours and turn it into a speed inside the path's speed range,
   honouring any speed keyframes.

Coordinates and the density are taken to be in the same unit of length.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Optional

import numpy as np
import shapely
from shapely.geometry import LineString

from ..config.path_config import BentRateApplicationDirection
from .geometry import SamplePoint, Segment
from .path import Path, SpeedKeyframe
from .units import Quantity

logger = logging.getLogger(__name__)

# Polyline vertices per cubic segment
FLATTEN_STEPS = 256

# Arc-length slack when deciding whether a sample coincides with the path end
_END_EPS = 1e-9


@dataclass
class PointCalculationResult:
    """Samples produced for one path."""

    points: list[SamplePoint] = field(default_factory=list)
    total_length: float = 0.0

    def __len__(self) -> int:
        return len(self.points)


def flatten_segment(segment: Segment, steps: int = FLATTEN_STEPS) -> np.ndarray:
    """Return an ``(n, 2)`` array of points along *segment*."""
    ctrl = np.array([c.as_tuple() for c in segment.controls], dtype=float)
    if segment.is_linear():
        return ctrl
    t = np.linspace(0.0, 1.0, steps + 1)[:, None]
    mt = 1.0 - t
    return (
        mt ** 3 * ctrl[0]
        + 3 * mt ** 2 * t * ctrl[1]
        + 3 * mt * t ** 2 * ctrl[2]
        + t ** 3 * ctrl[3]
    )


def _bent_rates(xy: np.ndarray) -> np.ndarray:
    """Absolute heading change at each vertex, normalised to [0, 1]."""
    rates = np.zeros(len(xy), dtype=float)
    if len(xy) < 3:
        return rates
    d = np.diff(xy, axis=0)
    lengths = np.hypot(d[:, 0], d[:, 1])
    heading = np.arctan2(d[:, 1], d[:, 0])
    turn = np.abs((np.diff(heading) + math.pi) % (2 * math.pi) - math.pi)
    defined = (lengths[:-1] > _END_EPS) & (lengths[1:] > _END_EPS)
    rates[1:-1] = np.where(defined, turn / math.pi, 0.0)
    return rates


def _bent_rate_ratio(bent_rate: float, lo: float, hi: float, high_to_low: bool) -> float:
    """Fraction of the speed range allowed at *bent_rate* (1 = full speed)."""
    if bent_rate <= lo:
        ratio = 1.0
    elif bent_rate >= hi:
        ratio = 0.0
    else:
        ratio = 1.0 - (bent_rate - lo) / (hi - lo)
    return ratio if high_to_low else 1.0 - ratio


def _active_keyframe(
    keyframes: list[SpeedKeyframe], distance: float, total: float
) -> Optional[SpeedKeyframe]:
    active = None
    for kf in keyframes:
        if kf.x_pos * total <= distance + _END_EPS:
            active = kf
        else:
            break
    return active


def get_path_points(
    path: Path,
    density: Quantity,
    default_follow_bent_rate: bool = False,
) -> PointCalculationResult:
    """Sample *path* every *density* along its length.

    Returns an empty result for a path without segments.
    """
    if not path.segments:
        return PointCalculationResult()

    step = density.value
    if step <= 0:
        raise ValueError(f"Point density must be positive, got {density}")

    polylines = [flatten_segment(seg) for seg in path.segments]
    seg_lengths = [LineString(p).length for p in polylines]
    seg_ends = np.cumsum(seg_lengths)
    total = float(seg_ends[-1])

    coords = np.vstack([polylines[0]] + [p[1:] for p in polylines[1:]])
    line = LineString(coords)

    distances = np.arange(0.0, total, step)
    distances = distances[distances < total - _END_EPS]
    xy = shapely.get_coordinates(shapely.line_interpolate_point(line, distances))
    seg_idx = np.minimum(
        np.searchsorted(seg_ends, distances, side="right"), len(path.segments) - 1
    )

    end = path.segments[-1].last
    xy = np.vstack([xy.reshape(-1, 2), [end.as_tuple()]])
    distances = np.append(distances, total)
    seg_idx = np.append(seg_idx, len(path.segments) - 1)
    bent = _bent_rates(xy)

    pc = path.pc
    lo, hi = pc.bent_rate_applicable_range.from_, pc.bent_rate_applicable_range.to
    high_to_low = pc.bent_rate_application_direction is BentRateApplicationDirection.HIGH_TO_LOW
    speed_from, speed_to = pc.speed_limit.from_, pc.speed_limit.to
    keyframes = sorted(path.speed_keyframes, key=lambda kf: kf.x_pos)

    points: list[SamplePoint] = []
    for (x, y), s, br, si in zip(xy, distances, bent, seg_idx):
        kf = _active_keyframe(keyframes, s, total)
        y_pos = kf.y_pos if kf is not None else 1.0
        follow = default_follow_bent_rate
        if kf is not None and kf.follow_bent_rate is not None:
            follow = kf.follow_bent_rate
        top = speed_from + (speed_to - speed_from) * y_pos
        ratio = _bent_rate_ratio(br, lo, hi, high_to_low) if follow else 1.0
        points.append(SamplePoint(
            float(x), float(y),
            distance=float(s),
            speed=speed_from + (top - speed_from) * ratio,
            bent_rate=float(br),
            segment_index=int(si),
        ))

    # terminal duplicate of the end point
    points.append(SamplePoint(
        end.x, end.y, distance=total, speed=0.0,
        segment_index=len(path.segments) - 1,
    ))

    logger.debug(
        "Sampled path %s: %d points over %.4f (density %s)",
        path.uid, len(points), total, density,
    )
    return PointCalculationResult(points=points, total_length=total)
