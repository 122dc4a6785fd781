"""Path container: ordered segments bound to one path configuration."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from .geometry import Segment

if TYPE_CHECKING:
    from ..config.path_config import PathConfig


def make_id(length: int = 10) -> str:
    return uuid.uuid4().hex[:length]


@dataclass
class SpeedKeyframe:
    """Speed override starting at a fraction of the path length.

    ``x_pos`` is the position along the path in [0, 1] and ``y_pos`` the
    fraction of the speed range to aim for.  ``follow_bent_rate`` of None
    means the sampler default applies.
    """
    x_pos: float
    y_pos: float = 1.0
    follow_bent_rate: Optional[bool] = None
    uid: str = field(default_factory=make_id)


class Path:
    """An ordered, continuous sequence of segments.

    The path takes ownership of *pc*: the config's ``path`` attribute is
    pointed back at this path.
    """

    def __init__(self, pc: PathConfig, *segments: Segment):
        self.uid = make_id()
        self.name = "Path"
        self.visible = True
        self.lock = False
        self.pc = pc
        self.segments: list[Segment] = list(segments)
        self.speed_keyframes: list[SpeedKeyframe] = []
        pc.path = self

    def is_continuous(self) -> bool:
        """True when every segment starts exactly where the previous one ended."""
        for prev, seg in zip(self.segments, self.segments[1:]):
            if prev.last.x != seg.first.x or prev.last.y != seg.first.y:
                return False
        return True

    def __repr__(self) -> str:
        return f"Path(uid={self.uid!r}, name={self.name!r}, segments={len(self.segments)})"
