"""LemLib v0.4 path file format (inch, byte-voltage speeds).

File layout
-----------
::

    x, y, speed                  one line per sample point, inches
    ...
    x, y, 0                      ghost point, 20 in past the path end
    endData
    <max deceleration rate>
    <max speed>
    200                          multiplier, unsupported
    x1, y1, x2, y2, x3, y3, x4, y4   one line per segment, inches
    ...
    #PATH.JERRYIO-DATA {...}     embedded project data, no trailing newline

Only one path fits in a file.  Linear segments are written as cubic
segments whose two handles sit at the segment midpoint, so they read
back as cubic segments.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from ..config.general import GeneralConfig
from ..config.path_config import PathConfig
from ..core.geometry import Control, EndControl, Segment
from ..core.history import AddKeyframe, BeforeExecutionEvent
from ..core.path import Path, SpeedKeyframe, make_id
from ..core.sampling import PointCalculationResult, get_path_points
from ..core.speed_profile import apply_deceleration_limit
from ..core.units import Quantity, UnitConverter, UnitOfLength, round_user
from ..errors import ContinuityError, GrammarError, PreconditionError
from .base import Format, Host, convert_paths
from .pdj import embed_pdj_data, import_pdj_data_from_file
from .text_writer import controls_line, fmt, fmt_number, point_line

logger = logging.getLogger(__name__)

END_DATA = "endData"

# Distance (inches) the ghost point is placed beyond the path end
GHOST_POINT_DISTANCE = 20.0

# Written in place of the unsupported multiplier field
MULTIPLIER_PLACEHOLDER = "200"

_NUMBER_RE = re.compile(
    r"^[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|Infinity)$"
)


def parse_number(text: str) -> Optional[float]:
    """Parse a decimal number, or return None.  Surrounding whitespace is ignored."""
    text = text.strip()
    if not _NUMBER_RE.match(text):
        return None
    return float(text.replace("Infinity", "inf"))


class LemLibFormatV0_4:
    """Format plugin for LemLib v0.4 path files."""

    def __init__(self) -> None:
        self.is_init = False
        self.uid = make_id()
        self.gc = GeneralConfig(self)
        self._disposers: list = []

    def create_new_instance(self) -> Format:
        return LemLibFormatV0_4()

    def get_name(self) -> str:
        return "LemLib v0.4.x (inch, byte-voltage)"

    # -- lifecycle -----------------------------------------------------------

    def register(self, app: Host) -> None:
        if self.is_init:
            return
        self.is_init = True
        self._disposers.append(
            app.history.add_before_execution_listener(self._before_execution)
        )
        logger.debug("Registered format %s (%s)", self.get_name(), self.uid)

    def unregister(self, app: Host) -> None:
        for dispose in self._disposers:
            dispose()
        self._disposers.clear()
        self.is_init = False

    @staticmethod
    def _before_execution(event: BeforeExecutionEvent) -> None:
        # this format always applies bent rate to speed keyframes
        if event.is_command_instance_of(AddKeyframe):
            keyframe = event.command.keyframe
            if isinstance(keyframe, SpeedKeyframe):
                keyframe.follow_bent_rate = True

    # -- configuration -------------------------------------------------------

    def get_general_config(self) -> GeneralConfig:
        return self.gc

    def create_path(self, *segments: Segment) -> Path:
        return Path(PathConfig(self), *segments)

    # -- points --------------------------------------------------------------

    def get_path_points(self, path: Path) -> PointCalculationResult:
        uc = UnitConverter(self.gc.uol, UnitOfLength.INCH)

        result = get_path_points(
            path,
            Quantity(self.gc.point_density, self.gc.uol),
            default_follow_bent_rate=True,
        )

        pc = path.pc
        apply_deceleration_limit(
            result.points,
            rate=pc.max_deceleration_rate,
            min_speed=pc.speed_limit.from_,
            uc=uc,
        )
        return result

    def convert_from_format(self, old_format: Format, old_paths: list[Path]) -> list[Path]:
        return convert_paths(self, old_format, old_paths)

    # -- import --------------------------------------------------------------

    def import_paths_from_file(self, buffer: bytes) -> list[Path]:
        """Decode *buffer* into at most one path.

        Raises
        ------
        GrammarError:
            Missing ``endData``, unparsable header value or malformed
            segment line.
        ContinuityError:
            A segment does not start at the previous segment's end.
        ValidationError:
            The max deceleration rate is outside (0, 255].
        """
        lines = buffer.decode("utf-8").split("\n")

        i = next((n for n, line in enumerate(lines) if line.strip() == END_DATA), -1)
        if i == -1:
            raise GrammarError("Invalid file format, unable to find line 'endData'")

        max_deceleration_rate = self._parse_header(lines, i + 1, "max deceleration rate")
        max_speed = self._parse_header(lines, i + 2, "max speed")
        # i + 3: multiplier, not supported

        uc = UnitConverter(UnitOfLength.INCH, self.gc.uol)
        paths: list[Path] = []
        last_end: Optional[tuple[float, float]] = None

        # the last line is always empty (or the embedded data), skip it
        for n in range(i + 4, len(lines) - 1):
            raw = self._parse_segment_line(lines[n], n + 1)
            controls = [uc.from_a_to_b(v) for v in raw]
            segment = Segment(
                EndControl(controls[0], controls[1], 0),
                Control(controls[2], controls[3]),
                Control(controls[4], controls[5]),
                EndControl(controls[6], controls[7], 0),
            )

            if not paths:
                path = self.create_path(segment)
                speed = path.pc.speed_limit
                speed.to = speed.clamp(round_user(max_speed))
                if speed.to != round_user(max_speed):
                    logger.warning(
                        "Max speed %s clamped to %s", fmt_number(max_speed), fmt(speed.to)
                    )
                path.pc.max_deceleration_rate = max_deceleration_rate
                paths.append(path)
            else:
                if last_end != (raw[0], raw[1]):
                    raise ContinuityError(
                        f"Invalid file format, segment at line {n + 1} does not "
                        f"start at the end of the previous segment",
                        n + 1,
                    )
                paths[-1].segments.append(segment)
            last_end = (raw[6], raw[7])

        logger.debug(
            "Imported %d path(s), %d segment(s)",
            len(paths), sum(len(p.segments) for p in paths),
        )
        return paths

    @staticmethod
    def _parse_header(lines: list[str], index: int, field: str) -> float:
        value = parse_number(lines[index]) if index < len(lines) else None
        if value is None:
            raise GrammarError(
                f"Invalid file format, unable to parse {field} at line {index + 1}",
                index + 1,
            )
        return value

    @staticmethod
    def _parse_segment_line(line: str, line_no: int) -> list[float]:
        tokens = line.split(", ")
        if len(tokens) != 8:
            raise GrammarError(
                f"Invalid file format, unable to parse segment at line {line_no}: "
                f"expected 8 values, got {len(tokens)}",
                line_no,
            )
        values = [parse_number(t) for t in tokens]
        if any(v is None for v in values):
            raise GrammarError(
                f"Invalid file format, unable to parse segment at line {line_no}",
                line_no,
            )
        return values  # type: ignore[return-value]

    def import_pdj_data_from_file(self, buffer: bytes) -> Optional[Any]:
        return import_pdj_data_from_file(buffer)

    # -- export --------------------------------------------------------------

    def export_file(self, app: Host) -> bytes:
        """Encode the host's interested path.

        Raises
        ------
        PreconditionError:
            No path to export, the path has no segment, or it yields fewer
            than 3 sample points.
        """
        path = app.interested_path()
        if path is None:
            raise PreconditionError("No path to export")
        if not path.segments:
            raise PreconditionError("No segment to export")

        points = self.get_path_points(path).points
        if len(points) < 3:
            raise PreconditionError("The path is too short to export")

        uc = UnitConverter(self.gc.uol, UnitOfLength.INCH)
        out: list[str] = []

        # heading is not part of this format
        for p in points:
            out.append(point_line(uc.from_a_to_b(p.x), uc.from_a_to_b(p.y), p.speed))

        # the last sample duplicates the path end, so extend from the two before it
        last2 = points[-3]
        last1 = points[-2]
        ghost = last2.interpolate(
            last1, last2.distance_to(last1) + uc.from_b_to_a(GHOST_POINT_DISTANCE)
        )
        out.append(point_line(uc.from_a_to_b(ghost.x), uc.from_a_to_b(ghost.y), 0))

        out.append(END_DATA)
        out.append(fmt_number(path.pc.max_deceleration_rate))
        out.append(fmt_number(path.pc.speed_limit.to))
        out.append(MULTIPLIER_PLACEHOLDER)

        for segment in path.segments:
            if segment.is_cubic():
                controls = segment.controls
            else:
                first, last = segment.controls
                center = first.add(last).divide(2)
                controls = [first, center, center, last]
            out.append(controls_line(
                Control(uc.from_a_to_b(c.x), uc.from_a_to_b(c.y)) for c in controls
            ))

        content = "\n".join(out) + "\n" + embed_pdj_data(app.export_pdj_data())
        logger.debug("Exported path %s: %d points", path.uid, len(points))
        return content.encode("utf-8")
