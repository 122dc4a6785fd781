"""Contract shared by interchangeable path formats and the host that runs them."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Optional, Protocol, runtime_checkable

from ..config.general import GeneralConfig
from ..core.geometry import Segment
from ..core.history import CommandHistory
from ..core.path import Path
from ..core.sampling import PointCalculationResult
from ..core.units import UnitConverter


class Host(Protocol):
    """What a format needs from the application it is registered with."""

    history: CommandHistory

    def interested_path(self) -> Optional[Path]: ...

    def export_pdj_data(self) -> dict: ...


@runtime_checkable
class Format(Protocol):
    """A path file format.

    Registering a format installs its hooks on the host; unregistering
    removes all of them.  Both are idempotent.
    """

    def get_name(self) -> str: ...

    def create_new_instance(self) -> Format: ...

    def register(self, app: Host) -> None: ...

    def unregister(self, app: Host) -> None: ...

    def get_general_config(self) -> GeneralConfig: ...

    def create_path(self, *segments: Segment) -> Path: ...

    def get_path_points(self, path: Path) -> PointCalculationResult: ...

    def convert_from_format(self, old_format: Format, old_paths: list[Path]) -> list[Path]: ...

    def import_paths_from_file(self, buffer: bytes) -> list[Path]: ...

    def import_pdj_data_from_file(self, buffer: bytes) -> Optional[Any]: ...

    def export_file(self, app: Host) -> bytes: ...


def convert_paths(new_format: Format, old_format: Format, old_paths: list[Path]) -> list[Path]:
    """Rebuild *old_paths* as paths of *new_format*.

    Geometry is rescaled between the two formats' units of length.  The
    speed range is carried over with each bound clamped to the new limits;
    every other path setting starts from the new format's defaults.
    """
    uc = UnitConverter(
        old_format.get_general_config().uol,
        new_format.get_general_config().uol,
    )
    new_paths: list[Path] = []
    for old in old_paths:
        path = new_format.create_path(*(s.map_coordinates(uc.from_a_to_b) for s in old.segments))
        path.name = old.name
        path.visible = old.visible
        path.lock = old.lock
        path.speed_keyframes = [replace(kf) for kf in old.speed_keyframes]

        old_speed = old.pc.speed_limit
        new_speed = path.pc.speed_limit
        new_speed.update(
            from_=new_speed.clamp(old_speed.from_),
            to=new_speed.clamp(old_speed.to),
        )
        new_paths.append(path)
    return new_paths
