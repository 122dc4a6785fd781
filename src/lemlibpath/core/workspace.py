"""Workspace: ties the active format, its paths and the command history together.

The Workspace is the host a format registers with, and the top-level
entry point for the CLI.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from ..errors import GrammarError, LemLibPathError
from .history import CommandHistory
from .path import Path
from .units import UnitConverter, UnitOfLength

if TYPE_CHECKING:
    from ..formats.base import Format

logger = logging.getLogger(__name__)

APP_VERSION = "0.1.0"


def _path_to_dict(path: Path) -> dict:
    return {
        "uid": path.uid,
        "name": path.name,
        "visible": path.visible,
        "lock": path.lock,
        "pc": path.pc.to_dict(),
        "segments": [
            [{"x": c.x, "y": c.y} for c in seg.controls] for seg in path.segments
        ],
        "speedKeyframes": [
            {"xPos": kf.x_pos, "yPos": kf.y_pos, "followBentRate": kf.follow_bent_rate}
            for kf in path.speed_keyframes
        ],
    }


@dataclass
class Workspace:
    """Paths being edited with one format, plus the edit history."""

    format: Format
    paths: list[Path] = field(default_factory=list)
    selected: list[str] = field(default_factory=list)  # path uids
    history: CommandHistory = field(default_factory=CommandHistory)

    def __post_init__(self) -> None:
        self.format.register(self)

    # -- selection -----------------------------------------------------------

    def add_path(self, path: Path) -> Path:
        self.paths.append(path)
        return path

    def remove_path(self, path: Path) -> None:
        self.paths.remove(path)
        if path.uid in self.selected:
            self.selected.remove(path.uid)

    def select(self, *paths: Path) -> None:
        self.selected = [p.uid for p in paths]

    def interested_path(self) -> Optional[Path]:
        """The first selected path, or the only path when nothing is selected."""
        for path in self.paths:
            if path.uid in self.selected:
                return path
        if len(self.paths) == 1:
            return self.paths[0]
        return None

    # -- format --------------------------------------------------------------

    def set_format(self, new_format: Format) -> None:
        """Switch to *new_format*, converting every path to it."""
        old_format = self.format
        old_format.unregister(self)
        self.paths = new_format.convert_from_format(old_format, self.paths)
        self.selected = []
        self.format = new_format
        new_format.register(self)
        logger.info("Format changed: %s -> %s", old_format.get_name(), new_format.get_name())

    def set_unit_of_length(self, uol: UnitOfLength) -> None:
        """Change the display unit, rescaling the path geometry with it."""
        gc = self.format.get_general_config()
        if gc.uol is uol:
            return
        uc = UnitConverter(gc.uol, uol)
        gc.uol = uol
        for path in self.paths:
            path.segments = [s.map_coordinates(uc.from_a_to_b) for s in path.segments]

    # -- data ----------------------------------------------------------------

    def export_pdj_data(self) -> dict[str, Any]:
        return {
            "appVersion": APP_VERSION,
            "format": self.format.get_name(),
            "gc": self.format.get_general_config().to_dict(),
            "paths": [_path_to_dict(p) for p in self.paths],
        }

    def import_file(self, buffer: bytes) -> list[Path]:
        """Replace the paths with those decoded from *buffer*.

        Embedded project data written by the same format restores the
        general configuration and the path names and settings.
        """
        pdj = self.format.import_pdj_data_from_file(buffer)
        if not (isinstance(pdj, dict) and pdj.get("format") == self.format.get_name()):
            pdj = {}

        gc = self.format.get_general_config()
        snapshot = gc.to_dict()
        try:
            if "gc" in pdj:
                gc.apply_dict(pdj["gc"])
            paths = self.format.import_paths_from_file(buffer)
            for path, saved in zip(paths, pdj.get("paths", [])):
                path.name = saved.get("name", path.name)
                if "pc" in saved:
                    path.pc.apply_dict(saved["pc"])
        except LemLibPathError:
            gc.apply_dict(snapshot)
            raise
        except (KeyError, TypeError, AttributeError, ValueError) as exc:
            # malformed embedded data
            gc.apply_dict(snapshot)
            raise GrammarError(f"Invalid embedded path data: {exc!r}") from exc

        self.paths = paths
        self.selected = [p.uid for p in paths[:1]]
        return paths

    def export_file(self) -> bytes:
        return self.format.export_file(self)
