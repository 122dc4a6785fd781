"""Command log with a synchronous before-execution event channel.

Every edit the host makes goes through :meth:`CommandHistory.execute`.
Listeners subscribed to ``before_execution`` see the command before it
mutates anything and may adjust it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from .events import Disposer, EventChannel
from .path import Path, SpeedKeyframe

logger = logging.getLogger(__name__)


class Command(Protocol):
    def execute(self) -> None: ...


class UpdateProperties:
    """Assign attributes on *target*.  Validated config fields still validate."""

    def __init__(self, target: Any, changes: dict[str, Any]):
        self.target = target
        self.changes = dict(changes)

    def execute(self) -> None:
        update = getattr(self.target, "update", None)
        if callable(update):
            update(**self.changes)
        else:
            for key, value in self.changes.items():
                setattr(self.target, key, value)


class AddKeyframe:
    """Add a speed keyframe to a path."""

    def __init__(self, path: Path, keyframe: SpeedKeyframe):
        self.path = path
        self.keyframe = keyframe

    def execute(self) -> None:
        self.path.speed_keyframes.append(self.keyframe)
        self.path.speed_keyframes.sort(key=lambda kf: kf.x_pos)


@dataclass
class BeforeExecutionEvent:
    title: str
    command: Command

    def is_command_instance_of(self, cls: type) -> bool:
        return isinstance(self.command, cls)


class CommandHistory:
    """Ordered log of executed commands."""

    def __init__(self) -> None:
        self.before_execution = EventChannel()
        self._executed: list[tuple[str, Command]] = []

    def add_before_execution_listener(self, listener) -> Disposer:
        return self.before_execution.subscribe(listener)

    def execute(self, title: str, command: Command) -> None:
        self.before_execution.publish(BeforeExecutionEvent(title, command))
        command.execute()
        self._executed.append((title, command))
        logger.debug("Executed: %s", title)

    @property
    def titles(self) -> list[str]:
        return [title for title, _ in self._executed]

    def __len__(self) -> int:
        return len(self._executed)
