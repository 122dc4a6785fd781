"""Minimal synchronous publish/subscribe channel."""

from __future__ import annotations

from typing import Any, Callable

Listener = Callable[..., Any]
Disposer = Callable[[], None]


class EventChannel:
    """Ordered list of listeners called synchronously on ``publish``."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Disposer:
        """Add *listener* and return a callable that removes it again.

        Calling the disposer more than once is harmless.
        """
        self._listeners.append(listener)

        def dispose() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return dispose

    def publish(self, *args: Any) -> None:
        # copy so listeners may dispose themselves while being notified
        for listener in list(self._listeners):
            listener(*args)

    def __len__(self) -> int:
        return len(self._listeners)
