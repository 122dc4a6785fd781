"""Ordered registry of the available path formats."""

from __future__ import annotations

from .base import Format
from .lemlib_v0_4 import LemLibFormatV0_4

_REGISTRY: list[Format] = [LemLibFormatV0_4()]


def register_format(prototype: Format) -> Format:
    """Append *prototype* to the registry.  Names must be unique."""
    name = prototype.get_name()
    if any(f.get_name() == name for f in _REGISTRY):
        raise ValueError(f"A format named {name!r} is already registered")
    _REGISTRY.append(prototype)
    return prototype


def unregister_format(name: str) -> None:
    _REGISTRY[:] = [f for f in _REGISTRY if f.get_name() != name]


def get_all_formats() -> list[Format]:
    """Fresh instances of every registered format, in registration order."""
    return [f.create_new_instance() for f in _REGISTRY]


def get_format(name: str) -> Format:
    """Fresh instance of the format called *name*."""
    for f in _REGISTRY:
        if f.get_name() == name:
            return f.create_new_instance()
    raise KeyError(f"No format registered with name '{name}'")


def list_names() -> list[str]:
    return [f.get_name() for f in _REGISTRY]
