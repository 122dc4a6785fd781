"""Validated configuration fields with change notification.

A config class declares its public fields as :class:`ValidatedField`
descriptors.  Assigning to a field runs the field's predicate first; a
rejected value raises :class:`~lemlibpath.errors.ValidationError` and the
previous value is kept.  Accepted changes are published on the owning
object's ``changed`` channel as ``(field_name, old, new)``.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Callable, Optional

from ..core.events import EventChannel
from ..errors import ValidationError

Predicate = Callable[[Any, Any], bool]


class ValidatedField:
    """Descriptor storing a value on the instance after validating it.

    *predicate* receives ``(instance, value)`` so it can depend on other
    fields of the same object (e.g. range limits).
    """

    def __init__(self, predicate: Predicate, reason: str, exposed: bool = True):
        self.predicate = predicate
        self.reason = reason
        self.exposed = exposed
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name
        self.attr = f"_{name}"

    def __get__(self, instance: Any, owner: Optional[type] = None) -> Any:
        if instance is None:
            return self
        return getattr(instance, self.attr)

    def __set__(self, instance: Any, value: Any) -> None:
        if not self.predicate(instance, value):
            raise ValidationError(self.name, value, self.reason)
        old = getattr(instance, self.attr, _UNSET)
        setattr(instance, self.attr, value)
        if old is not _UNSET and old != value:
            instance.changed.publish(self.name, old, value)


_UNSET = object()


class ObservableConfig:
    """Base for config objects built from :class:`ValidatedField`."""

    def __init__(self) -> None:
        self.changed = EventChannel()

    @classmethod
    def validated_fields(cls) -> dict[str, ValidatedField]:
        fields: dict[str, ValidatedField] = {}
        for klass in reversed(cls.__mro__):
            for name, attr in vars(klass).items():
                if isinstance(attr, ValidatedField):
                    fields[name] = attr
        return fields

    def update(self, **changes: Any) -> None:
        """Assign several fields at once; nothing is assigned if any value is invalid."""
        fields = self.validated_fields()
        for name, value in changes.items():
            f = fields.get(name)
            if f is None:
                raise AttributeError(f"{type(self).__name__} has no field {name!r}")
            if not f.predicate(self, value):
                raise ValidationError(name, value, f.reason)
        for name, value in changes.items():
            setattr(self, name, value)


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and not math.isnan(value)


def is_positive(_obj: Any, value: Any) -> bool:
    return _is_number(value) and value > 0


def is_boolean(_obj: Any, value: Any) -> bool:
    return isinstance(value, bool)


def number_in(lo: float, hi: float, lo_inclusive: bool = True) -> Predicate:
    """Predicate for numbers in ``[lo, hi]`` (or ``(lo, hi]``)."""

    def check(_obj: Any, value: Any) -> bool:
        if not _is_number(value):
            return False
        above = value >= lo if lo_inclusive else value > lo
        return above and value <= hi

    return check


def member_of(enum_cls: type[Enum]) -> Predicate:
    def check(_obj: Any, value: Any) -> bool:
        return isinstance(value, enum_cls)

    return check


def nested_valid(cls: type) -> Predicate:
    """Predicate for nested objects exposing ``is_valid()``."""

    def check(_obj: Any, value: Any) -> bool:
        return isinstance(value, cls) and value.is_valid()

    return check
