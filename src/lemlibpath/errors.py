"""Exception types raised by the codec and the configuration layer."""

from __future__ import annotations

from typing import Any, Optional


class LemLibPathError(Exception):
    """Base class for every error raised by lemlibpath."""


class GrammarError(LemLibPathError, ValueError):
    """The file text does not follow the path file grammar.

    ``line`` is the 1-based line number of the offending line, when known.
    """

    def __init__(self, message: str, line: Optional[int] = None):
        super().__init__(message)
        self.line = line


class ContinuityError(GrammarError):
    """A segment does not start where the previous segment ended."""


class PreconditionError(LemLibPathError, RuntimeError):
    """Export was requested for something that cannot be exported."""


class ValidationError(LemLibPathError, ValueError):
    """A configuration field was assigned a value outside its domain."""

    def __init__(self, field: str, value: Any, reason: str = "invalid value"):
        super().__init__(f"{field}: {reason} ({value!r})")
        self.field = field
        self.value = value
