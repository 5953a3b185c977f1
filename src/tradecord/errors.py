"""Exceptions shared across the engine."""

from __future__ import annotations


class CommandError(Exception):
    """A user-facing failure; the message is shown verbatim and nothing is logged."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InputError(CommandError):
    """Malformed identifiers, unknown names, or out-of-range values."""


class StateConflictError(CommandError):
    """The target is traded, favorited, in daycare, or the buddy."""


class GenerationError(Exception):
    """A generated creature failed the validity check."""

    def __init__(self, message: str, *, diagnostics: dict[str, object] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.diagnostics = diagnostics or {}


class AnotherInstanceRunning(RuntimeError):
    """A second engine process was detected against the same store."""
