"""Process-level collaborators: clock, randomness, single-instance guard."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol, TypeVar

T = TypeVar("T")


class IClock(Protocol):
    """Wall-clock source (timezone-aware UTC)."""

    def now(self) -> datetime:
        ...


class IRoller(Protocol):
    """Source of independent random draws."""

    def randint(self, low: int, high: int) -> int:
        """Return an integer ``N`` with ``low <= N <= high``."""
        ...

    def choice(self, options: Sequence[T]) -> T:
        ...


class ISingleInstanceGuard(Protocol):
    """Ensures only one engine process writes to the store."""

    def acquire(self) -> None:
        """Claim the instance slot or raise ``AnotherInstanceRunning``."""
        ...

    def release(self) -> None:
        ...
