"""Random number sources for the generation engines.

Production code draws from system entropy. Tests and replays can pass a seed
(an integer or any string, hashed to a stable 64-bit integer) so the same
sequence of rolls is produced every time.

Examples:
    >>> roller = RandomRoller("player-1:catch")
    >>> 0 <= roller.randint(0, 100) <= 100
    True
"""

from __future__ import annotations

import hashlib
import random
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def _seed_to_int(seed: str) -> int:
    """Convert a seed string to a stable 64-bit integer for random.Random().

    Args:
        seed: Seed string

    Returns:
        64-bit integer derived from SHA-256(seed)
    """
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big", signed=False)


class RandomRoller:
    """``IRoller`` backed by ``random.Random``."""

    def __init__(self, seed: int | str | None = None) -> None:
        if isinstance(seed, str):
            seed = _seed_to_int(seed)
        self._random = random.Random(seed)

    def randint(self, low: int, high: int) -> int:
        """Return an integer N such that low <= N <= high.

        Raises:
            ValueError: If low > high
        """
        if low > high:
            raise ValueError(f"low ({low}) cannot be greater than high ({high})")
        return self._random.randint(low, high)

    def choice(self, options: Sequence[T]) -> T:
        """Return a random element of a non-empty sequence."""
        if not options:
            raise ValueError("options list cannot be empty")
        return options[self._random.randint(0, len(options) - 1)]
