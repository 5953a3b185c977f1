"""Standard experience growth curves."""

from __future__ import annotations

from collections.abc import Callable


def _erratic(n: int) -> int:
    if n < 50:
        return n**3 * (100 - n) // 50
    if n < 68:
        return n**3 * (150 - n) // 100
    if n < 98:
        return n**3 * ((1911 - 10 * n) // 3) // 500
    return n**3 * (160 - n) // 100


def _fluctuating(n: int) -> int:
    if n < 15:
        return n**3 * ((n + 1) // 3 + 24) // 50
    if n < 36:
        return n**3 * (n + 14) // 50
    return n**3 * (n // 2 + 32) // 50


_CURVES: dict[str, Callable[[int], int]] = {
    "erratic": _erratic,
    "fast": lambda n: 4 * n**3 // 5,
    "medium_fast": lambda n: n**3,
    "medium_slow": lambda n: 6 * n**3 // 5 - 15 * n**2 + 100 * n - 140,
    "slow": lambda n: 5 * n**3 // 4,
    "fluctuating": _fluctuating,
}


class GrowthCurves:
    """``IExperienceTable`` computing thresholds from the closed-form curves."""

    max_level = 100

    def exp_for_level(self, growth: str, level: int) -> int:
        """Cumulative experience needed to be at ``level``.

        Raises:
            KeyError: If ``growth`` is not a known curve
        """
        curve = _CURVES[growth]
        if level <= 1:
            return 0
        return max(0, curve(min(level, self.max_level)))
