"""Utility helpers for the TradeCord engine."""

from tradecord.utils.clock import SystemClock, local_time_of_day
from tradecord.utils.rng import RandomRoller

__all__ = ["RandomRoller", "SystemClock", "local_time_of_day"]
