"""Wall-clock helpers."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from tradecord.domain.enums import TimeOfDay


class SystemClock:
    """``IClock`` returning the current UTC time."""

    def now(self) -> datetime:
        return datetime.now(UTC)


def local_time_of_day(now: datetime, offset_hours: int) -> TimeOfDay:
    """Bucket the player's local hour (UTC ``now`` shifted by ``offset_hours``)."""

    hour = (now + timedelta(hours=offset_hours)).hour
    if hour == 5:
        return TimeOfDay.DAWN
    if 6 <= hour < 10:
        return TimeOfDay.MORNING
    if 10 <= hour < 17:
        return TimeOfDay.DAY
    if 17 <= hour < 20:
        return TimeOfDay.EVENING
    return TimeOfDay.NIGHT
