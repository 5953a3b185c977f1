"""Buddy evolution preconditions and time-of-day handling."""

from __future__ import annotations

from datetime import datetime

from tradecord.domain.enums import ItemKind, TimeOfDay
from tradecord.domain.models import Creature
from tradecord.errors import StateConflictError
from tradecord.interfaces.evolution import EvolutionOutcome, IEvolutionResolver
from tradecord.utils.clock import local_time_of_day


def evolution_time(now: datetime, offset_hours: int) -> TimeOfDay:
    """Local time-of-day bucket for evolution; dawn counts as morning."""

    bucket = local_time_of_day(now, offset_hours)
    return TimeOfDay.MORNING if bucket is TimeOfDay.DAWN else bucket


def evolve_buddy(
    creature: Creature,
    *,
    resolver: IEvolutionResolver,
    time_of_day: TimeOfDay,
    branch: str | None = None,
) -> EvolutionOutcome | None:
    """Ask the resolver to evolve the buddy's creature.

    Raises:
        StateConflictError: If the creature is an egg or holds an everstone
    """
    if creature.is_egg:
        raise StateConflictError("Eggs cannot evolve.")
    if creature.held_item == ItemKind.EVERSTONE:
        raise StateConflictError("Your buddy cannot evolve while holding an Everstone.")
    return resolver.evolve(creature, time_of_day=time_of_day, branch=branch)
