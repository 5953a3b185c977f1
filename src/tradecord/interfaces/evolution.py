"""Evolution-rules resolver protocol."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from tradecord.domain.enums import TimeOfDay
from tradecord.domain.models import Creature


@dataclass(slots=True)
class EvolutionOutcome:
    """Result of asking the resolver to evolve a creature.

    ``creature`` is the evolved copy; ``secondary`` is an extra creature
    produced by split evolutions and must be registered as a new catch.
    """

    creature: Creature
    secondary: Creature | None = None


class IEvolutionResolver(Protocol):
    """Species/form transitions and breeding ancestry."""

    def base_ancestor(self, species: int, form: int) -> tuple[int, int] | None:
        """Return the ``(species, form)`` at the root of the evolution tree.

        ``None`` means the species cannot produce eggs.
        """
        ...

    def evolve(
        self,
        creature: Creature,
        *,
        time_of_day: TimeOfDay,
        branch: str | None = None,
    ) -> EvolutionOutcome | None:
        """Evolve ``creature`` if a rule applies, otherwise return ``None``."""
        ...
