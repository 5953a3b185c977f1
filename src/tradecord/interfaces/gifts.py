"""Mystery-item (special distribution) provider protocol."""

from __future__ import annotations

from typing import Protocol

from tradecord.domain.models import Creature


class IMysteryGiftProvider(Protocol):
    """Source of special-distribution creatures for the cherish tier."""

    def gift_for(self, species: int, *, gmax: bool = False) -> Creature | None:
        """Return a template creature distributed for ``species``, if any.

        The template carries no trainer metadata; the generation engine stamps
        the player's onto it.
        """
        ...
