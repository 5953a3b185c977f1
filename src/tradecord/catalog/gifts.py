"""Mystery-gift provider backed by the species table's distribution list."""

from __future__ import annotations

from tradecord.domain.enums import Ball
from tradecord.domain.models import Creature
from tradecord.interfaces.catalog import ISpeciesCatalog


class CatalogMysteryGiftProvider:
    """``IMysteryGiftProvider`` building cherish-ball templates from ``SpeciesInfo.gifts``."""

    def __init__(self, catalog: ISpeciesCatalog) -> None:
        self._catalog = catalog

    def gift_for(self, species: int, *, gmax: bool = False) -> Creature | None:
        info = self._catalog.get(species)
        if info is None or not info.gifts:
            return None
        if gmax and not info.gmax:
            return None
        return Creature(
            species=species,
            level=info.gifts[0],
            friendship=info.base_friendship,
            ball=Ball.CHERISH,
            nickname=info.name,
            ability=info.abilities[0] if info.abilities else "",
            gmax=gmax,
            fateful=True,
        )
