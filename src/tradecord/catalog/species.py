"""Bundled species table.

The table is a JSON document validated with pydantic on load. Each entry maps
onto ``SpeciesInfo`` plus the evolution rules consumed by
``CatalogEvolutionResolver``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, Field, TypeAdapter

from tradecord.domain.enums import TimeOfDay
from tradecord.interfaces.catalog import SpeciesInfo

logger = logging.getLogger(__name__)

DEFAULT_SPECIES_PATH = Path(__file__).with_name("species.json")


class EvolutionRule(BaseModel):
    """One outgoing edge of a species' evolution tree."""

    into: int
    method: str = Field(pattern="^(level|item|friendship)$")
    form: int = 0
    level: int | None = None
    items: list[int] = Field(default_factory=list)
    time: TimeOfDay | None = None
    secondary: int | None = None
    form_from_branch: bool = False


class SpeciesEntry(BaseModel):
    id: int = Field(gt=0)
    name: str = Field(min_length=1)
    base_exp: int = Field(ge=0)
    growth: str
    base_friendship: int = Field(default=50, ge=0, le=255)
    hatch_cycles: int = Field(default=20, gt=0)
    abilities: list[str] = Field(default_factory=list)
    forms: list[str] = Field(default_factory=lambda: [""])
    legendary: bool = False
    mythical: bool = False
    cherish_only: bool = False
    breedable: bool = True
    gmax: bool = False
    gifts: list[int] = Field(default_factory=list)
    evolutions: list[EvolutionRule] = Field(default_factory=list)

    def to_info(self) -> SpeciesInfo:
        return SpeciesInfo(
            id=self.id,
            name=self.name,
            base_exp=self.base_exp,
            growth=self.growth,
            base_friendship=self.base_friendship,
            hatch_cycles=self.hatch_cycles,
            abilities=tuple(self.abilities),
            forms=tuple(self.forms),
            legendary=self.legendary,
            mythical=self.mythical,
            cherish_only=self.cherish_only,
            breedable=self.breedable,
            gmax=self.gmax,
            gifts=tuple(self.gifts),
        )


_ENTRIES = TypeAdapter(list[SpeciesEntry])


def normalize_name(raw: str) -> str:
    """Lowercase and drop everything but letters and digits."""
    return "".join(ch for ch in raw.lower() if ch.isalnum())


class SpeciesCatalog:
    """``ISpeciesCatalog`` over a list of validated entries."""

    def __init__(self, entries: list[SpeciesEntry]) -> None:
        if not entries:
            raise ValueError("species catalog cannot be empty")
        self._entries = {entry.id: entry for entry in entries}
        self._info = {entry.id: entry.to_info() for entry in entries}
        self._by_name = {normalize_name(entry.name): entry.id for entry in entries}
        self._pool = sorted(entry.id for entry in entries if not entry.cherish_only)

    @classmethod
    def from_file(cls, path: Path | None = None) -> SpeciesCatalog:
        source = path or DEFAULT_SPECIES_PATH
        entries = _ENTRIES.validate_json(source.read_bytes())
        logger.info("loaded %d species from %s", len(entries), source)
        return cls(entries)

    def get(self, species: int) -> SpeciesInfo | None:
        return self._info.get(species)

    def find(self, name: str) -> SpeciesInfo | None:
        species = self._by_name.get(normalize_name(name))
        return self._info.get(species) if species is not None else None

    def pool(self) -> list[int]:
        return list(self._pool)

    def dex_size(self) -> int:
        return len(self._info)

    def form_suffix(self, species: int, form: int) -> str:
        info = self._info.get(species)
        if info is None or not 0 <= form < len(info.forms):
            return ""
        return info.forms[form]

    def find_form(self, species: int, suffix: str) -> int | None:
        """Index of the form whose suffix matches ``suffix`` (``-Origin`` or ``origin``)."""

        info = self._info.get(species)
        if info is None:
            return None
        key = normalize_name(suffix)
        for index, form in enumerate(info.forms):
            if normalize_name(form) == key:
                return index
        return None

    def evolutions(self, species: int) -> list[EvolutionRule]:
        entry = self._entries.get(species)
        return list(entry.evolutions) if entry is not None else []

    def species_ids(self) -> list[int]:
        return sorted(self._info)
