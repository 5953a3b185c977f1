"""Species metadata and experience-curve protocols."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True, slots=True)
class SpeciesInfo:
    """Static metadata for one species."""

    id: int
    name: str
    base_exp: int
    growth: str
    base_friendship: int = 50
    hatch_cycles: int = 20
    abilities: tuple[str, ...] = ()
    forms: tuple[str, ...] = ("",)
    legendary: bool = False
    mythical: bool = False
    cherish_only: bool = False
    breedable: bool = True
    gmax: bool = False
    gifts: tuple[int, ...] = field(default=())  # levels of known event distributions


class ISpeciesCatalog(Protocol):
    """Lookup of species, forms, and abilities."""

    def get(self, species: int) -> SpeciesInfo | None:
        """Return metadata for ``species`` or ``None`` when unknown."""
        ...

    def find(self, name: str) -> SpeciesInfo | None:
        """Resolve a user-entered species name (case and punctuation insensitive)."""
        ...

    def pool(self) -> list[int]:
        """Species ids eligible for wild generation, in a stable order."""
        ...

    def dex_size(self) -> int:
        """Number of distinct species that make up a complete dex."""
        ...

    def species_ids(self) -> list[int]:
        """Every species id in the catalog, ascending."""
        ...

    def form_suffix(self, species: int, form: int) -> str:
        """Display suffix for a form, e.g. ``-Origin``; empty for the base form."""
        ...

    def find_form(self, species: int, suffix: str) -> int | None:
        """Index of the form whose display suffix matches ``suffix``."""
        ...


class IExperienceTable(Protocol):
    """Cumulative experience required to reach a level on a growth curve."""

    def exp_for_level(self, growth: str, level: int) -> int:
        ...
