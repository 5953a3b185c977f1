"""Default collaborators built on the bundled species table."""

from tradecord.catalog.evolution import CatalogEvolutionResolver
from tradecord.catalog.gifts import CatalogMysteryGiftProvider
from tradecord.catalog.growth import GrowthCurves
from tradecord.catalog.species import DEFAULT_SPECIES_PATH, SpeciesCatalog, normalize_name
from tradecord.catalog.validity import RegexWordFilter, RulesValidityChecker

__all__ = [
    "DEFAULT_SPECIES_PATH",
    "CatalogEvolutionResolver",
    "CatalogMysteryGiftProvider",
    "GrowthCurves",
    "RegexWordFilter",
    "RulesValidityChecker",
    "SpeciesCatalog",
    "normalize_name",
]
