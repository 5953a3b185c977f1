"""Protocol-based interfaces for the collaborators the engine consumes.

The core never imports a concrete catalog, resolver, or storage backend; the
wiring in ``tradecord.api.runtime`` picks defaults and tests inject fakes.
"""

from tradecord.interfaces.catalog import IExperienceTable, ISpeciesCatalog, SpeciesInfo
from tradecord.interfaces.evolution import EvolutionOutcome, IEvolutionResolver
from tradecord.interfaces.gifts import IMysteryGiftProvider
from tradecord.interfaces.runtime import IClock, IRoller, ISingleInstanceGuard
from tradecord.interfaces.storage import IPlayerRepository, IStorageExecutor
from tradecord.interfaces.validity import IValidityChecker, IWordFilter

__all__ = [
    "EvolutionOutcome",
    "IClock",
    "IEvolutionResolver",
    "IExperienceTable",
    "IMysteryGiftProvider",
    "IPlayerRepository",
    "IRoller",
    "ISingleInstanceGuard",
    "ISpeciesCatalog",
    "IStorageExecutor",
    "IValidityChecker",
    "IWordFilter",
    "SpeciesInfo",
]
