"""Declarative rule configuration for the TradeCord engine."""

from __future__ import annotations

from dataclasses import dataclass, field

from tradecord.config import Settings


@dataclass(frozen=True, slots=True)
class GenerationRules:
    """Rates (percent) and fixed bonuses for catch-time rolls."""

    catch_rate: int = 90
    egg_rate: int = 30
    item_rate: int = 20
    cherish_rate: int = 5
    gmax_rate: int = 5
    star_shiny_rate: int = 5
    square_shiny_rate: int = 2
    shiny_roll_ceiling: int = 150
    species_boost_threshold: int = 99
    buddy_ability_bonus: int = 10
    charm_bias_roll: int = 10  # item rolls at or below this bias toward the charm
    charm_bootstrap_limit: int = 20
    wild_min_level: int = 1
    wild_max_level: int = 60
    gmax_species: int = 809
    egg_abilities: tuple[str, ...] = ("flame-body", "steam-engine")
    item_abilities: tuple[str, ...] = ("pickup", "pickpocket")


@dataclass(frozen=True, slots=True)
class BreedingRules:
    """Egg synthesis constants."""

    shiny_parents_bonus: int = 5
    hatch_step: int = 5


@dataclass(frozen=True, slots=True)
class LevelingRules:
    """Experience and friendship constants for the buddy."""

    max_level: int = 100
    max_friendship: int = 255
    shiny_exp_multiplier: float = 1.10
    min_exp_gain: int = 100
    floor_exp_award: int = 175
    friendship_per_level: int = 2
    soothe_bell_bonus: int = 2
    shiny_encounter_bonus: int = 5


@dataclass(frozen=True, slots=True)
class DexRules:
    """Dex completion economy."""

    max_level: int = 20
    perk_cap: int = 5
    gift_register_missing_limit: int = 50
    completion_threshold: int | None = None  # None -> size of the species catalog


@dataclass(frozen=True, slots=True)
class RulesConfig:
    """Aggregate rules used by the engines."""

    generation: GenerationRules = field(default_factory=GenerationRules)
    breeding: BreedingRules = field(default_factory=BreedingRules)
    leveling: LevelingRules = field(default_factory=LevelingRules)
    dex: DexRules = field(default_factory=DexRules)


DEFAULT_RULES = RulesConfig()


def rules_from_settings(settings: Settings) -> RulesConfig:
    """Build a rules bundle with the configurable rates taken from settings."""

    generation = GenerationRules(
        catch_rate=settings.catch_rate,
        egg_rate=settings.egg_rate,
        item_rate=settings.item_rate,
        cherish_rate=settings.cherish_rate,
        gmax_rate=settings.gmax_rate,
        star_shiny_rate=settings.star_shiny_rate,
        square_shiny_rate=settings.square_shiny_rate,
    )
    return RulesConfig(generation=generation)
