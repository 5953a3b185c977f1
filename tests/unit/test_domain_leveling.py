"""Tests for buddy experience, friendship, and egg hatching."""

from __future__ import annotations

from tradecord.catalog import GrowthCurves, SpeciesCatalog
from tradecord.domain.enums import ItemKind, ShinyTier
from tradecord.domain.leveling import (
    advance_egg,
    apply_experience,
    experience_gain,
    round_half_away,
)
from tradecord.domain.models import Creature
from tradecord.domain.rules_config import LevelingRules

CATALOG = SpeciesCatalog.from_file()
CURVES = GrowthCurves()
RULES = LevelingRules()
PIKACHU = CATALOG.get(25)
BULBASAUR = CATALOG.get(1)
CHARMANDER = CATALOG.get(4)


def _buddy(level: int, **overrides) -> Creature:
    values = {
        "species": 25,
        "level": level,
        "exp": CURVES.exp_for_level(PIKACHU.growth, level),
        "friendship": 50,
        "nickname": "Sparky",
    }
    values.update(overrides)
    return Creature(**values)


def test_round_half_away_from_zero():
    assert round_half_away(2.5) == 3
    assert round_half_away(-2.5) == -3
    assert round_half_away(2.4) == 2


class TestExperienceGain:
    def test_equal_levels(self):
        encounter = Creature(species=1, level=10)
        assert experience_gain(encounter, BULBASAUR, 10, RULES) == 128

    def test_shiny_encounters_are_worth_more(self):
        encounter = Creature(species=1, level=10, shiny=ShinyTier.STAR)
        assert experience_gain(encounter, BULBASAUR, 10, RULES) == 141

    def test_small_gains_are_replaced_by_the_floor_award(self):
        encounter = Creature(species=1, level=1)
        assert experience_gain(encounter, BULBASAUR, 1, RULES) == RULES.floor_exp_award


class TestApplyExperience:
    def test_level_up_adds_friendship(self):
        buddy = _buddy(5)
        result = apply_experience(
            buddy, PIKACHU, Creature(species=1, level=10), BULBASAUR,
            exp_table=CURVES, rules=RULES,
        )
        assert result.exp_gained == 202
        assert result.leveled_up
        assert buddy.level == 6
        assert buddy.friendship == 52

    def test_level_is_capped(self):
        buddy = _buddy(99, exp=999_990)
        result = apply_experience(
            buddy, PIKACHU, Creature(species=1, level=1), BULBASAUR,
            exp_table=CURVES, rules=RULES,
        )
        assert result.new_level == RULES.max_level
        assert buddy.exp == CURVES.exp_for_level(PIKACHU.growth, RULES.max_level)

    def test_soothe_bell_and_shiny_encounter_bonuses(self):
        buddy = _buddy(50, friendship=100, held_item=int(ItemKind.SOOTHE_BELL))
        encounter = Creature(species=1, level=1, shiny=ShinyTier.SQUARE)
        result = apply_experience(
            buddy, PIKACHU, encounter, BULBASAUR, exp_table=CURVES, rules=RULES
        )
        assert not result.leveled_up
        assert buddy.friendship == 107

    def test_bonuses_never_push_past_the_ceiling(self):
        buddy = _buddy(50, friendship=254, held_item=int(ItemKind.SOOTHE_BELL))
        apply_experience(
            buddy, PIKACHU, Creature(species=1, level=1, shiny=ShinyTier.STAR), BULBASAUR,
            exp_table=CURVES, rules=RULES,
        )
        assert buddy.friendship == 254


class TestAdvanceEgg:
    def test_countdown(self):
        egg = Creature(species=4, friendship=20, is_egg=True, nickname="Egg")
        assert not advance_egg(egg, CHARMANDER, RULES, hatch_step=5)
        assert egg.friendship == 15
        assert egg.is_egg

    def test_hatching_resets_the_egg(self):
        egg = Creature(species=4, friendship=5, is_egg=True, nickname="Egg", is_nicknamed=True)
        assert advance_egg(egg, CHARMANDER, RULES, hatch_step=5)
        assert not egg.is_egg
        assert egg.nickname == "Charmander"
        assert not egg.is_nicknamed
        assert egg.friendship == CHARMANDER.base_friendship


class TestGrowthCurves:
    def test_level_one_needs_no_experience(self):
        assert CURVES.exp_for_level("slow", 1) == 0

    def test_medium_fast_is_cubic(self):
        assert CURVES.exp_for_level("medium_fast", 10) == 1000

    def test_curves_are_monotonic(self):
        for growth in ("erratic", "fast", "medium_fast", "medium_slow", "slow", "fluctuating"):
            values = [CURVES.exp_for_level(growth, level) for level in range(1, 101)]
            assert values == sorted(values), growth
