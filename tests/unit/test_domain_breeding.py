"""Tests for daycare compatibility and egg synthesis."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from tradecord.catalog import CatalogEvolutionResolver, SpeciesCatalog
from tradecord.domain.breeding import can_breed, egg_shiny_tier, synthesize_egg
from tradecord.domain.enums import Ball, ShinyTier
from tradecord.domain.models import CatchID, Daycare, DaycareSlot, TrainerInfo
from tradecord.domain.rules_config import BreedingRules, GenerationRules
from tradecord.utils.rng import RandomRoller

CATALOG = SpeciesCatalog.from_file()
RESOLVER = CatalogEvolutionResolver(CATALOG)


def _slot(catch_id: int, species: int, *, ball: Ball = Ball.POKE, shiny: bool = False,
          form: str = "") -> DaycareSlot:
    return DaycareSlot(catch_id=CatchID(catch_id), species=species, form=form, ball=ball,
                       shiny=shiny)


slots = st.builds(
    _slot,
    st.integers(min_value=0, max_value=5),
    st.sampled_from(CATALOG.species_ids()),
    shiny=st.booleans(),
)


class TestCanBreed:
    def test_same_evolution_line_is_compatible(self):
        assert can_breed(_slot(0, 4), _slot(1, 6), resolver=RESOLVER, catalog=CATALOG)

    def test_baby_and_evolved_forms_share_an_ancestor(self):
        assert can_breed(_slot(0, 172), _slot(1, 26), resolver=RESOLVER, catalog=CATALOG)

    def test_different_lines_are_incompatible(self):
        assert not can_breed(_slot(0, 4), _slot(1, 7), resolver=RESOLVER, catalog=CATALOG)

    def test_unbreedable_species(self):
        assert not can_breed(_slot(0, 150), _slot(1, 150), resolver=RESOLVER, catalog=CATALOG)

    def test_empty_slot(self):
        assert not can_breed(_slot(0, 4), None, resolver=RESOLVER, catalog=CATALOG)

    def test_eggs_cannot_breed(self):
        assert not can_breed(
            _slot(0, 4), _slot(1, 4), resolver=RESOLVER, catalog=CATALOG, eggs={1}
        )

    @given(slots, slots)
    def test_compatibility_is_symmetric(self, first, second):
        forward = can_breed(first, second, resolver=RESOLVER, catalog=CATALOG)
        backward = can_breed(second, first, resolver=RESOLVER, catalog=CATALOG)
        assert forward == backward


class TestSynthesizeEgg:
    def _egg(self, daycare, shiny_roll=0):
        return synthesize_egg(
            daycare,
            trainer=TrainerInfo(ot_name="Brock", tid=7, sid=8),
            resolver=RESOLVER,
            catalog=CATALOG,
            roller=RandomRoller(3),
            shiny_roll=shiny_roll,
            rates=GenerationRules(),
            rules=BreedingRules(),
        )

    def test_egg_is_the_base_species_at_level_one(self):
        egg = self._egg(Daycare(slot1=_slot(0, 26, ball=Ball.LUXURY), slot2=_slot(1, 25)))
        assert egg.species == 172
        assert egg.is_egg
        assert egg.level == 1
        assert egg.ball is Ball.LUXURY
        assert egg.friendship == CATALOG.get(172).hatch_cycles
        assert egg.ot_name == "Brock"

    @pytest.mark.parametrize("ball", [Ball.MASTER, Ball.CHERISH])
    def test_special_balls_fall_back_to_poke(self, ball):
        egg = self._egg(Daycare(slot1=_slot(0, 4, ball=ball), slot2=_slot(1, 5)))
        assert egg.ball is Ball.POKE

    def test_regional_form_is_kept_only_for_the_base_species(self):
        egg = self._egg(Daycare(slot1=_slot(0, 744), slot2=_slot(1, 745, form="-Midnight")))
        assert (egg.species, egg.form) == (744, 0)

    def test_no_qualifying_parent(self):
        with pytest.raises(ValueError, match="no daycare occupant"):
            self._egg(Daycare(slot1=_slot(0, 150), slot2=_slot(1, 132)))


class TestEggShiny:
    def test_shiny_parents_raise_the_odds(self):
        rates, rules = GenerationRules(), BreedingRules()
        plain = Daycare(slot1=_slot(0, 4), slot2=_slot(1, 4))
        shiny = Daycare(slot1=_slot(0, 4, shiny=True), slot2=_slot(1, 4, shiny=True))
        assert egg_shiny_tier(140, plain, rates=rates, rules=rules) is ShinyTier.NONE
        assert egg_shiny_tier(140, shiny, rates=rates, rules=rules) is ShinyTier.STAR
        assert egg_shiny_tier(143, shiny, rates=rates, rules=rules) is ShinyTier.SQUARE
