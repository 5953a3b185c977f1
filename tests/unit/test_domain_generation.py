"""Tests for catch-time generation with scripted rolls."""

from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime

import pytest

from tradecord.config import Settings
from tradecord.domain.enums import Ball, ItemKind, Perk, ShinyTier
from tradecord.domain.generation import (
    EventState,
    PlayerModifiers,
    RollSet,
    generate,
    shiny_tier,
)
from tradecord.domain.models import (
    Catch,
    CatchID,
    Daycare,
    DaycareSlot,
    PlayerAggregate,
    PlayerID,
    TrainerInfo,
)
from tradecord.domain.rules_config import DEFAULT_RULES
from tradecord.errors import GenerationError


class RejectEverything:
    def is_valid(self, creature):
        return False


@pytest.fixture
def player():
    return PlayerAggregate(
        player_id=PlayerID(1),
        username="Ash",
        trainer=TrainerInfo(ot_name="Ash", ot_gender="Male", tid=11, sid=22, language="English"),
    )


def _generate(player, services, event=None):
    return generate(player, services=services.generation, rules=services.rules, event=event)


def _slot(catch_id: int, species: int, ball: Ball = Ball.ULTRA, shiny: bool = False):
    return DaycareSlot(catch_id=CatchID(catch_id), species=species, form="", ball=ball, shiny=shiny)


class TestCatchRoll:
    def test_forced_catch_produces_a_wild_creature(self, player, services, roller):
        roller.prefer = [25]
        roller.script_catch(level=12)
        outcome = _generate(player, services)

        assert not outcome.failed_catch
        assert outcome.main is not None
        assert outcome.main.species == 25
        assert outcome.main.level == 12
        assert outcome.main.ball is Ball.POKE
        assert outcome.main.shiny is ShinyTier.NONE
        assert (outcome.main.ot_name, outcome.main.tid, outcome.main.sid) == ("Ash", 11, 22)
        assert outcome.egg is None
        assert outcome.item is None

    def test_low_roll_fails_the_catch(self, player, services, roller):
        roller.script_catch(caught=False)
        outcome = _generate(player, services)
        assert outcome.failed_catch
        assert outcome.main is None

    def test_item_still_drops_after_a_failed_catch(self, player, services, roller):
        roller.script_catch(caught=False, item=100, charm=0)
        outcome = _generate(player, services)
        assert outcome.failed_catch
        assert outcome.item is ItemKind.SHINY_CHARM

    def test_charm_bias_switches_to_sweets_once_bootstrapped(self, player, services, roller):
        player.items.add(ItemKind.SHINY_CHARM, 20)
        roller.script_catch(caught=False, item=100, charm=0)
        assert _generate(player, services).item is ItemKind.LOVE_SWEET

    def test_unbiased_item_roll_picks_from_every_kind(self, player, services, roller):
        roller.prefer = [ItemKind.EVERSTONE]
        roller.script_catch(caught=False, item=100, charm=100)
        assert _generate(player, services).item is ItemKind.EVERSTONE

    def test_shiny_roll_marks_the_catch(self, player, services, roller):
        roller.script_catch(shiny=150)
        outcome = _generate(player, services)
        assert outcome.main.shiny is ShinyTier.SQUARE


class TestSpeciesSelection:
    def test_species_boost_overrides_the_pool(self, player, services, roller):
        player.perks.active = [Perk.SPECIES_BOOST]
        player.perks.species_boost = 133
        roller.script_catch(boost=98)
        outcome = _generate(player, services)
        assert outcome.main.species == 133

    def test_boost_needs_a_target(self, player, services, roller):
        player.perks.active = [Perk.SPECIES_BOOST]
        roller.script_catch(boost=100)
        assert _generate(player, services).main.species == 1

    def test_event_species_are_gifted(self, player, services, roller):
        roller.script_catch(level=None)
        event = EventState(active=True, species=(133,), form=-1)
        outcome = _generate(player, services, event)
        assert outcome.main.species == 133
        assert outcome.main.ball is Ball.CHERISH
        assert outcome.main.fateful
        assert outcome.cherish

    def test_cherish_roll_escalates_to_a_gift(self, player, services, roller):
        roller.prefer = [6]
        roller.script_catch(cherish=100, level=None)
        outcome = _generate(player, services)
        assert outcome.cherish
        assert outcome.main.ball is Ball.CHERISH
        assert outcome.main.level == 50
        assert outcome.main.ot_name == "Ash"

    def test_cherish_only_species_never_appear_in_the_wild_pool(self, services):
        pool = services.catalog.pool()
        assert 151 not in pool
        assert 808 not in pool


class TestEggs:
    def test_compatible_daycare_lays_an_egg(self, player, services, roller):
        player.daycare = Daycare(slot1=_slot(0, 5, Ball.MASTER), slot2=_slot(1, 4))
        roller.script_catch(egg=100)
        outcome = _generate(player, services)
        assert outcome.egg is not None
        assert outcome.egg.species == 4
        assert outcome.egg.is_egg
        assert outcome.egg.level == 1
        assert outcome.egg.ball is Ball.POKE
        assert outcome.egg.tid == 11

    def test_eggs_in_daycare_do_not_breed(self, player, services, roller):
        player.daycare = Daycare(slot1=_slot(0, 4), slot2=_slot(1, 4))
        player.catches[CatchID(1)] = Catch(
            id=CatchID(1),
            species="Egg",
            form="",
            shiny=False,
            ball="Poke",
            nickname="Egg",
            payload=b"{}",
            egg=True,
        )
        roller.script_catch(egg=100)
        assert _generate(player, services).egg is None

    def test_egg_roll_below_rate_lays_nothing(self, player, services, roller):
        player.daycare = Daycare(slot1=_slot(0, 4), slot2=_slot(1, 4))
        roller.script_catch(egg=10)
        assert _generate(player, services).egg is None


class TestValidation:
    def test_invalid_creature_raises_generation_error(self, player, services, roller):
        roller.script_catch()
        generation = replace(services.generation, validity=RejectEverything())
        with pytest.raises(GenerationError) as excinfo:
            generate(player, services=generation, rules=services.rules)
        assert "generating a catch" in excinfo.value.message
        assert excinfo.value.diagnostics["species"] == 1


class TestModifiers:
    def test_perks_charms_and_abilities_are_added(self):
        rolls = RollSet(
            catch=10, egg=10, item=10, cherish=10, gmax=10,
            species_boost=10, shiny=10, egg_shiny=10, charm=10, species=1,
        )
        modifiers = PlayerModifiers(
            perks={Perk.CATCH_BOOST: 2, Perk.CHERISH_BOOST: 1, Perk.GMAX_BOOST: 3},
            shiny_charms=4,
            buddy_ability="flame-body",
        )
        boosted = rolls.boosted(modifiers, DEFAULT_RULES)
        assert boosted.catch == 12
        assert boosted.cherish == 12
        assert boosted.gmax == 16
        assert boosted.shiny == 12
        assert boosted.egg == 20
        assert boosted.item == 10

    @pytest.mark.parametrize(
        ("roll", "tier"),
        [(0, ShinyTier.NONE), (144, ShinyTier.NONE), (145, ShinyTier.STAR),
         (148, ShinyTier.SQUARE)],
    )
    def test_shiny_tiers(self, roll, tier):
        assert shiny_tier(roll, DEFAULT_RULES) is tier


class TestEventState:
    def test_event_ends_after_its_deadline(self):
        settings = Settings(
            _env_file=None, enable_event=True, event_end="2024-01-01T00:00:00",
            event_species=[133],
        )
        assert not EventState.from_settings(settings, datetime(2024, 2, 1, tzinfo=UTC)).active
        assert EventState.from_settings(settings, datetime(2023, 12, 1, tzinfo=UTC)).active

    def test_disabled_event_is_inactive(self):
        settings = Settings(_env_file=None, event_species=[133])
        assert not EventState.from_settings(settings, datetime(2024, 1, 1, tzinfo=UTC)).active
