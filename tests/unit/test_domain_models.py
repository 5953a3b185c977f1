"""Tests for the player aggregate, item bag, and catch id allocation."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from tradecord.domain.enums import Ball, ItemKind
from tradecord.domain.models import (
    Buddy,
    Catch,
    CatchID,
    Creature,
    Daycare,
    DaycareSlot,
    ItemBag,
    PlayerAggregate,
    PlayerID,
    TrainerInfo,
    allocate_catch_id,
    with_trainer,
)


def _catch(catch_id: int, **overrides) -> Catch:
    values = {
        "id": CatchID(catch_id),
        "species": "Pikachu",
        "form": "",
        "shiny": False,
        "ball": "Poke",
        "nickname": "Pikachu",
        "payload": b"{}",
    }
    values.update(overrides)
    return Catch(**values)


class TestAllocateCatchId:
    def test_empty_collection_starts_at_zero(self):
        assert allocate_catch_id([]) == 0

    def test_fills_the_first_gap(self):
        assert allocate_catch_id([0, 1, 3, 4]) == 2

    def test_appends_after_a_dense_run(self):
        assert allocate_catch_id(range(5)) == 5

    @given(st.sets(st.integers(min_value=0, max_value=200)))
    def test_smallest_free_id(self, taken):
        allocated = allocate_catch_id(taken)
        assert allocated not in taken
        assert all(candidate in taken for candidate in range(allocated))


class TestItemBag:
    def test_add_returns_previous_count(self):
        bag = ItemBag()
        assert bag.add(ItemKind.SHINY_CHARM) == 0
        assert bag.add(ItemKind.SHINY_CHARM, 2) == 1
        assert bag.count(ItemKind.SHINY_CHARM) == 3

    def test_removing_the_last_unit_drops_the_entry(self):
        bag = ItemBag({ItemKind.EVERSTONE: 1})
        assert bag.remove(ItemKind.EVERSTONE) == 0
        assert ItemKind.EVERSTONE not in bag.counts

    def test_cannot_remove_more_than_held(self):
        bag = ItemBag({ItemKind.EVERSTONE: 1})
        with pytest.raises(ValueError, match="only 1 held"):
            bag.remove(ItemKind.EVERSTONE, 2)

    def test_non_positive_amounts_are_rejected(self):
        bag = ItemBag()
        with pytest.raises(ValueError):
            bag.add(ItemKind.EVERSTONE, 0)

    def test_discard_returns_held_count(self):
        bag = ItemBag({ItemKind.LUCKY_EGG: 4})
        assert bag.discard(ItemKind.LUCKY_EGG) == 4
        assert bag.discard(ItemKind.LUCKY_EGG) == 0

    @given(st.lists(st.tuples(st.booleans(), st.integers(min_value=1, max_value=5)), max_size=30))
    def test_counts_never_reach_zero(self, operations):
        bag = ItemBag()
        for adding, amount in operations:
            if adding:
                bag.add(ItemKind.STAR_SWEET, amount)
            elif bag.count(ItemKind.STAR_SWEET) >= amount:
                bag.remove(ItemKind.STAR_SWEET, amount)
            assert all(count > 0 for count in bag.counts.values())


class TestPlayerAggregate:
    def test_traded_catches_are_hidden(self):
        player = PlayerAggregate(player_id=PlayerID(1), username="Ash")
        player.catches[CatchID(0)] = _catch(0, traded=True)
        player.catches[CatchID(1)] = _catch(1)
        assert player.visible_catch(0) is None
        assert player.visible_catch(1) is not None
        assert player.visible_catch(7) is None

    def test_protection_covers_daycare_buddy_and_favorites(self):
        player = PlayerAggregate(player_id=PlayerID(1), username="Ash")
        for catch_id in range(4):
            player.catches[CatchID(catch_id)] = _catch(catch_id, favorite=catch_id == 2)
        player.daycare = Daycare(
            slot1=DaycareSlot(catch_id=CatchID(0), species=25, form="", ball=Ball.POKE, shiny=False)
        )
        player.buddy = Buddy(catch_id=CatchID(1), nickname="Pikachu")
        assert [player.is_protected(i) for i in range(4)] == [True, True, True, False]

    def test_daycare_flags(self):
        slot = DaycareSlot(catch_id=CatchID(3), species=25, form="", ball=Ball.POKE, shiny=False)
        assert Daycare().is_empty
        assert not Daycare(slot2=slot).is_full
        assert Daycare(slot1=slot, slot2=slot).is_full
        assert Daycare(slot2=slot).holds(3)


def test_with_trainer_stamps_metadata():
    trainer = TrainerInfo(ot_name="Red", ot_gender="Male", tid=1, sid=2, language="Japanese")
    creature = with_trainer(Creature(species=25), trainer)
    assert (creature.ot_name, creature.tid, creature.sid, creature.language) == (
        "Red",
        1,
        2,
        "Japanese",
    )
