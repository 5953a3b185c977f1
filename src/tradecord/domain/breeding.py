"""Daycare compatibility and egg synthesis."""

from __future__ import annotations

from collections.abc import Collection

from tradecord.domain.enums import Ball, ShinyTier
from tradecord.domain.models import Creature, Daycare, DaycareSlot, TrainerInfo, with_trainer
from tradecord.domain.rules_config import BreedingRules, GenerationRules
from tradecord.interfaces.catalog import ISpeciesCatalog
from tradecord.interfaces.evolution import IEvolutionResolver
from tradecord.interfaces.runtime import IRoller

Ancestor = tuple[int, int]

EGG_NICKNAME = "Egg"
_INHERIT_AS_POKE = frozenset({Ball.MASTER, Ball.CHERISH})


def slot_ancestor(
    slot: DaycareSlot | None,
    *,
    resolver: IEvolutionResolver,
    catalog: ISpeciesCatalog,
) -> Ancestor | None:
    """Base-evolution ancestor of a daycare occupant, or ``None`` if it cannot breed."""

    if slot is None:
        return None
    form = catalog.find_form(slot.species, slot.form) or 0
    return resolver.base_ancestor(slot.species, form)


def can_breed(
    slot1: DaycareSlot | None,
    slot2: DaycareSlot | None,
    *,
    resolver: IEvolutionResolver,
    catalog: ISpeciesCatalog,
    eggs: Collection[int] = (),
) -> bool:
    """Whether two daycare slots can produce an egg.

    Both slots must be occupied by non-egg catches whose species share a
    base-evolution ancestor. The relation is symmetric.

    Args:
        slot1: First daycare slot
        slot2: Second daycare slot
        resolver: Evolution resolver providing base ancestors
        catalog: Species catalog used to resolve cached form suffixes
        eggs: Catch ids currently flagged as eggs

    Returns:
        bool: True when an egg can be produced
    """
    if slot1 is None or slot2 is None:
        return False
    if slot1.catch_id in eggs or slot2.catch_id in eggs:
        return False
    first = slot_ancestor(slot1, resolver=resolver, catalog=catalog)
    second = slot_ancestor(slot2, resolver=resolver, catalog=catalog)
    if first is None or second is None:
        return False
    return first[0] == second[0]


def egg_shiny_tier(
    roll: float, daycare: Daycare, *, rates: GenerationRules, rules: BreedingRules
) -> ShinyTier:
    both_shiny = all(slot is not None and slot.shiny for slot in daycare.slots)
    total = roll + (rules.shiny_parents_bonus if both_shiny else 0)
    if total >= rates.shiny_roll_ceiling - rates.square_shiny_rate:
        return ShinyTier.SQUARE
    if total >= rates.shiny_roll_ceiling - rates.star_shiny_rate:
        return ShinyTier.STAR
    return ShinyTier.NONE


def synthesize_egg(
    daycare: Daycare,
    *,
    trainer: TrainerInfo,
    resolver: IEvolutionResolver,
    catalog: ISpeciesCatalog,
    roller: IRoller,
    shiny_roll: float,
    rates: GenerationRules,
    rules: BreedingRules,
) -> Creature:
    """Build the egg produced by a compatible daycare pair.

    Slot 1's base form is the template unless only slot 2 resolves to an
    ancestor. The ball is inherited from the template parent (master and
    cherish balls become poke balls).

    Raises:
        ValueError: If neither occupant resolves to a breedable ancestor
    """
    candidates = [
        (slot, slot_ancestor(slot, resolver=resolver, catalog=catalog)) for slot in daycare.slots
    ]
    qualifying = [(slot, ancestor) for slot, ancestor in candidates if ancestor is not None]
    if not qualifying:
        raise ValueError("no daycare occupant can produce an egg")
    parent, (species, form) = qualifying[0]
    assert parent is not None

    info = catalog.get(species)
    if info is None:
        raise ValueError(f"unknown egg species {species}")
    ball = Ball.POKE if parent.ball in _INHERIT_AS_POKE else parent.ball
    egg = Creature(
        species=species,
        form=form,
        level=1,
        exp=0,
        friendship=info.hatch_cycles,
        shiny=egg_shiny_tier(shiny_roll, daycare, rates=rates, rules=rules),
        ball=ball,
        nickname=EGG_NICKNAME,
        is_egg=True,
        ability=roller.choice(info.abilities) if info.abilities else "",
    )
    return with_trainer(egg, trainer)
