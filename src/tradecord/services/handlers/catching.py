"""Handlers for ``catch`` and ``trade``."""

from __future__ import annotations

import logging

from tradecord.domain.generation import generate
from tradecord.domain.leveling import advance_egg, apply_experience
from tradecord.domain.models import Creature, TradeMarker
from tradecord.domain.progression import register
from tradecord.errors import InputError, StateConflictError
from tradecord.services import staging
from tradecord.services.handlers.base import (
    CatchRole,
    Invocation,
    PendingCatch,
    display_name,
    item_label,
    load_creature,
    parse_catch_id,
    with_article,
)

logger = logging.getLogger(__name__)


def _species_label(inv: Invocation, creature: Creature) -> str:
    catalog = inv.services.catalog
    info = catalog.get(creature.species)
    name = (info.name if info is not None else str(creature.species)) + catalog.form_suffix(
        creature.species, creature.form
    )
    return f"**{name}**" if creature.is_shiny else name


def advance_buddy(inv: Invocation, encounter: Creature | None) -> str:
    """Hatch-countdown or level the buddy after a catch attempt.

    Returns the message fragment describing what happened.
    """
    player = inv.player
    services = inv.services
    if player.buddy.catch_id is None:
        return ""
    catch = player.visible_catch(player.buddy.catch_id)
    if catch is None:
        return ""
    creature = load_creature(catch)
    info = services.catalog.get(creature.species)
    if info is None:
        logger.warning(
            "buddy of player %s has unknown species %s", player.player_id, creature.species
        )
        return ""

    rules = services.rules
    if creature.is_egg:
        message = ""
        if advance_egg(creature, info, rules.leveling, hatch_step=rules.breeding.hatch_step):
            message = "\nUh-oh!... You've just hatched an egg!"
            player.buddy.nickname = creature.nickname
            catch.egg = False
            catch.nickname = creature.nickname
            staging.save_buddy(inv.batch, player)
            staging.update_catch(inv.batch, player, catch, "is_egg", "nickname")
        staging.update_payload(inv.batch, player, catch, creature)
        return message

    if encounter is None or creature.level >= rules.leveling.max_level:
        return ""
    encounter_info = services.catalog.get(encounter.species)
    if encounter_info is None:
        return ""
    result = apply_experience(
        creature,
        info,
        encounter,
        encounter_info,
        exp_table=services.exp_table,
        rules=rules.leveling,
    )
    staging.update_payload(inv.batch, player, catch, creature)
    if result.leveled_up:
        return (
            f"\n{player.buddy.nickname} gained {result.exp_gained} EXP and leveled up "
            f"to level {result.new_level}!"
        )
    return f"\n{player.buddy.nickname} gained {result.exp_gained} EXP!"


def handle_catch(inv: Invocation) -> None:
    player = inv.player
    services = inv.services
    threshold = services.dex_threshold
    outcome = generate(
        player,
        services=services.generation,
        rules=services.rules,
        event=services.event(),
    )
    inv.failed_catch = outcome.failed_catch

    egg_message = ""
    if outcome.egg is not None:
        welcome = "a **shiny egg**" if outcome.egg.is_shiny else "an egg"
        egg_message = (
            f"\n\nYou got {welcome} from the daycare! "
            f"Welcome, {_species_label(inv, outcome.egg)}!"
        )
        registration = register(player, outcome.egg.species, threshold=threshold,
                                rules=services.rules.dex)
        staging.stage_registration(inv.batch, player, registration)
        egg_message += registration.message

    if outcome.main is not None:
        message = f"It put up a fight, but you caught {_species_label(inv, outcome.main)}!"
        registration = register(player, outcome.main.species, threshold=threshold,
                                rules=services.rules.dex)
        staging.stage_registration(inv.batch, player, registration)
        message += registration.message
        inv.creature = outcome.main
        inv.pending.append(PendingCatch(outcome.main, CatchRole.MAIN))
        player.catch_count += 1
    else:
        message = "It got away..."

    message += advance_buddy(inv, outcome.main)

    if outcome.egg is not None:
        inv.pending.append(PendingCatch(outcome.egg, CatchRole.EGG))
        player.catch_count += 1
        message += egg_message
    staging.save_player(inv.batch, player, "catch_count")

    if outcome.item is not None:
        staging.add_item(inv.batch, player, outcome.item)
        inv.item = item_label(outcome.item)
        lead = "As it fled it dropped" if outcome.failed_catch else "Oh? It was holding"
        message += f"\n\n{lead} {with_article(inv.item)}! Added to the items pouch."

    inv.message = message
    inv.label = "Results"
    if outcome.egg is not None:
        inv.label += ", Eggs"
    if outcome.item is not None:
        inv.label += ", Items"


def handle_trade(inv: Invocation) -> None:
    player = inv.player
    catch_id = parse_catch_id(inv.arg(0))
    catch = player.visible_catch(catch_id)
    if catch is None:
        raise InputError("There is no Pokémon with this ID.")
    if player.is_protected(catch_id):
        raise StateConflictError(
            "Please remove your Pokémon from favorites and daycare before trading!"
        )
    creature = load_creature(catch)
    if not inv.services.validity.is_valid(creature):
        raise StateConflictError("Oops, I cannot trade this Pokémon!")

    catch.traded = True
    staging.update_catch(inv.batch, player, catch, "was_traded")
    inv.creature = creature
    inv.trade_marker = TradeMarker(catch_id=catch.id, created_at=inv.services.clock.now())
    inv.message = f"Preparing your {display_name(catch)} (ID: {catch.id}) for trade."
