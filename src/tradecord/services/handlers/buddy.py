"""Buddy handlers: choosing the buddy, nicknaming it, and evolving it."""

from __future__ import annotations

from tradecord.catalog.validity import MAX_NICKNAME_LENGTH
from tradecord.domain.evolution import evolution_time, evolve_buddy
from tradecord.domain.models import Buddy, Catch, Creature, PlayerAggregate
from tradecord.domain.progression import register
from tradecord.errors import GenerationError, InputError, StateConflictError
from tradecord.services import staging
from tradecord.services.handlers.base import (
    CatchRole,
    Invocation,
    PendingCatch,
    load_creature,
    parse_catch_id,
)


def buddy_catch(player: PlayerAggregate, *, missing: str) -> Catch:
    """The buddy's catch; raises with ``missing`` when no buddy is set."""

    if player.buddy.catch_id is None:
        raise StateConflictError(missing)
    catch = player.visible_catch(player.buddy.catch_id)
    if catch is None:
        raise InputError("Could not find this Pokémon.")
    return catch


def _shown_name(catch: Catch, creature: Creature) -> str:
    name = creature.nickname if creature.is_nicknamed else f"{catch.species}{catch.form}"
    return f"{'★' if catch.shiny else ''}{name}"


def handle_buddy(inv: Invocation) -> None:
    player = inv.player
    raw = inv.arg(0)
    if raw.lower() == "remove" and player.buddy.catch_id is not None:
        player.buddy = Buddy()
        staging.save_buddy(inv.batch, player)
        inv.message = "Buddy removed!"
        return

    if not raw:
        catch = buddy_catch(player, missing="You don't have an active buddy.")
        creature = load_creature(catch)
        inv.creature = creature
        inv.label = f"{player.username}'s {_shown_name(catch, creature)} (ID: {catch.id})"
        return

    catch_id = parse_catch_id(raw)
    if catch_id == player.buddy.catch_id:
        raise StateConflictError("This is already your buddy!")
    catch = player.visible_catch(catch_id)
    if catch is None:
        raise InputError("Could not find this Pokémon.")
    creature = load_creature(catch)
    player.buddy = Buddy(catch_id=catch.id, nickname=creature.nickname, ability=creature.ability)
    staging.save_buddy(inv.batch, player)
    inv.creature = creature
    inv.message = f"Set your {_shown_name(catch, creature)} as your new buddy!"


def handle_nickname(inv: Invocation) -> None:
    player = inv.player
    services = inv.services
    raw = inv.text
    if player.buddy.catch_id is None:
        raise StateConflictError("You don't have an active buddy!")
    if services.word_filter.is_filtered(raw):
        raise InputError("Nickname triggered the word filter. Please choose a different nickname.")
    if len(raw) > MAX_NICKNAME_LENGTH:
        raise InputError("Nickname is too long.")
    if not raw:
        raise InputError("Please enter a nickname.")

    catch = buddy_catch(player, missing="You don't have an active buddy!")
    if catch.egg:
        raise StateConflictError("Cannot nickname eggs.")
    creature = load_creature(catch)

    clear = raw.lower() == "clear"
    if clear:
        info = services.catalog.get(creature.species)
        creature.nickname = info.name if info is not None else catch.species
        creature.is_nicknamed = False
    else:
        creature.nickname = raw
        creature.is_nicknamed = True
    if not services.validity.is_valid(creature):
        raise InputError("Nickname is not valid.")

    player.buddy.nickname = creature.nickname
    catch.nickname = creature.nickname
    staging.save_buddy(inv.batch, player)
    staging.update_catch(inv.batch, player, catch, "nickname")
    staging.update_payload(inv.batch, player, catch, creature)
    inv.message = (
        "Your buddy's nickname was cleared!" if clear else "Your buddy's nickname was updated!"
    )


def handle_evolve(inv: Invocation) -> None:
    """Evolve the buddy, following its catch into daycare and the dex.

    A split evolution queues the extra creature as a new catch; the
    dispatcher gives it an id before anything else.
    """
    player = inv.player
    services = inv.services
    catch = buddy_catch(player, missing="You don't have an active buddy.")
    if catch.egg:
        raise StateConflictError("Eggs cannot evolve.")
    creature = load_creature(catch)
    old_name = creature.nickname if creature.is_nicknamed else f"{catch.species}{catch.form}"

    outcome = evolve_buddy(
        creature,
        resolver=services.resolver,
        time_of_day=evolution_time(services.clock.now(), player.time_offset),
        branch=inv.text or None,
    )
    if outcome is None:
        raise StateConflictError(f"{old_name} does not meet the requirements to evolve right now.")
    evolved = outcome.creature
    if not services.validity.is_valid(evolved):
        raise GenerationError(
            f"Failed to evolve {old_name}.",
            diagnostics={"player": player.player_id, "buddy": catch.id, "into": evolved.species},
        )

    info = services.catalog.get(evolved.species)
    species = info.name if info is not None else str(evolved.species)
    form = services.catalog.form_suffix(evolved.species, evolved.form)
    catch.species, catch.form, catch.nickname = species, form, evolved.nickname
    staging.update_catch(inv.batch, player, catch, "species", "form", "nickname")
    staging.update_payload(inv.batch, player, catch, evolved)

    for slot in player.daycare.slots:
        if slot is not None and slot.catch_id == catch.id:
            slot.species = evolved.species
            slot.form = form
            staging.save_daycare(inv.batch, player)

    player.buddy.nickname = evolved.nickname
    player.buddy.ability = evolved.ability
    staging.save_buddy(inv.batch, player)

    registration = register(
        player, evolved.species, threshold=services.dex_threshold, rules=services.rules.dex
    )
    staging.stage_registration(inv.batch, player, registration)
    shown = f"**{species}{form}**" if evolved.is_shiny else f"{species}{form}"
    inv.message = f"{old_name} evolved into {shown}!" + registration.message
    inv.creature = evolved

    if outcome.secondary is not None:
        if not services.validity.is_valid(outcome.secondary):
            raise GenerationError(
                f"Failed to evolve {old_name}.",
                diagnostics={"player": player.player_id, "secondary": outcome.secondary.species},
            )
        inv.pending.append(PendingCatch(outcome.secondary, CatchRole.SECONDARY))
