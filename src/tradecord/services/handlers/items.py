"""Item handlers: holding, gifting, listing, and dropping bag items."""

from __future__ import annotations

import logging

from tradecord.domain.enums import MEMORY_ITEMS, ItemKind
from tradecord.domain.models import Creature
from tradecord.errors import InputError, StateConflictError
from tradecord.interfaces.catalog import ISpeciesCatalog
from tradecord.services import staging
from tradecord.services.handlers.base import Invocation, item_label, load_creature, with_article
from tradecord.services.handlers.buddy import buddy_catch

logger = logging.getLogger(__name__)

GIRATINA = 487
SILVALLY = 773
ORIGIN_FORM = 1
ORIGIN_ABILITY = "levitate"


def _memory_form(kind: ItemKind, catalog: ISpeciesCatalog) -> int:
    memory_type = kind.name.removesuffix("_MEMORY").title()
    return catalog.find_form(SILVALLY, memory_type) or 0


def apply_held_form(
    creature: Creature, kind: ItemKind, catalog: ISpeciesCatalog, *, holding: bool
) -> None:
    """Switch the form (and ability) tied to giving or taking ``kind``."""
    if creature.species == GIRATINA and kind is ItemKind.GRISEOUS_ORB:
        if holding:
            creature.form = ORIGIN_FORM
            creature.ability = ORIGIN_ABILITY
        else:
            info = catalog.get(GIRATINA)
            creature.form = 0
            if info is not None and info.abilities:
                creature.ability = info.abilities[0]
    elif creature.species == SILVALLY and kind in MEMORY_ITEMS:
        creature.form = _memory_form(kind, catalog) if holding else 0


def _known_item(item_id: int) -> ItemKind | None:
    try:
        return ItemKind(item_id)
    except ValueError:
        return None


def _parse_item(raw: str) -> ItemKind | None:
    return ItemKind.parse(raw) if raw else None


def handle_give_item(inv: Invocation) -> None:
    player = inv.player
    services = inv.services
    if player.buddy.catch_id is None:
        raise StateConflictError("You don't have an active buddy to give an item to.")
    kind = _parse_item(inv.text)
    if kind is None or player.items.count(kind) == 0:
        raise InputError("You do not have this item.")
    catch = buddy_catch(player, missing="You don't have an active buddy to give an item to.")
    creature = load_creature(catch)
    if creature.is_egg:
        raise StateConflictError("Eggs cannot hold items!")

    previous = creature.held_item
    previous_kind = _known_item(previous)
    if previous_kind is not None:
        apply_held_form(creature, previous_kind, services.catalog, holding=False)
    creature.held_item = int(kind)
    apply_held_form(creature, kind, services.catalog, holding=True)
    if not services.validity.is_valid(creature):
        raise InputError(f"Oops, something went wrong while giving an item to {creature.nickname}!")

    if previous_kind is not None:
        staging.add_item(inv.batch, player, previous_kind)
    elif previous:
        logger.warning("buddy of player %s held unknown item %s", player.player_id, previous)
    staging.remove_item(inv.batch, player, kind)
    _store_buddy(inv, creature)
    inv.message = f"You gave {with_article(item_label(kind))} to your buddy!"


def handle_take_item(inv: Invocation) -> None:
    player = inv.player
    services = inv.services
    missing = "You don't have an active buddy to take an item from."
    if player.buddy.catch_id is None:
        raise StateConflictError(missing)
    catch = buddy_catch(player, missing=missing)
    creature = load_creature(catch)
    if not creature.held_item:
        raise StateConflictError("Your buddy isn't holding an item.")
    kind = _known_item(creature.held_item)
    if kind is None:
        raise InputError("Oops, this item is not yet available!")

    staging.add_item(inv.batch, player, kind)
    creature.held_item = 0
    apply_held_form(creature, kind, services.catalog, holding=False)
    _store_buddy(inv, creature)
    inv.message = f"You took {with_article(item_label(kind))} from your buddy!"


def _store_buddy(inv: Invocation, creature: Creature) -> None:
    player = inv.player
    catch = buddy_catch(player, missing="You don't have an active buddy.")
    staging.update_payload(inv.batch, player, catch, creature)
    form = inv.services.catalog.form_suffix(creature.species, creature.form)
    if form != catch.form:
        catch.form = form
        staging.update_catch(inv.batch, player, catch, "form")
        for slot in player.daycare.slots:
            if slot is not None and slot.catch_id == catch.id:
                slot.form = form
                staging.save_daycare(inv.batch, player)
    if player.buddy.ability != creature.ability:
        player.buddy.ability = creature.ability
        staging.save_buddy(inv.batch, player)


def handle_gift_item(inv: Invocation) -> None:
    player = inv.player
    giftee = inv.require_giftee()
    if len(inv.args) < 2:
        raise InputError("Please specify an item and an amount.")
    name, raw_count = " ".join(inv.args[:-1]).strip(), inv.args[-1].strip()
    try:
        count = int(raw_count)
    except ValueError:
        raise InputError("Please enter a numerical amount.") from None
    if count <= 0:
        raise InputError("Please enter a positive amount.")

    kind = _parse_item(name)
    held = player.items.count(kind) if kind is not None else 0
    if kind is None or held == 0:
        raise InputError("You do not have this item.")
    if count > held:
        raise InputError("You do not have enough of this item.")

    staging.add_item(inv.batch, giftee, kind, count)
    staging.remove_item(inv.batch, player, kind, count)
    inv.message = (
        f"You gifted {count} {item_label(kind)}{'' if count == 1 else 's'} to {giftee.username}!"
    )


def handle_item_list(inv: Invocation) -> None:
    player = inv.player
    raw = inv.text
    kind = _parse_item(raw)
    if raw.lower() != "all" and kind is None:
        raise InputError("Nothing to search for." if not raw else "Unrecognized item.")

    held = sorted(
        (item, count)
        for item, count in player.items.counts.items()
        if count > 0 and (kind is None or item is kind)
    )
    if not held:
        raise InputError("Nothing found that meets the search criteria, or you have no items left.")
    inv.message = " | ".join(f"**{item_label(item)}**: {count}" for item, count in held)
    inv.label = (
        f"{player.username}'s Item List"
        if kind is None
        else f"{player.username}'s {item_label(kind)} List"
    )


def handle_item_drop(inv: Invocation) -> None:
    player = inv.player
    raw = inv.text
    kind = _parse_item(raw)
    if raw.lower() != "all" and kind is None:
        raise InputError("Nothing specified to drop." if not raw else "Unrecognized item.")

    targets = [item for item in player.items.counts if kind is None or item is kind]
    if not targets:
        raise InputError("Nothing found that meets the search criteria, or you have no items.")
    dropped = {item: player.items.discard(item) for item in targets}
    for item, previous in dropped.items():
        staging.stage_item_count(inv.batch, player, item, previous)

    if len(dropped) > 1:
        inv.message = "Dropped all items!"
    else:
        item, previous = next(iter(dropped.items()))
        inv.message = f"Dropped all {item_label(item)}{'s' if previous > 1 else ''}!"
