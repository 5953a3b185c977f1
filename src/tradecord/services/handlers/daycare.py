"""Daycare handlers: deposit, withdraw, and the compatibility readout."""

from __future__ import annotations

from tradecord.domain.breeding import can_breed
from tradecord.domain.enums import Ball
from tradecord.domain.models import Daycare, DaycareSlot
from tradecord.errors import InputError, StateConflictError
from tradecord.interfaces.catalog import ISpeciesCatalog
from tradecord.services import staging
from tradecord.services.handlers.base import Invocation, load_creature, parse_catch_id

DEPOSIT = frozenset({"d", "deposit"})
WITHDRAW = frozenset({"w", "withdraw"})


def _slot_name(slot: DaycareSlot, catalog: ISpeciesCatalog) -> str:
    info = catalog.get(slot.species)
    name = info.name if info is not None else str(slot.species)
    return f"(ID: {slot.catch_id}) {'★' if slot.shiny else ''}{name}{slot.form}"


def describe_daycare(daycare: Daycare, catalog: ISpeciesCatalog, compatible: bool) -> str:
    if daycare.is_empty:
        return "You do not have anything in daycare."
    lines = [
        f"{_slot_name(slot, catalog)} ({slot.ball.value})"
        for slot in daycare.slots
        if slot is not None
    ]
    if not daycare.is_full:
        return f"{lines[0]}\n\nIt seems lonely."
    if compatible:
        return "\n".join(lines) + "\n\nThey seem to really like each other."
    return "\n".join(lines) + (
        "\n\nThey don't really seem to be fond of each other. Make sure they're of the same "
        "evolution tree, can be eggs, and have been hatched!"
    )


def handle_daycare_info(inv: Invocation) -> None:
    player = inv.player
    services = inv.services
    eggs = {catch_id for catch_id, catch in player.catches.items() if catch.egg}
    compatible = can_breed(
        player.daycare.slot1,
        player.daycare.slot2,
        resolver=services.resolver,
        catalog=services.catalog,
        eggs=eggs,
    )
    inv.message = describe_daycare(player.daycare, services.catalog, compatible)
    inv.label = f"{player.username}'s Daycare"


def handle_daycare(inv: Invocation) -> None:
    player = inv.player
    daycare = player.daycare
    catalog = inv.services.catalog
    action = inv.arg(0).lower()
    target = inv.arg(1).lower()
    inv.label = f"{player.username}'s Daycare"
    catch_id = None if target == "all" else parse_catch_id(target)

    if action in WITHDRAW:
        if daycare.is_empty:
            raise StateConflictError("You do not have anything in daycare.")
        if catch_id is None:
            names = [_slot_name(slot, catalog) for slot in daycare.slots if slot is not None]
            daycare.slot1 = daycare.slot2 = None
        elif daycare.slot1 is not None and daycare.slot1.catch_id == catch_id:
            names = [_slot_name(daycare.slot1, catalog)]
            daycare.slot1 = None
        elif daycare.slot2 is not None and daycare.slot2.catch_id == catch_id:
            names = [_slot_name(daycare.slot2, catalog)]
            daycare.slot2 = None
        else:
            raise InputError("You do not have that Pokémon in daycare.")
        staging.save_daycare(inv.batch, player)
        inv.message = f"You withdrew your {' and '.join(names)} from the daycare."
        inv.label += " Withdraw"
        return

    if action not in DEPOSIT:
        raise InputError("Invalid command.")
    if catch_id is None:
        raise InputError("Please enter a numerical catch ID.")
    catch = player.visible_catch(catch_id)
    if catch is None:
        raise InputError("There is no Pokémon with this ID.")
    if daycare.is_full:
        raise StateConflictError("Daycare full, please withdraw something first.")
    if daycare.holds(catch_id):
        raise StateConflictError("You've already deposited that Pokémon to daycare.")

    creature = load_creature(catch)
    slot = DaycareSlot(
        catch_id=catch.id,
        species=creature.species,
        form=catch.form,
        ball=Ball.parse(catch.ball) or Ball.POKE,
        shiny=catch.shiny,
    )
    if daycare.slot1 is None:
        daycare.slot1 = slot
    else:
        daycare.slot2 = slot
    staging.save_daycare(inv.batch, player)
    inv.message = (
        f"Deposited your {'★' if catch.shiny else ''}{catch.species}{catch.form}"
        f"({catch.ball}) to daycare!"
    )
    inv.label += " Deposit"
