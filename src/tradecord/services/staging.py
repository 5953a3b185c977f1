"""Helpers that stage storage mutations mirroring in-memory changes.

Each helper is called right after the aggregate was changed, so the staged
values always reflect the current in-memory state.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from tradecord.domain.enums import ItemKind
from tradecord.domain.models import Catch, Creature, PlayerAggregate
from tradecord.domain.progression import Registration
from tradecord.persistence import rows
from tradecord.persistence.mutations import MutationBatch
from tradecord.persistence.payload import encode_creature


def insert_catch(batch: MutationBatch, player: PlayerAggregate, catch: Catch) -> None:
    pid = int(player.player_id)
    batch.insert("catches", player_id=pid, catch_id=int(catch.id), **rows.catch_values(catch))
    batch.insert("catch_payloads", player_id=pid, catch_id=int(catch.id), data=catch.payload)


def update_catch(
    batch: MutationBatch, player: PlayerAggregate, catch: Catch, *columns: str
) -> None:
    """Stage the listed ``catches`` columns for one catch."""

    values = rows.catch_values(catch)
    batch.update(
        "catches",
        {column: values[column] for column in columns},
        player_id=int(player.player_id),
        catch_id=int(catch.id),
    )


def update_payload(
    batch: MutationBatch, player: PlayerAggregate, catch: Catch, creature: Creature
) -> None:
    """Re-encode ``creature`` into the catch and stage the payload row."""

    catch.payload = encode_creature(creature)
    batch.update(
        "catch_payloads",
        {"data": catch.payload},
        player_id=int(player.player_id),
        catch_id=int(catch.id),
    )


def delete_catches(batch: MutationBatch, player: PlayerAggregate, catch_ids: Iterable[int]) -> None:
    ids = sorted(int(catch_id) for catch_id in catch_ids)
    if not ids:
        return
    for catch_id in ids:
        player.catches.pop(catch_id, None)
    pid = int(player.player_id)
    batch.delete("catch_payloads", player_id=pid, catch_id=ids)
    batch.delete("catches", player_id=pid, catch_id=ids)


def stage_item_count(
    batch: MutationBatch, player: PlayerAggregate, kind: ItemKind, previous: int
) -> None:
    """Stage the ``items`` row for ``kind`` given its count before the change."""

    current = player.items.count(kind)
    key = {"player_id": int(player.player_id), "item_id": int(kind)}
    if previous == 0 and current > 0:
        batch.insert("items", count=current, **key)
    elif previous > 0 and current == 0:
        batch.delete("items", **key)
    elif current != previous:
        batch.update("items", {"count": current}, **key)


def add_item(
    batch: MutationBatch, player: PlayerAggregate, kind: ItemKind, amount: int = 1
) -> None:
    previous = player.items.add(kind, amount)
    stage_item_count(batch, player, kind, previous)


def remove_item(
    batch: MutationBatch, player: PlayerAggregate, kind: ItemKind, amount: int = 1
) -> None:
    previous = player.items.count(kind)
    player.items.remove(kind, amount)
    stage_item_count(batch, player, kind, previous)


def save_player(batch: MutationBatch, player: PlayerAggregate, *columns: str) -> None:
    """Stage ``players`` columns, resolving trainer fields from ``player.trainer``."""

    values = {
        "username": player.username,
        "catch_count": player.catch_count,
        "time_offset": player.time_offset,
        **rows.trainer_values(player.trainer),
    }
    selected = {column: values[column] for column in columns} if columns else values
    batch.update("players", selected, player_id=int(player.player_id))


def touch_player(batch: MutationBatch, player: PlayerAggregate, now: datetime) -> None:
    batch.update("players", {"last_seen": now}, player_id=int(player.player_id))


def save_daycare(batch: MutationBatch, player: PlayerAggregate) -> None:
    batch.update("daycare", rows.daycare_values(player.daycare), player_id=int(player.player_id))


def save_buddy(batch: MutationBatch, player: PlayerAggregate) -> None:
    batch.update("buddy", rows.buddy_values(player.buddy), player_id=int(player.player_id))


def save_dex(batch: MutationBatch, player: PlayerAggregate) -> None:
    batch.update("dex", rows.dex_values(player.dex), player_id=int(player.player_id))


def save_perks(batch: MutationBatch, player: PlayerAggregate) -> None:
    batch.update("perks", rows.perk_values(player.perks), player_id=int(player.player_id))


def stage_registration(
    batch: MutationBatch, player: PlayerAggregate, registration: Registration
) -> None:
    if registration.changed:
        save_dex(batch, player)
    if registration.charm_granted:
        stage_item_count(batch, player, ItemKind.SHINY_CHARM, 0)
