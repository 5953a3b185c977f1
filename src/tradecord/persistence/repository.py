"""Read side of the player store plus the rows a new player starts with."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.engine import Connection, Engine

from tradecord.domain.enums import ItemKind
from tradecord.domain.models import ItemBag, PlayerAggregate, PlayerID
from tradecord.models import (
    BuddyRecord,
    CatchPayload,
    CatchRecord,
    DaycareRecord,
    DexRecord,
    ItemRecord,
    PerkRecord,
    Player,
)
from tradecord.persistence import rows
from tradecord.persistence.mutations import MutationBatch

logger = logging.getLogger(__name__)

PLAYER_TABLES: tuple[str, ...] = (
    "catch_payloads",
    "catches",
    "items",
    "daycare",
    "buddy",
    "dex",
    "perks",
    "players",
)


class PlayerRepository:
    """Loads whole player aggregates from the relational store."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def exists(self, player_id: PlayerID) -> bool:
        with self._engine.connect() as conn:
            found = conn.execute(
                select(Player.player_id).where(Player.player_id == player_id)
            ).first()
        return found is not None

    def inactive_since(self, cutoff: datetime) -> list[PlayerID]:
        """Players whose last completed command is older than ``cutoff``."""

        with self._engine.connect() as conn:
            found = conn.execute(
                select(Player.player_id)
                .where(Player.last_seen < cutoff)
                .order_by(Player.player_id)
            )
            return [PlayerID(row.player_id) for row in found]

    def load(self, player_id: PlayerID) -> PlayerAggregate | None:
        """Return the stored aggregate or ``None`` for an unknown player."""

        with self._engine.connect() as conn:
            player_row = conn.execute(
                select(Player.__table__).where(Player.player_id == player_id)
            ).first()
            if player_row is None:
                return None
            aggregate = PlayerAggregate(
                player_id=player_id,
                username=player_row.username,
                trainer=rows.trainer_from_row(player_row),
                time_offset=player_row.time_offset,
                catch_count=player_row.catch_count,
            )
            self._load_catches(conn, aggregate)
            self._load_items(conn, aggregate)
            self._load_satellites(conn, aggregate)
        return aggregate

    def _load_catches(self, conn: Connection, aggregate: PlayerAggregate) -> None:
        payloads = {
            row.catch_id: row.data
            for row in conn.execute(
                select(CatchPayload.catch_id, CatchPayload.data).where(
                    CatchPayload.player_id == aggregate.player_id
                )
            )
        }
        for row in conn.execute(
            select(CatchRecord.__table__).where(CatchRecord.player_id == aggregate.player_id)
        ):
            payload = payloads.get(row.catch_id)
            if payload is None:
                logger.warning(
                    "catch %s of player %s has no payload; skipping",
                    row.catch_id,
                    aggregate.player_id,
                )
                continue
            catch = rows.catch_from_row(row, payload)
            aggregate.catches[catch.id] = catch

    def _load_items(self, conn: Connection, aggregate: PlayerAggregate) -> None:
        counts: dict[ItemKind, int] = {}
        for row in conn.execute(
            select(ItemRecord.item_id, ItemRecord.count).where(
                ItemRecord.player_id == aggregate.player_id
            )
        ):
            try:
                kind = ItemKind(row.item_id)
            except ValueError:
                logger.warning("unknown item id %s for player %s", row.item_id, aggregate.player_id)
                continue
            counts[kind] = row.count
        aggregate.items = ItemBag(counts)

    def _load_satellites(self, conn: Connection, aggregate: PlayerAggregate) -> None:
        player_id = aggregate.player_id
        daycare = conn.execute(
            select(DaycareRecord.__table__).where(DaycareRecord.player_id == player_id)
        ).first()
        if daycare is not None:
            aggregate.daycare = rows.daycare_from_row(daycare)
        buddy = conn.execute(
            select(BuddyRecord.__table__).where(BuddyRecord.player_id == player_id)
        ).first()
        if buddy is not None:
            aggregate.buddy = rows.buddy_from_row(buddy)
        dex = conn.execute(
            select(DexRecord.__table__).where(DexRecord.player_id == player_id)
        ).first()
        if dex is not None:
            aggregate.dex = rows.dex_from_row(dex)
        perks = conn.execute(
            select(PerkRecord.__table__).where(PerkRecord.player_id == player_id)
        ).first()
        if perks is not None:
            aggregate.perks = rows.perks_from_row(perks)


def default_rows(player: PlayerAggregate) -> MutationBatch:
    """Inserts that create a freshly initialized player in the store."""

    batch = MutationBatch()
    pid = int(player.player_id)
    batch.insert(
        "players",
        player_id=pid,
        username=player.username,
        catch_count=player.catch_count,
        time_offset=player.time_offset,
        **rows.trainer_values(player.trainer),
    )
    batch.insert("daycare", player_id=pid, **rows.daycare_values(player.daycare))
    batch.insert("buddy", player_id=pid, **rows.buddy_values(player.buddy))
    batch.insert("dex", player_id=pid, **rows.dex_values(player.dex))
    batch.insert("perks", player_id=pid, **rows.perk_values(player.perks))
    return batch


def delete_rows(player_id: PlayerID) -> MutationBatch:
    """Deletes removing every row owned by ``player_id``, children first."""

    batch = MutationBatch()
    for table in PLAYER_TABLES:
        batch.delete(table, player_id=int(player_id))
    return batch
