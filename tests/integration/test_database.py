"""Integration tests for the player store.

Each test works against a fresh SQLite file under ``tmp_path``.
"""

from datetime import UTC, datetime

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from tradecord.config import Settings
from tradecord.database import (
    check_database_health,
    count_rows,
    create_db_engine,
    get_table_names,
    init_db,
)
from tradecord.domain.enums import Ball, ItemKind, Perk
from tradecord.domain.models import (
    Catch,
    CatchID,
    Creature,
    DaycareSlot,
    PlayerAggregate,
    PlayerID,
)
from tradecord.models import BuddyRecord, DaycareRecord, DexRecord, PerkRecord
from tradecord.persistence import (
    MutationBatch,
    PlayerRepository,
    SqlMutationExecutor,
    decode_creature,
    default_rows,
    delete_rows,
    encode_creature,
)
from tradecord.services import staging

pytestmark = pytest.mark.integration


def _seed(engine, player_id=1, username="Ash"):
    player = PlayerAggregate(player_id=PlayerID(player_id), username=username)
    SqlMutationExecutor(engine).apply(default_rows(player).mutations)
    return player


def _catch(catch_id, species="Pikachu", **flags):
    creature = Creature(species=25, level=5, ability="static", nickname=species)
    return Catch(
        id=CatchID(catch_id),
        species=species,
        form="",
        shiny=flags.pop("shiny", False),
        ball="Poke",
        nickname=species,
        payload=encode_creature(creature),
        **flags,
    )


class TestDatabaseInitialization:
    """Tests for schema creation and probes."""

    def test_all_tables_created(self, engine):
        assert set(get_table_names(engine)) == {
            "buddy",
            "catch_payloads",
            "catches",
            "daycare",
            "dex",
            "items",
            "perks",
            "players",
        }

    def test_init_is_idempotent(self, engine):
        init_db(engine)
        assert count_rows(engine, "players") == 0

    def test_database_health_check(self, engine):
        assert check_database_health(engine) is True

    def test_health_check_reports_an_unreachable_store(self, tmp_path):
        missing = tmp_path / "missing" / "tradecord.db"
        engine = create_db_engine(Settings(_env_file=None, database_url=f"sqlite:///{missing}"))
        try:
            assert check_database_health(engine) is False
        finally:
            engine.dispose()

    def test_count_rows_rejects_unknown_tables(self, engine):
        with pytest.raises(ValueError, match="Invalid table name"):
            count_rows(engine, "armies")

    def test_sqlite_pragmas(self, engine):
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA journal_mode")).scalar() == "wal"
            assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1

    def test_satellite_rows_cascade_from_players(self, engine):
        for model in (DaycareRecord, BuddyRecord, DexRecord, PerkRecord):
            (fk,) = model.__table__.c.player_id.foreign_keys
            assert fk.target_fullname == "players.player_id"
            assert fk.ondelete == "CASCADE"
        _seed(engine)
        with engine.begin() as conn:
            conn.execute(text("DELETE FROM players WHERE player_id = 1"))
        for table in ("daycare", "buddy", "dex", "perks"):
            assert count_rows(engine, table) == 0


class TestPlayerRepository:
    """Round trips between the store and player aggregates."""

    def test_unknown_player(self, engine):
        repo = PlayerRepository(engine)
        assert repo.load(PlayerID(9)) is None
        assert not repo.exists(PlayerID(9))

    def test_default_rows_create_a_blank_player(self, engine):
        _seed(engine)
        loaded = PlayerRepository(engine).load(PlayerID(1))
        assert loaded.username == "Ash"
        assert loaded.catches == {}
        assert loaded.items.counts == {}
        assert loaded.daycare.is_empty
        assert loaded.buddy.catch_id is None
        assert loaded.dex.entries == set()
        assert loaded.perks.active == []
        for table in ("players", "daycare", "buddy", "dex", "perks"):
            assert count_rows(engine, table) == 1

    def test_full_aggregate_round_trip(self, engine):
        player = _seed(engine)
        batch = MutationBatch()
        staging.insert_catch(batch, player, _catch(0, favorite=True))
        staging.insert_catch(batch, player, _catch(3, "Charmander", shiny=True, egg=True))
        staging.add_item(batch, player, ItemKind.SOOTHE_BELL, 2)
        player.daycare.slot2 = DaycareSlot(
            catch_id=CatchID(3), species=4, form="", ball=Ball.LUXURY, shiny=True
        )
        staging.save_daycare(batch, player)
        player.dex.entries = {1, 4, 25}
        player.dex.completion_count = 2
        staging.save_dex(batch, player)
        player.perks.active = [Perk.CATCH_BOOST, Perk.SPECIES_BOOST]
        player.perks.species_boost = 25
        staging.save_perks(batch, player)
        SqlMutationExecutor(engine).apply(batch.mutations)

        loaded = PlayerRepository(engine).load(PlayerID(1))
        assert sorted(loaded.catches) == [0, 3]
        assert loaded.catches[CatchID(0)].favorite
        egg = loaded.catches[CatchID(3)]
        assert (egg.species, egg.shiny, egg.egg) == ("Charmander", True, True)
        assert decode_creature(loaded.catches[CatchID(0)].payload).level == 5
        assert loaded.items.count(ItemKind.SOOTHE_BELL) == 2
        assert loaded.daycare.slot1 is None
        assert loaded.daycare.slot2.ball is Ball.LUXURY
        assert loaded.dex.entries == {1, 4, 25}
        assert loaded.dex.completion_count == 2
        assert loaded.perks.active == [Perk.CATCH_BOOST, Perk.SPECIES_BOOST]
        assert loaded.perks.species_boost == 25

    def test_unknown_item_rows_are_skipped(self, engine):
        _seed(engine)
        batch = MutationBatch()
        batch.insert("items", player_id=1, item_id=4, count=3)
        SqlMutationExecutor(engine).apply(batch.mutations)
        assert PlayerRepository(engine).load(PlayerID(1)).items.counts == {}

    def test_delete_rows_only_touch_one_player(self, engine):
        ash = _seed(engine)
        _seed(engine, 2, "Misty")
        batch = MutationBatch()
        staging.insert_catch(batch, ash, _catch(0))
        SqlMutationExecutor(engine).apply(batch.mutations)

        SqlMutationExecutor(engine).apply(delete_rows(PlayerID(1)).mutations)

        repo = PlayerRepository(engine)
        assert repo.load(PlayerID(1)) is None
        assert repo.exists(PlayerID(2))
        assert count_rows(engine, "catches") == 0
        assert count_rows(engine, "catch_payloads") == 0

    def test_inactive_since(self, engine):
        _seed(engine)
        _seed(engine, 2, "Misty")
        batch = MutationBatch()
        batch.update("players", {"last_seen": datetime(2024, 1, 1, tzinfo=UTC)}, player_id=1)
        SqlMutationExecutor(engine).apply(batch.mutations)

        repo = PlayerRepository(engine)
        assert repo.inactive_since(datetime(2024, 6, 1, tzinfo=UTC)) == [PlayerID(1)]
        assert repo.inactive_since(datetime(2023, 6, 1, tzinfo=UTC)) == []


class TestSqlMutationExecutor:
    """Transactional application of mutation batches."""

    def test_failed_batch_rolls_back(self, engine):
        player = _seed(engine)
        batch = MutationBatch()
        staging.insert_catch(batch, player, _catch(0))
        staging.insert_catch(batch, player, _catch(0))
        with pytest.raises(IntegrityError):
            SqlMutationExecutor(engine).apply(batch.mutations)
        assert count_rows(engine, "catches") == 0

    def test_empty_batch_is_a_no_op(self, engine):
        SqlMutationExecutor(engine).apply(())
        assert count_rows(engine, "players") == 0

    def test_vacuum(self, engine):
        _seed(engine)
        SqlMutationExecutor(engine).vacuum()
        assert count_rows(engine, "players") == 1
