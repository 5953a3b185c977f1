"""Per-player tables: the player row and its one-to-one satellites.

The ``daycare``, ``buddy``, ``dex``, and ``perks`` tables each hold exactly one
row per player, created together with the ``players`` row.
"""

from datetime import datetime

from sqlalchemy import JSON, BigInteger, Boolean, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampCreatedMixin


def player_fk() -> ForeignKey:
    """Cascading reference to ``players.player_id``; each column needs its own."""
    return ForeignKey("players.player_id", ondelete="CASCADE")


class Player(Base, TimestampCreatedMixin):
    """Identity, trainer metadata, time-zone offset, and catch counter.

    Attributes:
        player_id: External user identifier (primary key)
        username: Display name at the time of the last load
        catch_count: Successful catches and hatched eggs
        time_offset: UTC offset in hours, -12..14
        ot_name, ot_gender, tid, sid, language: Trainer metadata
        last_seen: When the player last completed a command
    """

    __tablename__ = "players"

    player_id: Mapped[int] = mapped_column(BigInteger, primary_key=True, autoincrement=False)
    username: Mapped[str] = mapped_column(String, nullable=False, default="")
    catch_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    time_offset: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    ot_name: Mapped[str] = mapped_column(String, nullable=False)
    ot_gender: Mapped[str] = mapped_column(String, nullable=False)
    tid: Mapped[int] = mapped_column(Integer, nullable=False)
    sid: Mapped[int] = mapped_column(Integer, nullable=False)
    language: Mapped[str] = mapped_column(String, nullable=False)
    last_seen: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), index=True
    )

    def __repr__(self) -> str:
        return f"<Player(player_id={self.player_id}, username='{self.username}')>"


class DaycareRecord(Base):
    """Two daycare slots with cached display fields; ``id1``/``id2`` are NULL when empty."""

    __tablename__ = "daycare"

    player_id: Mapped[int] = mapped_column(BigInteger, player_fk(), primary_key=True)
    id1: Mapped[int | None] = mapped_column(Integer, nullable=True)
    species1: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    form1: Mapped[str] = mapped_column(String, nullable=False, default="")
    ball1: Mapped[str] = mapped_column(String, nullable=False, default="")
    shiny1: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    id2: Mapped[int | None] = mapped_column(Integer, nullable=True)
    species2: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    form2: Mapped[str] = mapped_column(String, nullable=False, default="")
    ball2: Mapped[str] = mapped_column(String, nullable=False, default="")
    shiny2: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)


class BuddyRecord(Base):
    """Active buddy reference with cached nickname and ability."""

    __tablename__ = "buddy"

    player_id: Mapped[int] = mapped_column(BigInteger, player_fk(), primary_key=True)
    catch_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    name: Mapped[str] = mapped_column(String, nullable=False, default="")
    ability: Mapped[str] = mapped_column(String, nullable=False, default="")


class DexRecord(Base):
    """Registered species of the current season plus the completion counter."""

    __tablename__ = "dex"

    player_id: Mapped[int] = mapped_column(BigInteger, player_fk(), primary_key=True)
    entries: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)
    dex_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


class PerkRecord(Base):
    """Active perk instances (by name) and the species-boost target."""

    __tablename__ = "perks"

    player_id: Mapped[int] = mapped_column(BigInteger, player_fk(), primary_key=True)
    perks: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    species_boost: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
