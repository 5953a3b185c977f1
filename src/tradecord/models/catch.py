"""Catch tables: listing metadata and the opaque creature payload."""

from sqlalchemy import (
    BigInteger,
    Boolean,
    ForeignKey,
    ForeignKeyConstraint,
    Integer,
    LargeBinary,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class CatchRecord(Base):
    """One collected creature; ``(player_id, catch_id)`` is unique."""

    __tablename__ = "catches"

    player_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("players.player_id", ondelete="CASCADE"), primary_key=True
    )
    catch_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    is_shiny: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    ball: Mapped[str] = mapped_column(String, nullable=False)
    nickname: Mapped[str] = mapped_column(String, nullable=False, default="")
    species: Mapped[str] = mapped_column(String, nullable=False)
    form: Mapped[str] = mapped_column(String, nullable=False, default="")
    is_egg: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_favorite: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    was_traded: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_legendary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_event: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return (
            f"<CatchRecord(player_id={self.player_id}, catch_id={self.catch_id}, "
            f"species='{self.species}{self.form}')>"
        )


class CatchPayload(Base):
    """Serialized creature data for a catch."""

    __tablename__ = "catch_payloads"
    __table_args__ = (
        ForeignKeyConstraint(
            ["player_id", "catch_id"],
            ["catches.player_id", "catches.catch_id"],
            ondelete="CASCADE",
        ),
    )

    player_id: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    catch_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    data: Mapped[bytes] = mapped_column(LargeBinary, nullable=False)
