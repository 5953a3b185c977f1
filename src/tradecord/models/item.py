"""Item bag rows; a row exists only while its count is positive."""

from sqlalchemy import BigInteger, CheckConstraint, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class ItemRecord(Base):
    """Count of one item kind held by a player."""

    __tablename__ = "items"
    __table_args__ = (CheckConstraint("count > 0", name="ck_items_count_positive"),)

    player_id: Mapped[int] = mapped_column(
        BigInteger, ForeignKey("players.player_id", ondelete="CASCADE"), primary_key=True
    )
    item_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    count: Mapped[int] = mapped_column(Integer, nullable=False)
