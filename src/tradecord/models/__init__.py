"""SQLAlchemy models for the TradeCord store.

Each model maps one of the logical tables named by mutations:
``players``, ``catches``, ``catch_payloads``, ``daycare``, ``buddy``,
``items``, ``dex``, and ``perks``.
"""

from .base import Base, TimestampCreatedMixin
from .catch import CatchPayload, CatchRecord
from .item import ItemRecord
from .player import BuddyRecord, DaycareRecord, DexRecord, PerkRecord, Player

__all__ = [
    "Base",
    "BuddyRecord",
    "CatchPayload",
    "CatchRecord",
    "DaycareRecord",
    "DexRecord",
    "ItemRecord",
    "PerkRecord",
    "Player",
    "TimestampCreatedMixin",
]
