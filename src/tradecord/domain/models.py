"""Dataclasses describing a player's collection.

The aggregate held in the cache is a tree of plain dataclasses. Handlers work
on deep copies, so nothing here knows about storage or locking.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import NewType

from .enums import Ball, ItemKind, Perk, ShinyTier

# --- Strongly typed identifiers -------------------------------------------------

PlayerID = NewType("PlayerID", int)
CatchID = NewType("CatchID", int)


# --- Creature payload -----------------------------------------------------------


@dataclass(slots=True)
class Creature:
    """Decoded creature payload stored as an opaque blob next to each catch."""

    species: int
    form: int = 0
    level: int = 1
    exp: int = 0
    friendship: int = 0
    shiny: ShinyTier = ShinyTier.NONE
    ball: Ball = Ball.POKE
    nickname: str = ""
    is_nicknamed: bool = False
    is_egg: bool = False
    held_item: int = 0
    ability: str = ""
    gmax: bool = False
    fateful: bool = False
    ot_name: str = ""
    ot_gender: str = ""
    tid: int = 0
    sid: int = 0
    language: str = ""

    @property
    def is_shiny(self) -> bool:
        return self.shiny is not ShinyTier.NONE


# --- Aggregate parts ------------------------------------------------------------


@dataclass(slots=True)
class TrainerInfo:
    """Original-trainer metadata stamped onto generated creatures."""

    ot_name: str = "TradeCord"
    ot_gender: str = "Male"
    tid: int = 12345
    sid: int = 54321
    language: str = "English"


@dataclass(slots=True)
class Catch:
    """One collected creature as listed in the player's catch map."""

    id: CatchID
    species: str
    form: str
    shiny: bool
    ball: str
    nickname: str
    payload: bytes
    egg: bool = False
    traded: bool = False
    favorite: bool = False
    legendary: bool = False
    event: bool = False

    @property
    def label(self) -> str:
        return f"{'★' if self.shiny else ''}{self.species}{self.form}"


@dataclass(slots=True)
class ItemBag:
    """Item kind -> count. Counts never drop to zero; empty entries are removed."""

    counts: dict[ItemKind, int] = field(default_factory=dict)

    def count(self, kind: ItemKind) -> int:
        return self.counts.get(kind, 0)

    def add(self, kind: ItemKind, amount: int = 1) -> int:
        """Add ``amount`` and return the previous count."""

        if amount <= 0:
            raise ValueError(f"amount must be positive, got {amount}")
        previous = self.counts.get(kind, 0)
        self.counts[kind] = previous + amount
        return previous

    def remove(self, kind: ItemKind, amount: int = 1) -> int:
        """Remove ``amount`` and return the remaining count."""

        held = self.counts.get(kind, 0)
        if amount <= 0:
            raise ValueError(f"amount must be positive, got {amount}")
        if amount > held:
            raise ValueError(f"cannot remove {amount} {kind.display_name}, only {held} held")
        remaining = held - amount
        if remaining == 0:
            del self.counts[kind]
        else:
            self.counts[kind] = remaining
        return remaining

    def discard(self, kind: ItemKind) -> int:
        """Drop every unit of ``kind`` and return how many were held."""

        return self.counts.pop(kind, 0)


@dataclass(slots=True)
class DaycareSlot:
    """A deposited catch with cached display fields."""

    catch_id: CatchID
    species: int
    form: str
    ball: Ball
    shiny: bool


@dataclass(slots=True)
class Daycare:
    """Two-slot holding area."""

    slot1: DaycareSlot | None = None
    slot2: DaycareSlot | None = None

    def holds(self, catch_id: int) -> bool:
        return any(slot is not None and slot.catch_id == catch_id for slot in self.slots)

    @property
    def slots(self) -> tuple[DaycareSlot | None, DaycareSlot | None]:
        return (self.slot1, self.slot2)

    @property
    def is_empty(self) -> bool:
        return self.slot1 is None and self.slot2 is None

    @property
    def is_full(self) -> bool:
        return self.slot1 is not None and self.slot2 is not None


@dataclass(slots=True)
class Buddy:
    """The single catch accompanying the player."""

    catch_id: CatchID | None = None
    nickname: str = ""
    ability: str = ""

    @property
    def is_set(self) -> bool:
        return self.catch_id is not None


@dataclass(slots=True)
class DexState:
    """Species registered in the current season plus the completion counter."""

    entries: set[int] = field(default_factory=set)
    completion_count: int = 0


@dataclass(slots=True)
class PerkState:
    """Active perk instances and the species-boost target (0 when unset)."""

    active: list[Perk] = field(default_factory=list)
    species_boost: int = 0

    def count(self, perk: Perk) -> int:
        return sum(1 for active in self.active if active is perk)


@dataclass(slots=True)
class PlayerAggregate:
    """Everything the engine knows about one player."""

    player_id: PlayerID
    username: str
    trainer: TrainerInfo = field(default_factory=TrainerInfo)
    time_offset: int = 0
    catch_count: int = 0
    catches: dict[CatchID, Catch] = field(default_factory=dict)
    items: ItemBag = field(default_factory=ItemBag)
    daycare: Daycare = field(default_factory=Daycare)
    buddy: Buddy = field(default_factory=Buddy)
    dex: DexState = field(default_factory=DexState)
    perks: PerkState = field(default_factory=PerkState)

    def visible_catch(self, catch_id: int) -> Catch | None:
        """Return the catch unless it is missing or locked in a pending trade."""

        match = self.catches.get(CatchID(catch_id))
        if match is None or match.traded:
            return None
        return match

    def is_protected(self, catch_id: int) -> bool:
        """Whether the catch is in daycare, favorited, or the active buddy."""

        match = self.catches.get(CatchID(catch_id))
        return (
            self.daycare.holds(catch_id)
            or self.buddy.catch_id == catch_id
            or (match is not None and match.favorite)
        )


@dataclass(slots=True)
class TradeMarker:
    """One catch awaiting the outcome of an external trade."""

    catch_id: CatchID
    created_at: datetime


# --- Helpers --------------------------------------------------------------------


def allocate_catch_id(existing: Iterable[int]) -> CatchID:
    """Return the smallest non-negative integer not present in ``existing``."""

    taken = set(existing)
    candidate = 0
    while candidate in taken:
        candidate += 1
    return CatchID(candidate)


def with_trainer(creature: Creature, trainer: TrainerInfo) -> Creature:
    """Stamp the player's trainer metadata onto ``creature`` in place and return it."""

    creature.ot_name = trainer.ot_name
    creature.ot_gender = trainer.ot_gender
    creature.tid = trainer.tid
    creature.sid = trainer.sid
    creature.language = trainer.language
    return creature
