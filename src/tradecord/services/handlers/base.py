"""Shared handler plumbing: the collaborator bundle and the invocation record."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum

from tradecord.config import Settings
from tradecord.domain.enums import ItemKind
from tradecord.domain.generation import EventState, GenerationServices
from tradecord.domain.models import (
    Catch,
    CatchID,
    Creature,
    PlayerAggregate,
    PlayerID,
    TradeMarker,
)
from tradecord.domain.progression import completion_threshold
from tradecord.domain.rules_config import RulesConfig
from tradecord.errors import InputError
from tradecord.interfaces.catalog import IExperienceTable, ISpeciesCatalog
from tradecord.interfaces.evolution import IEvolutionResolver
from tradecord.interfaces.gifts import IMysteryGiftProvider
from tradecord.interfaces.runtime import IClock, IRoller
from tradecord.interfaces.validity import IValidityChecker, IWordFilter
from tradecord.persistence.mutations import MutationBatch
from tradecord.persistence.payload import decode_creature, encode_creature
from tradecord.services.results import CommandContext


@dataclass(slots=True)
class GameServices:
    """Collaborators and configuration handed to every handler."""

    catalog: ISpeciesCatalog
    resolver: IEvolutionResolver
    validity: IValidityChecker
    gifts: IMysteryGiftProvider
    exp_table: IExperienceTable
    word_filter: IWordFilter
    roller: IRoller
    clock: IClock
    rules: RulesConfig
    settings: Settings

    @property
    def generation(self) -> GenerationServices:
        return GenerationServices(
            catalog=self.catalog,
            resolver=self.resolver,
            validity=self.validity,
            gifts=self.gifts,
            exp_table=self.exp_table,
            roller=self.roller,
        )

    @property
    def dex_threshold(self) -> int:
        return completion_threshold(self.catalog, self.rules.dex)

    def event(self) -> EventState:
        return EventState.from_settings(self.settings, self.clock.now())


class CatchRole(StrEnum):
    """Order in which pending catches receive ids."""

    SECONDARY = "secondary"
    MAIN = "main"
    EGG = "egg"


@dataclass(slots=True)
class PendingCatch:
    creature: Creature
    role: CatchRole


@dataclass(slots=True)
class Invocation:
    """Everything a handler reads and writes for one command.

    ``player`` and ``giftee`` are working copies; the dispatcher stores them
    back into the cache only after the batch commits.
    """

    context: CommandContext
    player: PlayerAggregate
    args: tuple[str, ...]
    services: GameServices
    batch: MutationBatch = field(default_factory=MutationBatch)
    giftee: PlayerAggregate | None = None
    pending: list[PendingCatch] = field(default_factory=list)
    trade_marker: TradeMarker | None = None
    evicted: list[PlayerID] = field(default_factory=list)
    message: str = ""
    label: str = ""
    creature: Creature | None = None
    item: str = ""
    failed_catch: bool = False
    player_exists: Callable[[PlayerID], bool] | None = None

    def arg(self, index: int, default: str = "") -> str:
        return self.args[index].strip() if index < len(self.args) else default

    @property
    def text(self) -> str:
        """All arguments joined by spaces."""
        return " ".join(arg.strip() for arg in self.args).strip()

    def require_giftee(self) -> PlayerAggregate:
        if self.giftee is None:
            raise InputError("Please mention a user to gift to.")
        return self.giftee


Handler = Callable[[Invocation], None]


def parse_catch_id(raw: str) -> CatchID:
    try:
        return CatchID(int(raw.strip()))
    except ValueError:
        raise InputError("Please enter a numerical catch ID.") from None


def load_creature(catch: Catch) -> Creature:
    """Decode a catch payload; a corrupt payload surfaces as a user-facing error."""

    try:
        return decode_creature(catch.payload)
    except ValueError:
        raise InputError("Oops, something happened when converting your Pokémon!") from None


def display_name(catch: Catch) -> str:
    return f"{'★' if catch.shiny else ''}{catch.species}{catch.form}"


def make_catch(catch_id: CatchID, creature: Creature, catalog: ISpeciesCatalog) -> Catch:
    """Build the listing record for a freshly produced creature."""

    info = catalog.get(creature.species)
    return Catch(
        id=catch_id,
        species=info.name if info is not None else str(creature.species),
        form=catalog.form_suffix(creature.species, creature.form),
        shiny=creature.is_shiny,
        ball=str(creature.ball),
        nickname=creature.nickname,
        payload=encode_creature(creature),
        egg=creature.is_egg,
        legendary=info is not None and (info.legendary or info.mythical),
        event=creature.fateful,
    )


def item_label(kind: ItemKind) -> str:
    if kind is ItemKind.SHINY_CHARM:
        return "★Shiny Charm★"
    return kind.display_name


def with_article(name: str) -> str:
    bare = name.lstrip("★")
    article = "an" if bare[:1].lower() in "aeiou" else "a"
    return f"{article} {name}"
