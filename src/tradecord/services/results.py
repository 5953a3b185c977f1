"""Command inputs and outputs exchanged with the dispatcher."""

from __future__ import annotations

from dataclasses import dataclass, field

from tradecord.domain.models import Catch, Creature, PlayerAggregate, PlayerID
from tradecord.persistence.mutations import Mutation


@dataclass(frozen=True, slots=True)
class CommandContext:
    """Who is acting, and for two-party commands, who receives."""

    player_id: PlayerID
    username: str
    giftee_id: PlayerID | None = None
    giftee_username: str = ""


@dataclass(slots=True)
class NewCatch:
    """A catch inserted by the command, with its assigned id."""

    catch: Catch
    creature: Creature


@dataclass(slots=True)
class CommandResult:
    success: bool
    message: str = ""
    label: str = ""
    new_catches: list[NewCatch] = field(default_factory=list)
    creature: Creature | None = None
    item: str = ""
    failed_catch: bool = False
    player: PlayerAggregate | None = None
    giftee: PlayerAggregate | None = None
    mutations: tuple[Mutation, ...] = ()

    @classmethod
    def failure(cls, message: str) -> CommandResult:
        return cls(success=False, message=message)
