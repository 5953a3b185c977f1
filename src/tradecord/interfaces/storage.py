"""Storage protocols: the batch executor and the aggregate loader."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from tradecord.domain.models import PlayerAggregate, PlayerID
from tradecord.persistence.mutations import Mutation


class IStorageExecutor(Protocol):
    """Applies an ordered batch of mutations all-or-nothing."""

    def apply(self, mutations: Sequence[Mutation]) -> None:
        ...

    def vacuum(self) -> None:
        """Compact the store; called only inside a maintenance window."""
        ...


class IPlayerRepository(Protocol):
    """Read side of the store."""

    def load(self, player_id: PlayerID) -> PlayerAggregate | None:
        ...

    def exists(self, player_id: PlayerID) -> bool:
        ...

    def inactive_since(self, cutoff: datetime) -> list[PlayerID]:
        ...
