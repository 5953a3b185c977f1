"""Process-wide mutable state shared by the dispatcher.

``GameState`` owns the single writer lock, the maintenance barrier, the
player cache, and the pending-trade markers. It is constructed once per
process and injected into the dispatcher.
"""

from __future__ import annotations

import copy
import logging
import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager

from tradecord.domain.models import PlayerAggregate, PlayerID, TradeMarker

logger = logging.getLogger(__name__)


class GameState:
    """Cache of player aggregates plus the concurrency primitives guarding it.

    Cached aggregates are never handed out directly: ``checkout`` returns a
    deep copy and ``store`` replaces the cached entry after a commit.
    """

    def __init__(self, *, poll_seconds: float = 0.1) -> None:
        self.lock = threading.Lock()
        self._maintenance = threading.Event()
        self._poll_seconds = poll_seconds
        self._players: dict[PlayerID, PlayerAggregate] = {}
        self._trades: dict[PlayerID, TradeMarker] = {}

    # --- maintenance barrier ------------------------------------------------

    @property
    def in_maintenance(self) -> bool:
        return self._maintenance.is_set()

    def wait_for_admission(self) -> None:
        """Park the caller while the maintenance flag is raised."""

        while self._maintenance.is_set():
            time.sleep(self._poll_seconds)

    @contextmanager
    def maintenance_window(self) -> Iterator[None]:
        """Raise the maintenance flag and hold the lock for the duration."""

        self._maintenance.set()
        try:
            with self.lock:
                yield
        finally:
            self._maintenance.clear()

    # --- player cache -------------------------------------------------------

    def cached(self, player_id: PlayerID) -> bool:
        return player_id in self._players

    def checkout(self, player_id: PlayerID) -> PlayerAggregate | None:
        """Deep copy of the cached aggregate, or ``None`` when not cached."""

        cached = self._players.get(player_id)
        return copy.deepcopy(cached) if cached is not None else None

    def store(self, player: PlayerAggregate) -> None:
        self._players[player.player_id] = player

    def evict(self, player_id: PlayerID) -> None:
        self._players.pop(player_id, None)
        self._trades.pop(player_id, None)

    # --- trade markers ------------------------------------------------------

    def trade_marker(self, player_id: PlayerID) -> TradeMarker | None:
        return self._trades.get(player_id)

    def set_trade_marker(self, player_id: PlayerID, marker: TradeMarker) -> None:
        self._trades[player_id] = marker

    def clear_trade_marker(self, player_id: PlayerID) -> TradeMarker | None:
        return self._trades.pop(player_id, None)

    def close(self) -> None:
        """Drop every cached aggregate and marker."""

        with self.lock:
            pending = len(self._trades)
            self._players.clear()
            self._trades.clear()
        if pending:
            logger.warning("closing with %d unresolved trade marker(s)", pending)
