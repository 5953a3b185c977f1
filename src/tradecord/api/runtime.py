"""Runtime primitives backing the TradeCord HTTP API."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from datetime import timedelta

from sqlalchemy.engine import Engine

from tradecord.catalog import (
    CatalogEvolutionResolver,
    CatalogMysteryGiftProvider,
    GrowthCurves,
    RegexWordFilter,
    RulesValidityChecker,
    SpeciesCatalog,
)
from tradecord.catalog.validity import DEFAULT_BANNED_WORDS
from tradecord.config import Settings, get_settings
from tradecord.database import create_db_engine, init_db
from tradecord.domain.enums import CommandTag
from tradecord.domain.models import PlayerID
from tradecord.domain.rules_config import rules_from_settings
from tradecord.interfaces.runtime import IClock, IRoller
from tradecord.persistence import PlayerRepository, SqlMutationExecutor
from tradecord.services import (
    CommandContext,
    CommandDispatcher,
    CommandResult,
    GameServices,
    GameState,
)
from tradecord.utils.clock import SystemClock
from tradecord.utils.rng import RandomRoller

logger = logging.getLogger(__name__)


def build_services(
    settings: Settings,
    *,
    roller: IRoller | None = None,
    clock: IClock | None = None,
) -> GameServices:
    """Wire the default collaborators around the bundled species table."""

    catalog = SpeciesCatalog.from_file(settings.species_data_path)
    return GameServices(
        catalog=catalog,
        resolver=CatalogEvolutionResolver(catalog),
        validity=RulesValidityChecker(catalog),
        gifts=CatalogMysteryGiftProvider(catalog),
        exp_table=GrowthCurves(),
        word_filter=RegexWordFilter([*DEFAULT_BANNED_WORDS, *settings.banned_words]),
        roller=roller or RandomRoller(),
        clock=clock or SystemClock(),
        rules=rules_from_settings(settings),
        settings=settings,
    )


class CommandGateway:
    """Async front for the dispatcher.

    The dispatcher blocks on a thread lock, so every call runs in a worker
    thread and the event loop stays responsive while commands queue up.
    """

    def __init__(self, dispatcher: CommandDispatcher) -> None:
        self._dispatcher = dispatcher
        self._maintenance_lock = asyncio.Lock()

    @property
    def dispatcher(self) -> CommandDispatcher:
        return self._dispatcher

    async def execute(
        self, context: CommandContext, command: CommandTag, args: Sequence[str] = ()
    ) -> CommandResult:
        return await asyncio.to_thread(self._dispatcher.execute, context, command, tuple(args))

    async def complete_trade(self, player_id: PlayerID, delivered: bool) -> CommandResult:
        return await asyncio.to_thread(self._dispatcher.complete_trade, player_id, delivered)

    async def run_maintenance(self) -> None:
        async with self._maintenance_lock:
            await asyncio.to_thread(self._dispatcher.run_maintenance)


class ApiState:
    """Aggregated services shared by the FastAPI layer."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        engine: Engine | None = None,
        services: GameServices | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.engine = engine or create_db_engine(self.settings)
        init_db(self.engine)
        self.services = services or build_services(self.settings)
        self.game = GameState(poll_seconds=self.settings.maintenance_poll_seconds)
        self.dispatcher = CommandDispatcher(
            self.game,
            PlayerRepository(self.engine),
            SqlMutationExecutor(self.engine),
            self.services,
        )
        self.gateway = CommandGateway(self.dispatcher)
        if self.settings.clear_inactive:
            self.dispatcher.clear_inactive(timedelta(days=self.settings.inactive_days))

    async def shutdown(self) -> None:
        self.game.close()
        self.engine.dispose()
        logger.info("api state shut down")


def build_state() -> ApiState:
    """Factory used by the API to initialize state."""

    return ApiState()
