"""FastAPI application for the TradeCord engine.

The app mounts the command endpoint (``POST /players/{id}/commands``), trade
completion (``POST /players/{id}/trade/complete``), the maintenance trigger
(``POST /maintenance/vacuum``), and ``GET /health``. One ``ApiState`` lives
for the lifetime of the app.
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI

from tradecord import __version__
from tradecord.api import routes
from tradecord.api.runtime import ApiState, build_state


def create_app(*, state_factory: Callable[[], ApiState] = build_state) -> FastAPI:
    """Build the app around a lazily created ``ApiState``.

    ``state_factory`` runs when the lifespan starts, which is also when the
    inactive-player sweep happens if it is enabled. The state is shut down
    when the lifespan ends.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        state = state_factory()
        app.state.api_state = state
        try:
            yield
        finally:
            await state.shutdown()

    app = FastAPI(
        title="TradeCord API",
        description="Per-player catch, trade, and breeding commands",
        version=__version__,
        lifespan=lifespan,
    )
    app.include_router(routes.router)
    return app
