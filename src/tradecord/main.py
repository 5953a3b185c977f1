"""Entrypoint for the TradeCord HTTP API."""

from __future__ import annotations

import argparse
import logging
import sys

import uvicorn

from tradecord.api.app import create_app
from tradecord.config import get_settings
from tradecord.errors import AnotherInstanceRunning
from tradecord.guard import SocketInstanceGuard
from tradecord.interfaces.runtime import ISingleInstanceGuard

logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the TradeCord API server")
    parser.add_argument("--host", default="127.0.0.1", help="Host interface to bind")
    parser.add_argument("--port", type=int, default=8000, help="TCP port to listen on")
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable autoreload (dev mode)",
    )
    args = parser.parse_args()

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    guard: ISingleInstanceGuard = SocketInstanceGuard(settings.instance_guard_port)
    try:
        guard.acquire()
    except AnotherInstanceRunning as exc:
        logger.error("refusing to start: %s", exc)
        sys.exit(1)

    try:
        if args.reload:
            uvicorn.run(
                "tradecord.api.app:create_app",
                host=args.host,
                port=args.port,
                reload=True,
                factory=True,
            )
        else:
            uvicorn.run(create_app(), host=args.host, port=args.port, reload=False)
    finally:
        guard.release()


if __name__ == "__main__":
    main()
