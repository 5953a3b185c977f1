"""Pytest configuration and shared fixtures.

This adds the `src/` directory to `sys.path` so tests can import the
`tradecord` package without requiring an editable install in CI, and
provides deterministic stand-ins for the clock and the dice.
"""

import sys
from collections import deque
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

SRC_PATH = Path(__file__).resolve().parents[1] / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from tradecord.api.runtime import build_services  # noqa: E402
from tradecord.config import Settings  # noqa: E402
from tradecord.database import create_db_engine, init_db  # noqa: E402
from tradecord.domain.models import PlayerID  # noqa: E402
from tradecord.persistence import PlayerRepository, SqlMutationExecutor  # noqa: E402
from tradecord.services import CommandContext, CommandDispatcher, GameState  # noqa: E402


class ScriptedRoller:
    """``IRoller`` replaying queued integers.

    ``randint`` pops the next queued value and falls back to the low bound
    once the queue is empty. ``choice`` returns the first option listed in
    ``prefer`` and otherwise the first option.
    """

    def __init__(self, ints=(), prefer=()):
        self.ints = deque(ints)
        self.prefer = list(prefer)

    def push(self, *values):
        self.ints.extend(values)

    def randint(self, low, high):
        if not self.ints:
            return low
        return self.ints.popleft()

    def choice(self, options):
        for wanted in self.prefer:
            if wanted in options:
                return wanted
        return options[0]

    def script_catch(
        self,
        *,
        caught=True,
        egg=0,
        item=0,
        cherish=0,
        gmax=0,
        boost=0,
        shiny=0,
        egg_shiny=0,
        charm=100,
        level=10,
    ):
        """Queue the draws of one catch attempt, in generation order."""
        self.push(100 if caught else 0, egg, item, cherish, gmax, boost, shiny, egg_shiny, charm)
        if caught and level is not None:
            self.push(level)


class FixedClock:
    """``IClock`` frozen at a settable instant."""

    def __init__(self, now=None):
        self.current = now or datetime(2024, 6, 1, 12, 0, tzinfo=UTC)

    def now(self):
        return self.current

    def advance(self, **delta):
        self.current += timedelta(**delta)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        database_url=f"sqlite:///{tmp_path / 'tradecord.db'}",
        maintenance_poll_seconds=0.01,
    )


@pytest.fixture
def roller():
    return ScriptedRoller()


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def services(settings, roller, clock):
    return build_services(settings, roller=roller, clock=clock)


@pytest.fixture
def engine(settings):
    engine = create_db_engine(settings)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def game_state():
    return GameState(poll_seconds=0.01)


@pytest.fixture
def dispatcher(game_state, engine, services):
    return CommandDispatcher(
        game_state, PlayerRepository(engine), SqlMutationExecutor(engine), services
    )


@pytest.fixture
def ash():
    return CommandContext(player_id=PlayerID(1), username="Ash")


@pytest.fixture
def misty():
    return CommandContext(player_id=PlayerID(2), username="Misty")
