"""Command dispatch, process state, and the handler registry."""

from tradecord.services.dispatcher import GENERIC_FAILURE, CommandDispatcher
from tradecord.services.handlers import GameServices, build_registry
from tradecord.services.results import CommandContext, CommandResult, NewCatch
from tradecord.services.state import GameState

__all__ = [
    "GENERIC_FAILURE",
    "CommandContext",
    "CommandDispatcher",
    "CommandResult",
    "GameServices",
    "GameState",
    "NewCatch",
    "build_registry",
]
