"""Single-writer command dispatcher.

Every command runs under ``GameState.lock``. The dispatcher loads (or
creates) the acting player's aggregate, repairs leftover trade state, hands
deep copies to the registered handler, and commits the handler's mutation
batch in one storage transaction. The cache is only updated after that
transaction succeeds, so a failing handler or a failing commit leaves both
the cache and the store exactly as they were.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping, Sequence
from datetime import timedelta

from tradecord.domain.enums import TWO_PARTY_COMMANDS, CommandTag
from tradecord.domain.models import PlayerAggregate, PlayerID, allocate_catch_id
from tradecord.domain.progression import register
from tradecord.errors import CommandError, GenerationError, InputError, StateConflictError
from tradecord.interfaces.storage import IPlayerRepository, IStorageExecutor
from tradecord.persistence.mutations import MutationBatch
from tradecord.persistence.repository import default_rows, delete_rows
from tradecord.services import staging
from tradecord.services.handlers import build_registry
from tradecord.services.handlers.base import (
    CatchRole,
    GameServices,
    Handler,
    Invocation,
    display_name,
    make_catch,
)
from tradecord.services.results import CommandContext, CommandResult, NewCatch
from tradecord.services.state import GameState

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Something went wrong while processing your command. Please try again later."

_ALLOCATION_ORDER = (CatchRole.SECONDARY, CatchRole.MAIN, CatchRole.EGG)


class CommandDispatcher:
    """Serializes commands against the player cache and the store."""

    def __init__(
        self,
        state: GameState,
        repository: IPlayerRepository,
        executor: IStorageExecutor,
        services: GameServices,
        registry: Mapping[CommandTag, Handler] | None = None,
    ) -> None:
        if registry is None:
            registry = build_registry()
        self._state = state
        self._repository = repository
        self._executor = executor
        self._services = services
        self._registry = dict(registry)

    @property
    def state(self) -> GameState:
        return self._state

    def handler_for(self, command: CommandTag) -> Handler:
        handler = self._registry.get(command)
        if handler is None:
            raise LookupError(f"no handler registered for command {command!r}")
        return handler

    # --- commands -----------------------------------------------------------

    def execute(
        self,
        context: CommandContext,
        command: CommandTag,
        args: Sequence[str] = (),
    ) -> CommandResult:
        """Run one command to completion.

        Args:
            context: Acting player and, for gifts, the receiving player
            command: Command tag selecting the handler
            args: Raw command arguments

        Returns:
            CommandResult: Success flag, user message, and the new state

        Raises:
            LookupError: If no handler is registered for ``command``
        """
        handler = self.handler_for(command)
        self._state.wait_for_admission()
        with self._state.lock:
            return self._execute_locked(context, command, handler, tuple(args))

    def _execute_locked(
        self,
        context: CommandContext,
        command: CommandTag,
        handler: Handler,
        args: tuple[str, ...],
    ) -> CommandResult:
        try:
            player = self._acquire(context.player_id, context.username, acting=True)
            giftee = None
            if command in TWO_PARTY_COMMANDS:
                giftee = self._acquire_giftee(context)
        except CommandError as exc:
            return CommandResult.failure(exc.message)
        except Exception:
            logger.exception(
                "failed to load player %s for command %s", context.player_id, command
            )
            return CommandResult.failure(GENERIC_FAILURE)

        inv = Invocation(
            context=context,
            player=player,
            args=args,
            services=self._services,
            giftee=giftee,
            player_exists=self._player_exists,
        )
        try:
            _sync_username(inv.batch, inv.player, context.username)
            if inv.giftee is not None:
                _sync_username(inv.batch, inv.giftee, context.giftee_username)
            staging.touch_player(inv.batch, inv.player, self._services.clock.now())
            handler(inv)
            new_catches = self._commit_pending(inv)
            self._executor.apply(inv.batch.mutations)
        except CommandError as exc:
            return CommandResult.failure(exc.message)
        except GenerationError as exc:
            logger.error(
                "command %s for player %s produced an invalid creature: %s %s",
                command,
                context.player_id,
                exc.message,
                exc.diagnostics,
            )
            return CommandResult.failure(exc.message)
        except Exception:
            logger.exception(
                "command %s failed for player %s with args %r",
                command,
                context.player_id,
                args,
            )
            return CommandResult.failure(GENERIC_FAILURE)

        self._state.store(inv.player)
        if inv.giftee is not None:
            self._state.store(inv.giftee)
        if inv.trade_marker is not None:
            self._state.set_trade_marker(inv.player.player_id, inv.trade_marker)
        for player_id in inv.evicted:
            self._state.evict(player_id)

        return CommandResult(
            success=True,
            message=inv.message,
            label=inv.label,
            new_catches=new_catches,
            creature=inv.creature,
            item=inv.item,
            failed_catch=inv.failed_catch,
            player=self._state.checkout(inv.player.player_id),
            giftee=self._state.checkout(inv.giftee.player_id) if inv.giftee else None,
            mutations=inv.batch.mutations,
        )

    def complete_trade(self, player_id: PlayerID, delivered: bool) -> CommandResult:
        """Resolve the player's pending trade.

        A delivered creature leaves the collection; otherwise the catch is
        unlocked again.
        """
        self._state.wait_for_admission()
        with self._state.lock:
            marker = self._state.trade_marker(player_id)
            if marker is None:
                return CommandResult.failure("No pending trade.")
            player = self._state.checkout(player_id)
            if player is None:
                self._state.clear_trade_marker(player_id)
                return CommandResult.failure("No pending trade.")

            batch = MutationBatch()
            catch = player.catches.get(marker.catch_id)
            if catch is None:
                message = "The traded Pokémon is no longer in your collection."
            elif delivered:
                message = f"Trade complete! {display_name(catch)} (ID: {catch.id}) was sent."
                staging.delete_catches(batch, player, [catch.id])
            else:
                catch.traded = False
                staging.update_catch(batch, player, catch, "was_traded")
                message = f"Trade cancelled. {display_name(catch)} (ID: {catch.id}) is back."

            try:
                self._executor.apply(batch.mutations)
            except Exception:
                logger.exception("failed to resolve trade for player %s", player_id)
                return CommandResult.failure(GENERIC_FAILURE)

            self._state.store(player)
            self._state.clear_trade_marker(player_id)
            logger.info(
                "trade of catch %s for player %s resolved (delivered=%s)",
                marker.catch_id,
                player_id,
                delivered,
            )
            return CommandResult(
                success=True,
                message=message,
                player=self._state.checkout(player_id),
                mutations=batch.mutations,
            )

    def run_maintenance(self) -> None:
        """Compact the store while every command is held at the barrier."""

        with self._state.maintenance_window():
            logger.info("maintenance started")
            self._executor.vacuum()

    def clear_inactive(self, max_idle: timedelta) -> list[PlayerID]:
        """Delete every player idle for longer than ``max_idle``.

        Runs under the lock like a command; the deletions commit in one
        transaction and the cleared players leave the cache afterwards.
        """
        cutoff = self._services.clock.now() - max_idle
        with self._state.lock:
            inactive = self._repository.inactive_since(cutoff)
            if not inactive:
                return []
            batch = MutationBatch()
            for player_id in inactive:
                batch.extend(delete_rows(player_id))
            self._executor.apply(batch.mutations)
            for player_id in inactive:
                self._state.evict(player_id)
        logger.info("cleared %d player(s) inactive since %s", len(inactive), cutoff.isoformat())
        return inactive

    # --- internals ----------------------------------------------------------

    def _player_exists(self, player_id: PlayerID) -> bool:
        return self._state.cached(player_id) or self._repository.exists(player_id)

    def _acquire_giftee(self, context: CommandContext) -> PlayerAggregate:
        if context.giftee_id is None:
            raise InputError("Please mention a user to gift to.")
        if context.giftee_id == context.player_id:
            raise InputError("You cannot gift to yourself.")
        return self._acquire(context.giftee_id, context.giftee_username, acting=False)

    def _acquire(self, player_id: PlayerID, username: str, *, acting: bool) -> PlayerAggregate:
        """Load or create a player, repair trade state, and return a working copy.

        A brand-new player and anything the trade repair touches are committed
        on their own before the handler runs. Username changes are not: they
        travel with the command's batch.
        """
        player = self._state.checkout(player_id)
        batch = MutationBatch()
        if player is None:
            player = self._repository.load(player_id)
            if player is None:
                player = PlayerAggregate(player_id=player_id, username=username)
                batch.extend(default_rows(player))
                logger.info("created player %s (%s)", player_id, username)
        if acting:
            self._reconcile_trade(player, batch)

        if batch:
            self._executor.apply(batch.mutations)
        self._state.store(player)
        return copy.deepcopy(player)

    def _reconcile_trade(self, player: PlayerAggregate, batch: MutationBatch) -> None:
        marker = self._state.trade_marker(player.player_id)
        if marker is not None:
            age = (self._services.clock.now() - marker.created_at).total_seconds()
            if age < self._services.settings.trade_marker_timeout_seconds:
                raise StateConflictError("Please wait for your current trade to finish.")
            logger.warning(
                "clearing stale trade marker for player %s (catch %s, %.0fs old)",
                player.player_id,
                marker.catch_id,
                age,
            )
            self._state.clear_trade_marker(player.player_id)

        for catch in player.catches.values():
            if catch.traded:
                catch.traded = False
                staging.update_catch(batch, player, catch, "was_traded")

    def _commit_pending(self, inv: Invocation) -> list[NewCatch]:
        """Give pending creatures their ids and stage their inserts."""

        services = inv.services
        created: list[NewCatch] = []
        pending = sorted(inv.pending, key=lambda item: _ALLOCATION_ORDER.index(item.role))
        for item in pending:
            catch_id = allocate_catch_id(inv.player.catches)
            catch = make_catch(catch_id, item.creature, services.catalog)
            inv.player.catches[catch_id] = catch
            staging.insert_catch(inv.batch, inv.player, catch)
            if item.role is CatchRole.SECONDARY:
                registration = register(
                    inv.player,
                    item.creature.species,
                    threshold=services.dex_threshold,
                    rules=services.rules.dex,
                )
                staging.stage_registration(inv.batch, inv.player, registration)
                inv.message += (
                    "\n\nA spare Poké Ball in your bag clicks quietly... "
                    f"You also caught {display_name(catch)} (ID: {catch.id})!"
                    + registration.message
                )
            created.append(NewCatch(catch=catch, creature=item.creature))
        return created


def _sync_username(batch: MutationBatch, player: PlayerAggregate, username: str) -> None:
    if username and player.username != username:
        player.username = username
        staging.save_player(batch, player, "username")
