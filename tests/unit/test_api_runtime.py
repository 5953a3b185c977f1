"""Tests for API runtime helpers (service wiring and the async gateway)."""

from __future__ import annotations

import asyncio

import pytest

from tradecord.api.runtime import ApiState, CommandGateway, build_services
from tradecord.catalog import RegexWordFilter
from tradecord.domain.enums import CommandTag
from tradecord.domain.models import PlayerID
from tradecord.persistence import PlayerRepository
from tradecord.services import CommandContext
from tradecord.utils.clock import SystemClock
from tradecord.utils.rng import RandomRoller


def test_build_services_defaults(settings):
    services = build_services(settings)
    assert isinstance(services.roller, RandomRoller)
    assert isinstance(services.clock, SystemClock)
    assert services.rules.generation.catch_rate == settings.catch_rate
    assert services.dex_threshold == services.catalog.dex_size()


def test_configured_banned_words_extend_the_defaults(settings):
    settings.banned_words = ["bidoof"]
    word_filter = build_services(settings).word_filter
    assert isinstance(word_filter, RegexWordFilter)
    assert word_filter.is_filtered("Bidoof")
    assert word_filter.is_filtered("damn")


@pytest.mark.asyncio
async def test_api_state_wires_the_dispatcher(settings, services):
    state = ApiState(settings=settings, services=services)
    try:
        assert state.gateway.dispatcher is state.dispatcher
        assert not state.game.in_maintenance
    finally:
        await state.shutdown()


@pytest.mark.asyncio
async def test_gateway_executes_commands_off_the_loop(dispatcher, roller):
    gateway = CommandGateway(dispatcher)
    ash = CommandContext(player_id=PlayerID(1), username="Ash")
    roller.script_catch()
    roller.script_catch()

    first, second = await asyncio.gather(
        gateway.execute(ash, CommandTag.CATCH),
        gateway.execute(ash, CommandTag.CATCH),
    )

    assert first.success and second.success
    ids = sorted(new.catch.id for result in (first, second) for new in result.new_catches)
    assert ids == [0, 1]


@pytest.mark.asyncio
async def test_gateway_trade_completion(dispatcher):
    gateway = CommandGateway(dispatcher)
    result = await gateway.complete_trade(PlayerID(1), delivered=False)
    assert not result.success
    assert result.message == "No pending trade."


@pytest.mark.asyncio
async def test_gateway_maintenance_runs_once_at_a_time(dispatcher, game_state):
    gateway = CommandGateway(dispatcher)
    await asyncio.gather(gateway.run_maintenance(), gateway.run_maintenance())
    assert not game_state.in_maintenance


@pytest.mark.asyncio
async def test_api_state_clears_inactive_players_at_startup(settings, services, clock):
    state = ApiState(settings=settings, services=services)
    state.dispatcher.execute(CommandContext(player_id=PlayerID(1), username="Ash"), CommandTag.DEX)
    await state.shutdown()

    clock.advance(days=31)
    settings.clear_inactive = True
    swept = ApiState(settings=settings, services=services)
    try:
        assert not PlayerRepository(swept.engine).exists(PlayerID(1))
    finally:
        await swept.shutdown()
