"""HTTP routes for the TradeCord API."""

from __future__ import annotations

from dataclasses import asdict
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel, Field

from tradecord.api.runtime import ApiState
from tradecord.database import check_database_health
from tradecord.domain.enums import CommandTag
from tradecord.domain.models import PlayerID
from tradecord.services import CommandContext, CommandResult

router = APIRouter()


def get_state(request: Request) -> ApiState:
    state = getattr(request.app.state, "api_state", None)
    if state is None:  # pragma: no cover - FastAPI should always initialise state
        raise RuntimeError("API state not initialised")
    return state


ApiStateDep = Annotated[ApiState, Depends(get_state)]


class CommandRequest(BaseModel):
    command: CommandTag
    args: list[str] = Field(default_factory=list)
    username: str = Field(min_length=1)
    giftee_id: int | None = None
    giftee_username: str = ""


class TradeCompletionRequest(BaseModel):
    delivered: bool


class CatchSummary(BaseModel):
    id: int
    species: str
    form: str
    shiny: bool
    ball: str
    nickname: str
    egg: bool


class CommandResponse(BaseModel):
    success: bool
    message: str
    label: str
    new_catches: list[CatchSummary]
    creature: dict[str, object] | None
    item: str
    failed_catch: bool
    mutation_count: int


def to_response(result: CommandResult) -> CommandResponse:
    return CommandResponse(
        success=result.success,
        message=result.message,
        label=result.label,
        new_catches=[
            CatchSummary(
                id=new.catch.id,
                species=new.catch.species,
                form=new.catch.form,
                shiny=new.catch.shiny,
                ball=new.catch.ball,
                nickname=new.catch.nickname,
                egg=new.catch.egg,
            )
            for new in result.new_catches
        ],
        creature=asdict(result.creature) if result.creature is not None else None,
        item=result.item,
        failed_catch=result.failed_catch,
        mutation_count=len(result.mutations),
    )


@router.get("/health")
async def health(state: ApiStateDep) -> dict[str, object]:
    database_ok = check_database_health(state.engine)
    return {
        "status": "ok" if database_ok else "degraded",
        "database": database_ok,
        "maintenance": state.game.in_maintenance,
    }


@router.post("/players/{player_id}/commands", response_model=CommandResponse)
async def run_command(
    player_id: int, request: CommandRequest, state: ApiStateDep
) -> CommandResponse:
    context = CommandContext(
        player_id=PlayerID(player_id),
        username=request.username,
        giftee_id=PlayerID(request.giftee_id) if request.giftee_id is not None else None,
        giftee_username=request.giftee_username,
    )
    result = await state.gateway.execute(context, request.command, request.args)
    return to_response(result)


@router.post("/players/{player_id}/trade/complete", response_model=CommandResponse)
async def complete_trade(
    player_id: int, request: TradeCompletionRequest, state: ApiStateDep
) -> CommandResponse:
    result = await state.gateway.complete_trade(PlayerID(player_id), request.delivered)
    if not result.success and result.message == "No pending trade.":
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=result.message)
    return to_response(result)


@router.post("/maintenance/vacuum", status_code=status.HTTP_202_ACCEPTED)
async def vacuum(state: ApiStateDep) -> dict[str, str]:
    await state.gateway.run_maintenance()
    return {"status": "done"}
