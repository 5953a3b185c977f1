"""Trainer profile, time zone, and account deletion handlers."""

from __future__ import annotations

import logging
from datetime import timedelta

from tradecord.domain.enums import ItemKind
from tradecord.domain.models import PlayerID, TrainerInfo
from tradecord.errors import InputError
from tradecord.persistence.repository import delete_rows
from tradecord.services import staging
from tradecord.services.handlers.base import Invocation

logger = logging.getLogger(__name__)

MIN_UTC_OFFSET = -12
MAX_UTC_OFFSET = 14


def _trainer_lines(trainer: TrainerInfo) -> str:
    return (
        f"\n**OT:** {trainer.ot_name}"
        f"\n**OTGender:** {trainer.ot_gender}"
        f"\n**TID:** {trainer.tid}"
        f"\n**SID:** {trainer.sid}"
        f"\n**Language:** {trainer.language}"
    )


def handle_set_trainer_info(inv: Invocation) -> None:
    if len(inv.args) < 5:
        raise InputError("Please provide OT, gender, TID, SID, and language.")
    ot_name, ot_gender, raw_tid, raw_sid, language = (inv.arg(i) for i in range(5))
    try:
        tid, sid = int(raw_tid), int(raw_sid)
    except ValueError:
        raise InputError("TID and SID must be numbers.") from None

    player = inv.player
    player.trainer = TrainerInfo(
        ot_name=ot_name, ot_gender=ot_gender, tid=tid, sid=sid, language=language
    )
    staging.save_player(inv.batch, player, "ot_name", "ot_gender", "tid", "sid", "language")
    inv.message = "\nYour trainer info was set to the following:" + _trainer_lines(player.trainer)
    inv.label = f"{player.username}'s Trainer Info"


def handle_get_trainer_info(inv: Invocation) -> None:
    player = inv.player
    inv.message = (
        _trainer_lines(player.trainer)
        + f"\n**Shiny Charm:** {player.items.count(ItemKind.SHINY_CHARM)}"
        + f"\n**UTC Time Offset:** {player.time_offset}"
    )
    inv.label = f"{player.username}'s Trainer Info"


def handle_set_timezone(inv: Invocation) -> None:
    try:
        offset = int(inv.arg(0))
    except ValueError:
        raise InputError("Input must be a number (i.e. -2, 5...), or a zero.") from None
    if not MIN_UTC_OFFSET <= offset <= MAX_UTC_OFFSET:
        raise InputError("Invalid UTC time offset.")

    player = inv.player
    player.time_offset = offset
    staging.save_player(inv.batch, player, "time_offset")
    local = inv.services.clock.now() + timedelta(hours=offset)
    inv.message = (
        f"UTC time offset set to **{offset}**. "
        f"Your current time should be **{local:%Y-%m-%d %H:%M:%S}**."
    )


def handle_delete_player(inv: Invocation) -> None:
    """Remove every stored row of the target player and drop it from the cache."""

    raw = inv.arg(0)
    try:
        target = PlayerID(int(raw))
    except ValueError:
        raise InputError("Please enter a numerical user ID.") from None

    if inv.player_exists is None or not inv.player_exists(target):
        raise InputError("This user does not exist.")
    inv.batch.extend(delete_rows(target))
    inv.evicted.append(target)
    inv.message = f"User {target} was deleted."
    inv.label = "User Deletion"
    logger.info("player %s deleted by %s", target, inv.player.player_id)
