"""Mapping between domain dataclasses and table rows.

Each ``*_values`` function returns the column dict staged on a mutation; the
``*_from_row`` functions rebuild domain objects from SQLAlchemy result rows.
"""

from __future__ import annotations

from typing import Any

from tradecord.domain.enums import Ball, Perk
from tradecord.domain.models import (
    Buddy,
    Catch,
    CatchID,
    Daycare,
    DaycareSlot,
    DexState,
    PerkState,
    TrainerInfo,
)
from tradecord.persistence.mutations import Value


def trainer_values(trainer: TrainerInfo) -> dict[str, Value]:
    return {
        "ot_name": trainer.ot_name,
        "ot_gender": trainer.ot_gender,
        "tid": trainer.tid,
        "sid": trainer.sid,
        "language": trainer.language,
    }


def catch_values(catch: Catch) -> dict[str, Value]:
    """Listing columns of ``catches`` for one catch (without the key)."""

    return {
        "is_shiny": catch.shiny,
        "ball": catch.ball,
        "nickname": catch.nickname,
        "species": catch.species,
        "form": catch.form,
        "is_egg": catch.egg,
        "is_favorite": catch.favorite,
        "was_traded": catch.traded,
        "is_legendary": catch.legendary,
        "is_event": catch.event,
    }


def daycare_values(daycare: Daycare) -> dict[str, Value]:
    values: dict[str, Value] = {}
    for index, slot in enumerate(daycare.slots, start=1):
        values[f"id{index}"] = slot.catch_id if slot is not None else None
        values[f"species{index}"] = slot.species if slot is not None else 0
        values[f"form{index}"] = slot.form if slot is not None else ""
        values[f"ball{index}"] = str(slot.ball) if slot is not None else ""
        values[f"shiny{index}"] = slot.shiny if slot is not None else False
    return values


def buddy_values(buddy: Buddy) -> dict[str, Value]:
    return {"catch_id": buddy.catch_id, "name": buddy.nickname, "ability": buddy.ability}


def dex_values(dex: DexState) -> dict[str, Value]:
    return {"entries": sorted(dex.entries), "dex_count": dex.completion_count}


def perk_values(perks: PerkState) -> dict[str, Value]:
    return {"perks": [str(perk) for perk in perks.active], "species_boost": perks.species_boost}


def trainer_from_row(row: Any) -> TrainerInfo:
    return TrainerInfo(
        ot_name=row.ot_name,
        ot_gender=row.ot_gender,
        tid=row.tid,
        sid=row.sid,
        language=row.language,
    )


def catch_from_row(row: Any, payload: bytes) -> Catch:
    return Catch(
        id=CatchID(row.catch_id),
        species=row.species,
        form=row.form,
        shiny=bool(row.is_shiny),
        ball=row.ball,
        nickname=row.nickname,
        payload=payload,
        egg=bool(row.is_egg),
        traded=bool(row.was_traded),
        favorite=bool(row.is_favorite),
        legendary=bool(row.is_legendary),
        event=bool(row.is_event),
    )


def daycare_from_row(row: Any) -> Daycare:
    def slot(index: int) -> DaycareSlot | None:
        catch_id = getattr(row, f"id{index}")
        if catch_id is None:
            return None
        return DaycareSlot(
            catch_id=CatchID(catch_id),
            species=getattr(row, f"species{index}"),
            form=getattr(row, f"form{index}"),
            ball=Ball(getattr(row, f"ball{index}")),
            shiny=bool(getattr(row, f"shiny{index}")),
        )

    return Daycare(slot1=slot(1), slot2=slot(2))


def buddy_from_row(row: Any) -> Buddy:
    catch_id = CatchID(row.catch_id) if row.catch_id is not None else None
    return Buddy(catch_id=catch_id, nickname=row.name, ability=row.ability)


def dex_from_row(row: Any) -> DexState:
    return DexState(entries=set(row.entries or []), completion_count=row.dex_count)


def perks_from_row(row: Any) -> PerkState:
    return PerkState(
        active=[Perk(name) for name in row.perks or []],
        species_boost=row.species_boost,
    )
