"""Dex and perk handlers."""

from __future__ import annotations

from tradecord.domain.progression import (
    assign_perks,
    clear_perks,
    dex_summary,
    missing_species,
    perk_summary,
    set_species_boost,
)
from tradecord.errors import StateConflictError
from tradecord.services import staging
from tradecord.services.handlers.base import Invocation


def handle_dex(inv: Invocation) -> None:
    player = inv.player
    services = inv.services
    if inv.arg(0).lower() == "missing":
        inv.message = ", ".join(missing_species(player, services.catalog))
        inv.label = f"{player.username}'s Missing Dex Entries"
        return
    inv.message = dex_summary(player, services.catalog, threshold=services.dex_threshold)
    inv.label = f"{player.username}'s Dex"


def handle_perks(inv: Invocation) -> None:
    player = inv.player
    raw = inv.text
    inv.label = f"{player.username}'s Perks"
    if not raw:
        if player.dex.completion_count == 0 and not player.perks.active:
            raise StateConflictError(
                "No perks available. Unassign a perk or complete the Dex to get more!"
            )
        inv.message = perk_summary(player)
        return
    if raw.lower() == "clear":
        inv.message = clear_perks(player)
    else:
        inv.message = assign_perks(player, raw, rules=inv.services.rules.dex)
    staging.save_perks(inv.batch, player)
    staging.save_dex(inv.batch, player)


def handle_species_boost(inv: Invocation) -> None:
    player = inv.player
    inv.message = set_species_boost(player, inv.text, inv.services.catalog)
    staging.save_perks(inv.batch, player)
