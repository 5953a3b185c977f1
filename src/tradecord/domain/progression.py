"""Dex registration and the perk economy.

Completion points are earned by registering every species in the catalog;
each point can be spent on one perk instance, up to ``perk_cap`` per kind.
Functions here mutate the aggregate in place and return user messages; the
caller stages the matching storage mutations.
"""

from __future__ import annotations

from dataclasses import dataclass

from tradecord.domain.enums import ItemKind, Perk
from tradecord.domain.models import PlayerAggregate
from tradecord.domain.rules_config import DexRules
from tradecord.errors import InputError, StateConflictError
from tradecord.interfaces.catalog import ISpeciesCatalog


@dataclass(slots=True)
class Registration:
    """What a dex registration changed."""

    message: str = ""
    added: bool = False
    completed: bool = False
    charm_granted: bool = False

    @property
    def changed(self) -> bool:
        return self.added or self.completed


def completion_threshold(catalog: ISpeciesCatalog, rules: DexRules) -> int:
    return rules.completion_threshold or catalog.dex_size()


def register(
    player: PlayerAggregate,
    species: int,
    *,
    threshold: int,
    rules: DexRules,
    giftee_name: str = "",
) -> Registration:
    """Register ``species`` in the player's dex.

    Crossing ``threshold`` clears the entry set and raises the completion
    counter by one. The first completion grants a shiny charm unless one is
    already held. Nothing happens once the counter reaches ``rules.max_level``.
    """
    dex = player.dex
    result = Registration()
    if dex.completion_count >= rules.max_level:
        return result

    if species not in dex.entries:
        dex.entries.add(species)
        result.added = True
        result.message = (
            f"\n{giftee_name} registered a new entry to the Pokédex!"
            if giftee_name
            else "\nRegistered to the Pokédex."
        )

    if len(dex.entries) >= threshold:
        dex.entries.clear()
        dex.completion_count += 1
        result.completed = True
        if dex.completion_count == 1 and player.items.count(ItemKind.SHINY_CHARM) == 0:
            player.items.add(ItemKind.SHINY_CHARM)
            result.charm_granted = True
        if dex.completion_count < rules.max_level:
            result.message += " Level increased!"
            if result.charm_granted:
                result.message += " Received a ★Shiny Charm★"
        else:
            result.message += " Highest level achieved!"
    return result


def gift_registration_allowed(
    player: PlayerAggregate, *, threshold: int, rules: DexRules
) -> bool:
    """Whether a gifted catch counts toward the giftee's dex."""

    dex = player.dex
    if dex.completion_count == 0:
        return True
    missing = threshold - len(dex.entries)
    return dex.completion_count < rules.max_level and missing <= rules.gift_register_missing_limit


def perk_summary(player: PlayerAggregate) -> str:
    return "\n".join(f"**{perk}:** {player.perks.count(perk)}" for perk in Perk)


def assign_perks(player: PlayerAggregate, raw: str, *, rules: DexRules) -> str:
    """Spend completion points on a perk, e.g. ``"CatchBoost 3"``.

    Requests are truncated to the remaining headroom below the per-kind cap.

    Raises:
        InputError: Missing parameters, bad counts, or an unknown perk name
        StateConflictError: No points available or the perk is maxed out
    """
    if player.dex.completion_count == 0:
        raise StateConflictError(
            "No perks available. Unassign a perk or complete the Dex to get more!"
        )
    parts = [part for part in raw.replace(",", " ").split() if part]
    if len(parts) < 2:
        raise InputError("Not enough parameters provided.")
    try:
        count = int(parts[1])
    except ValueError:
        raise InputError("Incorrect input, could not parse perk point amount.") from None
    if count > player.dex.completion_count:
        raise InputError("Not enough points available to assign all requested perks.")
    if count == 0:
        raise InputError("Please enter a non-zero amount")
    if count < 0:
        raise InputError("Please enter a positive amount.")
    perk = Perk.parse(parts[0])
    if perk is None:
        raise InputError("Perk name was not recognized.")

    count = min(count, rules.perk_cap - player.perks.count(perk))
    if count <= 0:
        raise StateConflictError("Perk is already maxed out.")
    player.perks.active.extend([perk] * count)
    player.dex.completion_count -= count
    if count > 1:
        return f"Added {count} perk points to {perk}!"
    return f"{perk} perk added!"


def clear_perks(player: PlayerAggregate) -> str:
    """Refund every active perk instance and reset the species-boost target."""

    player.dex.completion_count += len(player.perks.active)
    player.perks.active.clear()
    player.perks.species_boost = 0
    return "All active perks cleared!"


def set_species_boost(player: PlayerAggregate, name: str, catalog: ISpeciesCatalog) -> str:
    """Point the species-boost perk at a species.

    Raises:
        StateConflictError: The species-boost perk is not active
        InputError: Unknown species, or one only obtainable from events
    """
    if player.perks.count(Perk.SPECIES_BOOST) == 0:
        raise StateConflictError("SpeciesBoost perk isn't active.")
    info = catalog.find(name)
    if info is None or info.cherish_only:
        raise InputError("Entered species was not recognized.")
    player.perks.species_boost = info.id
    return f"Catch chance for {info.name} was slightly boosted!"


def dex_summary(player: PlayerAggregate, catalog: ISpeciesCatalog, *, threshold: int) -> str:
    boost = catalog.get(player.perks.species_boost) if player.perks.species_boost else None
    level = player.dex.completion_count + len(player.perks.active)
    return (
        f"\n**Pokédex:** {len(player.dex.entries)}/{threshold}"
        f"\n**Level:** {level}"
        f"\n**Pokémon Boost:** {boost.name if boost is not None else 'N/A'}"
    )


def missing_species(player: PlayerAggregate, catalog: ISpeciesCatalog) -> list[str]:
    """Names of catalog species not yet registered this season, sorted."""

    names = []
    for species in catalog.species_ids():
        info = catalog.get(species)
        if species not in player.dex.entries and info is not None:
            names.append(info.name)
    return sorted(names)
