"""Handlers that browse and reshape the catch collection."""

from __future__ import annotations

from collections.abc import Callable

from tradecord.catalog.species import normalize_name
from tradecord.domain.enums import Ball
from tradecord.domain.models import Catch, PlayerAggregate, allocate_catch_id
from tradecord.domain.progression import gift_registration_allowed, register
from tradecord.errors import InputError, StateConflictError
from tradecord.interfaces.catalog import ISpeciesCatalog
from tradecord.services import staging
from tradecord.services.handlers.base import (
    Invocation,
    display_name,
    load_creature,
    parse_catch_id,
)

DITTO = "Ditto"

CatchFilter = Callable[[Catch], bool]


def _entry(catch: Catch) -> str:
    if catch.shiny:
        return f"(__{catch.id}__) {catch.species}{catch.form}"
    return f"({catch.id}) {catch.species}{catch.form}"


def _keyword_filter(query: str, catalog: ISpeciesCatalog) -> CatchFilter:
    """Map a list query (keyword, ball, species, form, or nickname) to a predicate."""

    key = query.lower()
    if key == "all":
        return lambda catch: True
    if key == "legendaries":
        return lambda catch: catch.legendary
    if key == "events":
        return lambda catch: catch.event
    if key == "eggs":
        return lambda catch: catch.egg
    if key == "shinies":
        return lambda catch: catch.shiny
    ball = Ball.parse(query)
    if ball is not None:
        return lambda catch: catch.ball == ball.value
    folded = normalize_name(query)
    if "-" in query and catalog.find(query.split("-")[0]) is not None:
        return lambda catch: normalize_name(catch.species + catch.form) == folded
    if catalog.find(query) is not None:
        return lambda catch: normalize_name(catch.species) == folded
    return lambda catch: (
        normalize_name(catch.form) == folded and catch.form != ""
    ) or catch.nickname == query


def handle_list(inv: Invocation) -> None:
    parts = [part.strip() for part in inv.text.split("=")]
    query, filters = parts[0], [part.lower() for part in parts[1:] if part]
    if not query:
        raise InputError("In order to filter a Pokémon, we need to know which Pokémon to filter.")

    matches_query = _keyword_filter(query, inv.services.catalog)
    shiny_only = "shiny" in filters
    ball_filter: Ball | None = None
    for raw in filters:
        if raw == "shiny":
            continue
        ball_filter = Ball.parse(raw)
        if ball_filter is None:
            raise InputError("No results found.")

    matches = sorted(
        (
            catch
            for catch in inv.player.catches.values()
            if not catch.traded
            and matches_query(catch)
            and (catch.shiny or not shiny_only)
            and (ball_filter is None or catch.ball == ball_filter.value)
        ),
        key=lambda catch: catch.id,
    )
    if not matches:
        raise InputError("No results found.")

    key = query.lower()
    shiny_count = sum(1 for catch in matches if catch.shiny)
    if key == "shinies":
        inv.message = ", ".join(_entry(catch) for catch in matches if catch.shiny)
        name, totals = "Shiny Pokémon", f"★{shiny_count}"
    else:
        inv.message = ", ".join(_entry(catch) for catch in matches)
        name = {"all": "Pokémon", "eggs": "Eggs"}.get(key, f"{query} List")
        totals = f"{len(matches)}, ★{shiny_count}"
    inv.label = f"{inv.player.username}'s {name} (Total: {totals})"


def handle_info(inv: Invocation) -> None:
    catch_id = parse_catch_id(inv.arg(0))
    catch = inv.player.visible_catch(catch_id)
    if catch is None:
        raise InputError("Could not find this ID.")
    inv.creature = load_creature(catch)
    inv.label = f"{inv.player.username}'s {display_name(catch)} (ID: {catch.id})"


def _releasable(player: PlayerAggregate, catch: Catch) -> bool:
    return not (catch.traded or player.is_protected(catch.id))


def _release_filter(query: str, catalog: ISpeciesCatalog) -> CatchFilter:
    key = query.lower()
    ball = Ball.parse(query) if query else None
    if ball is not None:
        return lambda c: (
            not c.shiny and c.species != DITTO and c.ball == ball.value and not c.legendary
        )
    if key == "shinies":
        return lambda c: c.shiny and c.species != DITTO and not c.event and not c.legendary
    if key == "legendaries":
        return lambda c: not c.shiny and c.species != DITTO and not c.event and c.legendary
    if key == "events":
        return lambda c: not c.shiny and c.species != DITTO and c.event and not c.legendary
    if query:
        folded = normalize_name(query)
        if "-" in query:
            def matches(c: Catch) -> bool:
                return normalize_name(c.species + c.form) == folded
        else:
            def matches(c: Catch) -> bool:
                return normalize_name(c.species) == folded and c.form == ""
        return lambda c: matches(c) and not c.shiny and c.ball != Ball.CHERISH.value
    return lambda c: not c.shiny and c.species != DITTO and not c.event and not c.legendary


def handle_mass_release(inv: Invocation) -> None:
    player = inv.player
    catalog = inv.services.catalog
    query = inv.text
    selected = _release_filter(query, catalog)
    doomed = [
        catch.id
        for catch in player.catches.values()
        if _releasable(player, catch) and selected(catch)
    ]
    if not doomed:
        raise InputError(
            "Cannot find any more non-shiny, non-Ditto, non-favorite, non-event, non-buddy, "
            "non-legendary Pokémon to release."
            if not query
            else "Cannot find anything that could be released with the specified criteria."
        )
    staging.delete_catches(inv.batch, player, doomed)

    if not query:
        inv.message = (
            "Every non-shiny Pokémon was released, excluding Ditto, favorites, events, buddy, "
            "legendaries, and those in daycare."
        )
        return

    key = query.lower()
    ball = Ball.parse(query)
    species = catalog.find(query.split("-")[0])
    is_legend = species is not None and (species.legendary or species.mythical)
    if key == "shinies":
        released = "shiny Pokémon"
    elif key == "events":
        released = "non-shiny event Pokémon"
    elif key == "legendaries":
        released = "non-shiny legendary Pokémon"
    elif ball is not None:
        released = f"Pokémon in {ball.value} Ball"
    else:
        released = f"non-shiny {query}"
    if ball is Ball.CHERISH or key == "events":
        exclude = ", legendaries,"
    elif key == "legendaries":
        exclude = ", events,"
    else:
        exclude = ", events," if is_legend else ", events, legendaries,"
    inv.message = (
        f"Every {released} was released, excluding favorites, buddy{exclude} "
        "and those in daycare."
    )


def handle_release(inv: Invocation) -> None:
    player = inv.player
    catch_id = parse_catch_id(inv.arg(0))
    catch = player.visible_catch(catch_id)
    if catch is None:
        raise InputError("Cannot find this Pokémon.")
    if player.is_protected(catch_id):
        raise StateConflictError(
            "Cannot release a Pokémon in daycare, favorites, or if it's your buddy."
        )
    staging.delete_catches(inv.batch, player, [catch_id])
    inv.message = f"You release your {display_name(catch)}."


def handle_gift(inv: Invocation) -> None:
    player = inv.player
    giftee = inv.require_giftee()
    services = inv.services
    catch_id = parse_catch_id(inv.arg(0))
    catch = player.visible_catch(catch_id)
    if catch is None:
        raise InputError("Cannot find this Pokémon.")
    if player.is_protected(catch_id):
        raise StateConflictError(
            "Please remove your Pokémon from favorites, daycare, and make sure it's not an "
            "active buddy before gifting!"
        )
    try:
        creature = load_creature(catch)
    except InputError:
        raise InputError("Cannot find this Pokémon.") from None

    info = services.catalog.get(creature.species)
    new_id = allocate_catch_id(giftee.catches)
    gifted = Catch(
        id=new_id,
        species=catch.species,
        form=catch.form,
        shiny=catch.shiny,
        ball=catch.ball,
        nickname=catch.nickname,
        payload=catch.payload,
        egg=catch.egg,
        legendary=info is not None and (info.legendary or info.mythical),
        event=catch.event,
    )
    giftee.catches[new_id] = gifted
    staging.insert_catch(inv.batch, giftee, gifted)
    staging.delete_catches(inv.batch, player, [catch_id])

    inv.message = (
        f"You gifted your {display_name(catch)} to {giftee.username}. New ID is {new_id}."
    )
    threshold = services.dex_threshold
    if gift_registration_allowed(giftee, threshold=threshold, rules=services.rules.dex):
        registration = register(
            giftee,
            creature.species,
            threshold=threshold,
            rules=services.rules.dex,
            giftee_name=giftee.username,
        )
        staging.stage_registration(inv.batch, giftee, registration)
        inv.message += registration.message


def handle_favorites_info(inv: Invocation) -> None:
    favorites = sorted(
        (catch for catch in inv.player.catches.values() if catch.favorite),
        key=lambda catch: catch.id,
    )
    if not favorites:
        raise InputError("You don't have anything in favorites yet!")
    inv.message = ", ".join(_entry(catch) for catch in favorites)
    inv.label = f"{inv.player.username}'s Favorites"


def handle_favorites(inv: Invocation) -> None:
    player = inv.player
    inv.label = f"{player.username}'s Favorite"
    raw = inv.arg(0)
    if raw.lower() == "clear":
        for catch in player.catches.values():
            if catch.favorite:
                catch.favorite = False
                staging.update_catch(inv.batch, player, catch, "is_favorite")
        inv.message = f"{player.username}, all of your favorites were cleared!"
        inv.label += " Clear"
        return

    catch_id = parse_catch_id(raw)
    catch = player.visible_catch(catch_id)
    if catch is None:
        raise InputError("Cannot find this Pokémon.")
    catch.favorite = not catch.favorite
    staging.update_catch(inv.batch, player, catch, "is_favorite")
    if catch.favorite:
        inv.message = f"{player.username}, added your {display_name(catch)} to favorites!"
        inv.label += " Addition"
    else:
        inv.message = f"{player.username}, removed your {display_name(catch)} from favorites!"
        inv.label += " Removal"
