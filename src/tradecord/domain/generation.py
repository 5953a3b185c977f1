"""Catch-time generation: egg, species, rarity, catch success, and item rolls.

Every call draws a fresh ``RollSet`` and then adds the player's modifiers to
it; nothing carries over between calls. The resolution order is fixed:

1. egg roll (also gated by daycare compatibility)
2. species selection (event override, then species boost)
3. cherish/rarity escalation, then the catch-success roll
4. item drop, which still happens after a failed catch
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

from tradecord.config import Settings
from tradecord.domain.breeding import can_breed, synthesize_egg
from tradecord.domain.enums import WILD_BALLS, ItemKind, Perk, ShinyTier
from tradecord.domain.models import Creature, PlayerAggregate, TrainerInfo, with_trainer
from tradecord.domain.rules_config import RulesConfig
from tradecord.errors import GenerationError
from tradecord.interfaces.catalog import IExperienceTable, ISpeciesCatalog
from tradecord.interfaces.evolution import IEvolutionResolver
from tradecord.interfaces.gifts import IMysteryGiftProvider
from tradecord.interfaces.runtime import IRoller
from tradecord.interfaces.validity import IValidityChecker

logger = logging.getLogger(__name__)

ROLL_CEILING = 100


@dataclass(slots=True)
class RollSet:
    """Raw draws for one catch attempt, before and after modifiers."""

    catch: float
    egg: float
    item: float
    cherish: float
    gmax: float
    species_boost: float
    shiny: float
    egg_shiny: float
    charm: float
    species: int

    @classmethod
    def draw(cls, roller: IRoller, pool: list[int], *, shiny_ceiling: int = 150) -> RollSet:
        if not pool:
            raise ValueError("species pool is empty")
        return cls(
            catch=roller.randint(0, ROLL_CEILING),
            egg=roller.randint(0, ROLL_CEILING),
            item=roller.randint(0, ROLL_CEILING),
            cherish=roller.randint(0, ROLL_CEILING),
            gmax=roller.randint(0, ROLL_CEILING),
            species_boost=roller.randint(0, ROLL_CEILING),
            shiny=roller.randint(0, shiny_ceiling),
            egg_shiny=roller.randint(0, shiny_ceiling),
            charm=roller.randint(0, ROLL_CEILING),
            species=roller.choice(pool),
        )

    def boosted(self, modifiers: PlayerModifiers, rules: RulesConfig) -> RollSet:
        """Return a copy with perk, charm, and buddy-ability bonuses added."""

        bonus = rules.generation.buddy_ability_bonus
        egg_bonus = bonus if modifiers.buddy_ability in rules.generation.egg_abilities else 0
        item_bonus = bonus if modifiers.buddy_ability in rules.generation.item_abilities else 0
        charm = modifiers.shiny_charms / 2
        return replace(
            self,
            catch=self.catch + modifiers.perk(Perk.CATCH_BOOST),
            item=self.item + modifiers.perk(Perk.ITEM_BOOST) + item_bonus,
            species_boost=self.species_boost + modifiers.perk(Perk.SPECIES_BOOST),
            cherish=self.cherish + modifiers.perk(Perk.CHERISH_BOOST) * 2,
            gmax=self.gmax + modifiers.perk(Perk.GMAX_BOOST) * 2,
            shiny=self.shiny + charm,
            egg_shiny=self.egg_shiny + charm,
            egg=self.egg + egg_bonus,
        )


@dataclass(slots=True)
class PlayerModifiers:
    """Everything about a player that shifts generation rolls."""

    perks: dict[Perk, int] = field(default_factory=dict)
    shiny_charms: int = 0
    buddy_ability: str = ""
    species_boost: int = 0

    def perk(self, perk: Perk) -> int:
        return self.perks.get(perk, 0)

    @classmethod
    def from_player(cls, player: PlayerAggregate) -> PlayerModifiers:
        return cls(
            perks={perk: player.perks.count(perk) for perk in Perk},
            shiny_charms=player.items.count(ItemKind.SHINY_CHARM),
            buddy_ability=player.buddy.ability if player.buddy.is_set else "",
            species_boost=player.perks.species_boost,
        )


@dataclass(slots=True)
class EventState:
    """Configured event: active flag, featured species, and forced form."""

    active: bool = False
    species: tuple[int, ...] = ()
    form: int = -1

    @classmethod
    def from_settings(cls, settings: Settings, now: datetime) -> EventState:
        ended = False
        end = settings.event_end
        if end is not None:
            if end.tzinfo is None:
                end = end.replace(tzinfo=UTC)
            ended = now > end
        return cls(
            active=settings.enable_event and not ended,
            species=tuple(settings.event_species),
            form=settings.event_form,
        )


@dataclass(slots=True)
class GenerationOutcome:
    """Products of one catch attempt."""

    main: Creature | None = None
    egg: Creature | None = None
    item: ItemKind | None = None
    failed_catch: bool = False
    cherish: bool = False
    rolls: RollSet | None = None


@dataclass(slots=True)
class GenerationServices:
    """Collaborators the generation engine consults."""

    catalog: ISpeciesCatalog
    resolver: IEvolutionResolver
    validity: IValidityChecker
    gifts: IMysteryGiftProvider
    exp_table: IExperienceTable
    roller: IRoller


def shiny_tier(roll: float, rules: RulesConfig) -> ShinyTier:
    ceiling = rules.generation.shiny_roll_ceiling
    if roll >= ceiling - rules.generation.square_shiny_rate:
        return ShinyTier.SQUARE
    if roll >= ceiling - rules.generation.star_shiny_rate:
        return ShinyTier.STAR
    return ShinyTier.NONE


def pick_item(rolls: RollSet, player: PlayerAggregate, services: GenerationServices,
              rules: RulesConfig) -> ItemKind:
    """Charm-weighted item choice for a successful item roll."""

    if rolls.charm > rules.generation.charm_bias_roll:
        return services.roller.choice(list(ItemKind))
    if player.items.count(ItemKind.SHINY_CHARM) < rules.generation.charm_bootstrap_limit:
        return ItemKind.SHINY_CHARM
    return ItemKind.LOVE_SWEET


def wild_creature(
    species: int,
    *,
    form: int,
    rolls: RollSet,
    trainer: TrainerInfo,
    services: GenerationServices,
    rules: RulesConfig,
) -> Creature:
    info = services.catalog.get(species)
    if info is None:
        raise GenerationError(f"Unknown species {species}.", diagnostics={"species": species})
    level = services.roller.randint(
        rules.generation.wild_min_level, rules.generation.wild_max_level
    )
    creature = Creature(
        species=species,
        form=form if 0 <= form < len(info.forms) else 0,
        level=level,
        exp=services.exp_table.exp_for_level(info.growth, level),
        friendship=info.base_friendship,
        shiny=shiny_tier(rolls.shiny, rules),
        ball=services.roller.choice(WILD_BALLS),
        nickname=info.name,
        ability=services.roller.choice(info.abilities) if info.abilities else "",
    )
    return with_trainer(creature, trainer)


def _validated(creature: Creature, services: GenerationServices, context: str,
               **diagnostics: object) -> Creature:
    if not services.validity.is_valid(creature):
        raise GenerationError(
            f"Oops, something went wrong when generating {context}!",
            diagnostics={"species": creature.species, "form": creature.form, **diagnostics},
        )
    return creature


def generate(
    player: PlayerAggregate,
    *,
    services: GenerationServices,
    rules: RulesConfig,
    event: EventState | None = None,
) -> GenerationOutcome:
    """Resolve one catch attempt for ``player``.

    The player aggregate is only read. Callers apply the outcome (new catches,
    item counts, dex registration) themselves.

    Args:
        player: Acting player
        services: Catalog, resolver, validity checker, gift provider, rolls
        rules: Rates and constants
        event: Active event, if any

    Returns:
        GenerationOutcome: Caught creature, egg, and item drop

    Raises:
        GenerationError: If a produced creature fails validation
    """
    event = event or EventState()
    modifiers = PlayerModifiers.from_player(player)
    rolls = RollSet.draw(
        services.roller, services.catalog.pool(),
        shiny_ceiling=rules.generation.shiny_roll_ceiling,
    ).boosted(modifiers, rules)
    outcome = GenerationOutcome(rolls=rolls)
    gen = rules.generation

    eggs = {catch_id for catch_id, catch in player.catches.items() if catch.egg}
    daycare = player.daycare
    if rolls.egg >= ROLL_CEILING - gen.egg_rate and can_breed(
        daycare.slot1, daycare.slot2,
        resolver=services.resolver, catalog=services.catalog, eggs=eggs,
    ):
        egg = synthesize_egg(
            daycare,
            trainer=player.trainer,
            resolver=services.resolver,
            catalog=services.catalog,
            roller=services.roller,
            shiny_roll=rolls.egg_shiny,
            rates=gen,
            rules=rules.breeding,
        )
        slots = {
            f"slot{index}": f"{slot.catch_id}:{slot.species}{slot.form}"
            for index, slot in enumerate(daycare.slots, start=1)
            if slot is not None
        }
        outcome.egg = _validated(egg, services, "an egg", **slots)

    species = rolls.species
    event_gift: Creature | None = None
    form = -1
    boost_proc = modifiers.species_boost != 0 and rolls.species_boost >= gen.species_boost_threshold
    if event.active and event.species:
        species = services.roller.choice(list(event.species))
        event_gift = services.gifts.gift_for(species)
        form = event.form
    elif boost_proc:
        species = modifiers.species_boost

    if rolls.catch >= ROLL_CEILING - gen.catch_rate:
        info = services.catalog.get(species)
        gmax_proc = species == gen.gmax_species and rolls.gmax >= ROLL_CEILING - gen.gmax_rate
        gift = event_gift or services.gifts.gift_for(species, gmax=gmax_proc)
        escalate = (
            (info is not None and info.cherish_only)
            or rolls.cherish >= ROLL_CEILING - gen.cherish_rate
            or event_gift is not None
            or gmax_proc
        )
        if escalate and gift is not None:
            outcome.main = with_trainer(replace(gift), player.trainer)
            outcome.cherish = True
        else:
            outcome.main = wild_creature(
                species, form=form, rolls=rolls, trainer=player.trainer,
                services=services, rules=rules,
            )
        _validated(outcome.main, services, "a catch", cherish=outcome.cherish)
    else:
        outcome.failed_catch = True

    if rolls.item >= ROLL_CEILING - gen.item_rate:
        outcome.item = pick_item(rolls, player, services, rules)

    logger.debug(
        "player %s rolled catch=%s egg=%s item=%s species=%s",
        player.player_id, rolls.catch, rolls.egg, rolls.item, species,
    )
    return outcome
