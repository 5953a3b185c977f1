"""Buddy experience, friendship, and egg hatching."""

from __future__ import annotations

import math
from dataclasses import dataclass

from tradecord.domain.enums import ItemKind
from tradecord.domain.models import Creature
from tradecord.domain.rules_config import LevelingRules
from tradecord.interfaces.catalog import IExperienceTable, SpeciesInfo


@dataclass(slots=True)
class LevelResult:
    exp_gained: int
    old_level: int
    new_level: int

    @property
    def leveled_up(self) -> bool:
        return self.new_level > self.old_level


def round_half_away(value: float) -> int:
    return int(math.floor(abs(value) + 0.5)) * (1 if value >= 0 else -1)


def experience_gain(
    encounter: Creature,
    encounter_info: SpeciesInfo,
    buddy_level: int,
    rules: LevelingRules,
) -> int:
    """Experience the buddy earns from ``encounter``.

    Gains below ``rules.min_exp_gain`` are replaced by ``rules.floor_exp_award``.
    """
    level = encounter.level
    ratio = (2.0 * level + 10.0) / (level + buddy_level + 10.0)
    base = encounter_info.base_exp * level / 5.0 * ratio**2.5
    if encounter.is_shiny:
        base *= rules.shiny_exp_multiplier
    gain = round_half_away(base)
    return rules.floor_exp_award if gain < rules.min_exp_gain else gain


def apply_experience(
    buddy: Creature,
    buddy_info: SpeciesInfo,
    encounter: Creature,
    encounter_info: SpeciesInfo,
    *,
    exp_table: IExperienceTable,
    rules: LevelingRules,
) -> LevelResult:
    """Award experience for one catch and level the buddy in place.

    Friendship bonuses (soothe bell, shiny encounter) are added first, each
    only while the total stays within the ceiling. Every gained level adds
    ``rules.friendship_per_level``, clamped to the ceiling.
    """
    bell = (
        rules.soothe_bell_bonus
        if buddy.held_item == ItemKind.SOOTHE_BELL
        and buddy.friendship + rules.soothe_bell_bonus <= rules.max_friendship
        else 0
    )
    shiny = (
        rules.shiny_encounter_bonus
        if encounter.is_shiny
        and buddy.friendship + bell + rules.shiny_encounter_bonus <= rules.max_friendship
        else 0
    )
    buddy.friendship += bell + shiny

    old_level = buddy.level
    gained = experience_gain(encounter, encounter_info, buddy.level, rules)
    buddy.exp += gained
    while (
        buddy.level < rules.max_level
        and buddy.exp >= exp_table.exp_for_level(buddy_info.growth, buddy.level + 1)
    ):
        buddy.level += 1
    if buddy.level >= rules.max_level:
        buddy.level = rules.max_level
        buddy.exp = exp_table.exp_for_level(buddy_info.growth, rules.max_level)

    levels = buddy.level - old_level
    buddy.friendship = min(
        rules.max_friendship, buddy.friendship + levels * rules.friendship_per_level
    )
    return LevelResult(exp_gained=gained, old_level=old_level, new_level=buddy.level)


def advance_egg(
    egg: Creature, info: SpeciesInfo, rules: LevelingRules, *, hatch_step: int
) -> bool:
    """Count an egg buddy down by one catch; return True when it hatches.

    Hatching clears the egg flag, resets friendship to the species base, and
    renames the creature after its species.
    """
    if (egg.friendship - hatch_step) / info.hatch_cycles > 0:
        egg.friendship -= hatch_step
        return False
    egg.is_egg = False
    egg.friendship = min(info.base_friendship, rules.max_friendship)
    egg.nickname = info.name
    egg.is_nicknamed = False
    return True
