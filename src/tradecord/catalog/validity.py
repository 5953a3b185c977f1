"""Default validity checker and word filter."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from tradecord.domain.enums import Ball, ItemKind
from tradecord.domain.models import Creature
from tradecord.interfaces.catalog import ISpeciesCatalog

logger = logging.getLogger(__name__)

MAX_NICKNAME_LENGTH = 12
DEFAULT_BANNED_WORDS: tuple[str, ...] = ("damn", "hell", "crap")


class RulesValidityChecker:
    """``IValidityChecker`` enforcing table-driven legality rules."""

    def __init__(self, catalog: ISpeciesCatalog) -> None:
        self._catalog = catalog

    def is_valid(self, creature: Creature) -> bool:
        problems = self.problems(creature)
        if problems:
            logger.debug("creature %s rejected: %s", creature.species, "; ".join(problems))
        return not problems

    def problems(self, creature: Creature) -> list[str]:
        """Every rule ``creature`` breaks; empty when it is legal."""

        info = self._catalog.get(creature.species)
        if info is None:
            return [f"unknown species {creature.species}"]
        problems: list[str] = []
        if not 1 <= creature.level <= 100:
            problems.append(f"level {creature.level} out of range")
        if creature.exp < 0:
            problems.append("negative experience")
        if not 0 <= creature.friendship <= 255:
            problems.append(f"friendship {creature.friendship} out of range")
        if not 0 <= creature.form < len(info.forms):
            problems.append(f"form {creature.form} not available for {info.name}")
        if info.abilities and creature.ability not in info.abilities:
            problems.append(f"ability {creature.ability!r} not available for {info.name}")
        if len(creature.nickname) > MAX_NICKNAME_LENGTH:
            problems.append("nickname too long")
        if creature.is_egg and (creature.level != 1 or creature.ball is Ball.CHERISH):
            problems.append("eggs hatch at level 1 in an ordinary ball")
        if creature.ball is Ball.CHERISH and not creature.fateful:
            problems.append("cherish ball requires a fateful encounter")
        if info.cherish_only and not creature.fateful:
            problems.append(f"{info.name} is only distributed through events")
        if creature.gmax and not info.gmax:
            problems.append(f"{info.name} cannot gigantamax")
        if creature.held_item and creature.held_item not in ItemKind._value2member_map_:
            problems.append(f"unknown held item {creature.held_item}")
        return problems


class RegexWordFilter:
    """``IWordFilter`` matching banned words case-insensitively on word boundaries."""

    def __init__(self, words: Iterable[str] = DEFAULT_BANNED_WORDS) -> None:
        cleaned = sorted({word.strip().lower() for word in words if word.strip()})
        self._pattern = (
            re.compile(r"\b(?:" + "|".join(re.escape(word) for word in cleaned) + r")\b", re.I)
            if cleaned
            else None
        )

    def is_filtered(self, text: str) -> bool:
        return self._pattern is not None and self._pattern.search(text) is not None
