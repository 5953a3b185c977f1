"""Evolution resolver driven by the species table."""

from __future__ import annotations

from dataclasses import replace

from tradecord.catalog.species import EvolutionRule, SpeciesCatalog
from tradecord.domain.enums import TimeOfDay
from tradecord.domain.models import Creature
from tradecord.interfaces.evolution import EvolutionOutcome

FRIENDSHIP_THRESHOLD = 220


class CatalogEvolutionResolver:
    """``IEvolutionResolver`` evaluating level, item, and friendship rules.

    Rules are tried in table order and the first one that applies wins. Item
    rules consume the held item. A rule with ``form_from_branch`` takes the
    target form from the caller's branch argument (``Ruby-Cream`` and so on).
    """

    def __init__(self, catalog: SpeciesCatalog) -> None:
        self._catalog = catalog
        self._parents: dict[int, int] = {}
        for species in catalog.species_ids():
            for rule in catalog.evolutions(species):
                self._parents.setdefault(rule.into, species)
                if rule.secondary is not None:
                    self._parents.setdefault(rule.secondary, species)

    def base_ancestor(self, species: int, form: int) -> tuple[int, int] | None:
        info = self._catalog.get(species)
        if info is None or not info.breedable:
            return None
        root = species
        seen = {root}
        while root in self._parents:
            root = self._parents[root]
            if root in seen:
                break
            seen.add(root)
        root_info = self._catalog.get(root)
        if root_info is None or not root_info.breedable:
            return None
        return (root, form if root == species else 0)

    def evolve(
        self,
        creature: Creature,
        *,
        time_of_day: TimeOfDay,
        branch: str | None = None,
    ) -> EvolutionOutcome | None:
        for rule in self._catalog.evolutions(creature.species):
            target_form = self._target_form(rule, branch)
            if target_form is None or not self._applies(rule, creature, time_of_day):
                continue
            return self._apply(rule, creature, target_form)
        return None

    def _target_form(self, rule: EvolutionRule, branch: str | None) -> int | None:
        if not rule.form_from_branch or branch is None:
            return rule.form
        return self._catalog.find_form(rule.into, branch)

    @staticmethod
    def _applies(rule: EvolutionRule, creature: Creature, time_of_day: TimeOfDay) -> bool:
        if rule.time is not None and rule.time != time_of_day:
            return False
        if rule.method == "level":
            return rule.level is not None and creature.level >= rule.level
        if rule.method == "item":
            return creature.held_item in rule.items
        return creature.friendship >= FRIENDSHIP_THRESHOLD

    def _apply(self, rule: EvolutionRule, creature: Creature, form: int) -> EvolutionOutcome:
        evolved = replace(
            creature,
            species=rule.into,
            form=form,
            ability=self._carry_ability(creature, rule.into),
        )
        if rule.method == "item":
            evolved.held_item = 0
        target = self._catalog.get(rule.into)
        if not creature.is_nicknamed and target is not None:
            evolved.nickname = target.name

        secondary = None
        if rule.secondary is not None:
            extra = self._catalog.get(rule.secondary)
            secondary = replace(
                creature,
                species=rule.secondary,
                form=0,
                ability=extra.abilities[0] if extra and extra.abilities else "",
                nickname=extra.name if extra else "",
                is_nicknamed=False,
                held_item=0,
            )
        return EvolutionOutcome(creature=evolved, secondary=secondary)

    def _carry_ability(self, creature: Creature, into: int) -> str:
        before = self._catalog.get(creature.species)
        after = self._catalog.get(into)
        if after is None or not after.abilities:
            return creature.ability
        if creature.ability in after.abilities:
            return creature.ability
        index = before.abilities.index(creature.ability) if (
            before is not None and creature.ability in before.abilities
        ) else 0
        return after.abilities[min(index, len(after.abilities) - 1)]
