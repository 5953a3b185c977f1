"""Validity checker and word filter protocols."""

from __future__ import annotations

from typing import Protocol

from tradecord.domain.models import Creature


class IValidityChecker(Protocol):
    """Confirms a creature's data is game-legal."""

    def is_valid(self, creature: Creature) -> bool:
        ...


class IWordFilter(Protocol):
    """Rejects offensive user-supplied text."""

    def is_filtered(self, text: str) -> bool:
        ...
