"""Creature payload codec.

Catches store their creature as opaque bytes; this is the only place that
knows the encoding (compact JSON via a pydantic ``TypeAdapter``).
"""

from __future__ import annotations

from pydantic import TypeAdapter, ValidationError

from tradecord.domain.models import Creature

_CREATURE = TypeAdapter(Creature)


def encode_creature(creature: Creature) -> bytes:
    return _CREATURE.dump_json(creature)


def decode_creature(payload: bytes) -> Creature:
    """Decode a stored payload.

    Raises:
        ValueError: If the bytes are not a valid creature document
    """
    try:
        return _CREATURE.validate_json(payload)
    except ValidationError as exc:
        raise ValueError(f"corrupt creature payload: {exc.error_count()} error(s)") from exc
