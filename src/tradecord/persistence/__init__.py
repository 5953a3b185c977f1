"""Persistence layer: mutation builder, executor, repository, payload codec."""

from tradecord.persistence.executor import SqlMutationExecutor
from tradecord.persistence.mutations import Mutation, MutationBatch, MutationKind
from tradecord.persistence.payload import decode_creature, encode_creature
from tradecord.persistence.repository import PlayerRepository, default_rows, delete_rows

__all__ = [
    "Mutation",
    "MutationBatch",
    "MutationKind",
    "PlayerRepository",
    "SqlMutationExecutor",
    "decode_creature",
    "default_rows",
    "delete_rows",
    "encode_creature",
]
