"""Parameterized mutation builder shared by every command handler.

Handlers never write to storage. They stage ``Mutation`` objects on a
``MutationBatch``; the dispatcher hands the finished batch to the storage
executor, which turns each mutation into a SQLAlchemy Core statement. Values
travel as bound parameters, so booleans, integers, and binary payloads keep
their Python types end to end.

Example:
    >>> batch = MutationBatch()
    >>> batch.update("catches", {"is_favorite": True}, player_id=1, catch_id=4)
    >>> batch.delete("items", player_id=1, item_id=[632, 229])
    >>> [m.kind for m in batch]
    [<MutationKind.UPDATE: 'update'>, <MutationKind.DELETE: 'delete'>]
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from datetime import datetime
from typing import Any

from sqlalchemy import Delete, Insert, MetaData, Table, Update, and_, delete, insert, update
from sqlalchemy.sql.elements import ColumnElement

Value = bool | int | float | str | bytes | list | datetime | None


class MutationKind(StrEnum):
    """Statement kinds understood by the executor."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True, slots=True)
class Mutation:
    """One staged write against a logical table.

    ``filter`` maps column -> value; sequence values (other than ``bytes``)
    become ``IN`` clauses. Inserts take no filter, updates need both values and
    a filter, and deletes must be filtered.
    """

    kind: MutationKind
    target: str
    values: Mapping[str, Value] = field(default_factory=dict)
    filter: Mapping[str, Value] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.kind is MutationKind.INSERT and self.filter:
            raise ValueError("insert mutations cannot carry a filter")
        if self.kind is MutationKind.INSERT and not self.values:
            raise ValueError("insert mutations need values")
        if self.kind is MutationKind.UPDATE and not (self.values and self.filter):
            raise ValueError("update mutations need values and a filter")
        if self.kind is MutationKind.DELETE and not self.filter:
            raise ValueError("delete mutations must be filtered")
        if self.kind is MutationKind.DELETE and self.values:
            raise ValueError("delete mutations cannot carry values")

    def to_statement(self, metadata: MetaData) -> Insert | Update | Delete:
        """Compile into a parameterized SQLAlchemy statement."""

        table = metadata.tables.get(self.target)
        if table is None:
            raise ValueError(f"unknown table: {self.target}")
        _check_columns(table, self.values)
        _check_columns(table, self.filter)

        if self.kind is MutationKind.INSERT:
            return insert(table).values(dict(self.values))
        clause = _where(table, self.filter)
        if self.kind is MutationKind.UPDATE:
            return update(table).where(clause).values(dict(self.values))
        return delete(table).where(clause)


class MutationBatch:
    """Ordered accumulator of mutations for one command."""

    def __init__(self, mutations: Sequence[Mutation] = ()) -> None:
        self._mutations: list[Mutation] = list(mutations)

    def __iter__(self) -> Iterator[Mutation]:
        return iter(self._mutations)

    def __len__(self) -> int:
        return len(self._mutations)

    def __bool__(self) -> bool:
        return bool(self._mutations)

    @property
    def mutations(self) -> tuple[Mutation, ...]:
        return tuple(self._mutations)

    def append(self, mutation: Mutation) -> None:
        self._mutations.append(mutation)

    def extend(self, mutations: Sequence[Mutation] | MutationBatch) -> None:
        self._mutations.extend(mutations)

    def insert(self, target: str, **values: Value) -> None:
        self.append(Mutation(MutationKind.INSERT, target, values=values))

    def update(self, target: str, values: Mapping[str, Value], **filter: Value) -> None:
        self.append(Mutation(MutationKind.UPDATE, target, values=dict(values), filter=filter))

    def delete(self, target: str, **filter: Value) -> None:
        self.append(Mutation(MutationKind.DELETE, target, filter=filter))


def _check_columns(table: Table, columns: Mapping[str, Any]) -> None:
    unknown = sorted(set(columns) - set(table.c.keys()))
    if unknown:
        raise ValueError(f"unknown column(s) for {table.name}: {', '.join(unknown)}")


def _where(table: Table, filter: Mapping[str, Value]) -> ColumnElement[bool]:
    conditions: list[ColumnElement[bool]] = []
    for name, value in filter.items():
        column = table.c[name]
        if isinstance(value, list | tuple | set | frozenset):
            conditions.append(column.in_(list(value)))
        else:
            conditions.append(column == value)
    return and_(*conditions)
