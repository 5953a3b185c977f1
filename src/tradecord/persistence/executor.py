"""SQLAlchemy-backed storage executor."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import text
from sqlalchemy.engine import Engine

from tradecord.models import Base
from tradecord.persistence.mutations import Mutation

logger = logging.getLogger(__name__)


class SqlMutationExecutor:
    """Applies a mutation batch inside a single transaction.

    Any failure rolls the whole batch back and propagates to the caller.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def apply(self, mutations: Sequence[Mutation]) -> None:
        if not mutations:
            return
        statements = [mutation.to_statement(Base.metadata) for mutation in mutations]
        with self._engine.begin() as conn:
            for statement in statements:
                conn.execute(statement)
        logger.debug("applied %d mutation(s)", len(statements))

    def vacuum(self) -> None:
        with self._engine.connect().execution_options(isolation_level="AUTOCOMMIT") as conn:
            conn.execute(text("VACUUM"))
        logger.info("database vacuum finished")
