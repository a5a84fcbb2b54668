"""
sqlite3 transactions for operations.

Adds a `transaction` method wrapping the given steps in a transaction on
a standard library `sqlite3.Connection`, using the connection as a
context manager: committed when the steps complete, rolled back when
one of them fails.

    class ImportRows(SQLiteTransactions, Operation):
        def __init__(self, connection: sqlite3.Connection) -> None:
            self.connection = connection

        def call(self, rows):
            return self.transaction(lambda: [self.step(self.insert(r)) for r in rows])

Pass `connection=` to use another database for a single call.

When the connection already has an open transaction (writes made before
the block and not yet committed), the block runs as a SAVEPOINT instead:
a failure undoes only its own writes and the enclosing transaction is
left for the caller to commit.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Any, Callable, Iterator, TypeVar

import structlog

from stepwise.errors import ExtensionError
from stepwise.mixin import StepsMixin
from stepwise.result import Failure

T = TypeVar("T")
log = structlog.get_logger(logger_name=__name__)

_SAVEPOINT = "stepwise_transaction"


class _Rollback(Exception):
    """Unwinds the connection block after a captured failure."""


@contextmanager
def _savepoint(connection: sqlite3.Connection) -> Iterator[None]:
    connection.execute(f"SAVEPOINT {_SAVEPOINT}")
    try:
        yield
    except BaseException:
        connection.execute(f"ROLLBACK TO SAVEPOINT {_SAVEPOINT}")
        connection.execute(f"RELEASE SAVEPOINT {_SAVEPOINT}")
        raise
    connection.execute(f"RELEASE SAVEPOINT {_SAVEPOINT}")


class SQLiteTransactions(StepsMixin):
    """Mixin adding `transaction` backed by a sqlite3 Connection."""

    def transaction(
        self,
        body: Callable[[], T],
        connection: sqlite3.Connection | None = None,
    ) -> T:
        """Run `body` in a transaction; roll back and halt on failure."""
        connection = connection if connection is not None else self._transaction_connection()

        def run() -> T | Failure:
            outcome: Any = None
            savepoint = connection.in_transaction

            def rollback(failure: Failure) -> None:
                nonlocal outcome
                outcome = failure
                raise _Rollback

            try:
                with _savepoint(connection) if savepoint else connection:
                    outcome = self.intercepting_failure(body, rollback)
            except _Rollback:
                log.debug("transaction.rolled_back", backend="sqlite", savepoint=savepoint)
            return outcome

        return self.intercepting_failure(run)

    def _transaction_connection(self) -> sqlite3.Connection:
        connection = getattr(self, "connection", None)
        if connection is None:
            raise ExtensionError(
                "When using the SQLite extension, you need to define a `connection` "
                "attribute holding the sqlite3 Connection"
            )
        return connection
