"""
psycopg (v3) transactions for operations.

Adds a `transaction` method wrapping the given steps in a PostgreSQL
transaction block. If any step fails, the block is rolled back through
`psycopg.Rollback` and the failure becomes the operation's result.

The including class must expose the connection as `self.connection`:

    class CreateUser(PsycopgTransactions, Operation):
        transaction_options = {"savepoint_name": "create_user"}

        def __init__(self, connection: psycopg.Connection) -> None:
            self.connection = connection

        def call(self, input):
            attrs = self.step(self.validate(input))
            user = self.transaction(lambda: self._persist(attrs))
            self.step(self.notify(user))
            return user

Options are forwarded to `Connection.transaction()` (`savepoint_name`,
`force_rollback`); per-call options override `transaction_options`.
"""

from __future__ import annotations

from typing import Any, Callable, ClassVar, TypeVar

import structlog

from stepwise.errors import ExtensionError, MissingDependencyError
from stepwise.mixin import StepsMixin
from stepwise.result import Failure

try:
    import psycopg
except ImportError as exc:  # pragma: no cover
    raise MissingDependencyError(package="psycopg", extension="psycopg") from exc

T = TypeVar("T")
log = structlog.get_logger(logger_name=__name__)


class PsycopgTransactions(StepsMixin):
    """Mixin adding `transaction` backed by a psycopg Connection."""

    transaction_options: ClassVar[dict[str, Any]] = {}

    def transaction(self, body: Callable[[], T], **options: Any) -> T:
        """
        Run `body` inside `connection.transaction()`.

        Commits when the body completes; rolls back and halts with the
        failure when a step inside it fails.
        """
        connection = self._transaction_connection()
        merged = {**self.transaction_options, **options}

        def run() -> T | Failure:
            outcome: Any = None
            with connection.transaction(**merged) as tx:

                def rollback(failure: Failure) -> None:
                    nonlocal outcome
                    outcome = failure
                    log.debug("transaction.rolled_back", backend="psycopg", **merged)
                    raise psycopg.Rollback(tx)

                outcome = self.intercepting_failure(body, rollback)
            return outcome

        return self.intercepting_failure(run)

    def _transaction_connection(self) -> psycopg.Connection[Any]:
        connection = getattr(self, "connection", None)
        if connection is None:
            raise ExtensionError(
                "When using the psycopg extension, you need to define a `connection` "
                "attribute holding the psycopg Connection"
            )
        return connection
