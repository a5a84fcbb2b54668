"""
SQLAlchemy transactions for operations.

Adds a `transaction` method wrapping the given steps in a Session
transaction. If any step fails, the transaction is rolled back and, as
usual, the rest of the flow is skipped: the failure becomes the
operation's result.

    class CreateUser(SQLAlchemyTransactions, Operation):
        def __init__(self, session: Session) -> None:
            self.session = session

        def call(self, input):
            attrs = self.step(self.validate(input))
            user = self.transaction(lambda: self._persist(attrs))
            self.step(self.notify(user))
            return user

        def _persist(self, attrs):
            user = self.step(self.create_user(attrs))
            self.step(self.assign_initial_role(user))
            return user

`self.session` is used by default; pass `session=` to use another one
for a single call. A session that has already begun a transaction (any
earlier query autobegins one) is joined: the block then ends with
`session.commit()` or `session.rollback()`, as for a fresh transaction.
`nested=True` opens a SAVEPOINT via `begin_nested()` instead, leaving the
enclosing transaction to the caller. Class-level defaults go in
`transaction_options` and are merged with per-call options.

Exceptions raised inside the block roll the transaction back and
propagate: only Failures are turned into results.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, ClassVar, ContextManager, Iterator, TypeVar

import structlog

from stepwise.errors import ExtensionError, MissingDependencyError
from stepwise.mixin import StepsMixin
from stepwise.result import Failure

try:
    from sqlalchemy.orm import Session
except ImportError as exc:  # pragma: no cover
    raise MissingDependencyError(package="sqlalchemy", extension="SQLAlchemy") from exc

T = TypeVar("T")
log = structlog.get_logger(logger_name=__name__)


class _Rollback(Exception):
    """Unwinds the session transaction block after a captured failure."""


@contextmanager
def _joined(session: Session) -> Iterator[None]:
    try:
        yield
    except BaseException:
        session.rollback()
        raise
    session.commit()


def _transaction_block(session: Session, nested: bool) -> ContextManager[Any]:
    if nested:
        return session.begin_nested()
    if session.in_transaction():
        return _joined(session)
    return session.begin()


class SQLAlchemyTransactions(StepsMixin):
    """Mixin adding `transaction` backed by a SQLAlchemy Session."""

    transaction_options: ClassVar[dict[str, Any]] = {}

    def transaction(
        self,
        body: Callable[[], T],
        session: Session | None = None,
        **options: Any,
    ) -> T:
        """
        Run `body` inside a session transaction.

        Commits when the body completes; rolls back and halts with the
        failure when a step inside it fails.
        """
        session = session if session is not None else self._transaction_session()
        nested = {**self.transaction_options, **options}.get("nested", False)

        def run() -> T | Failure:
            outcome: Any = None

            def rollback(failure: Failure) -> None:
                nonlocal outcome
                outcome = failure
                raise _Rollback

            try:
                with _transaction_block(session, nested):
                    outcome = self.intercepting_failure(body, rollback)
            except _Rollback:
                log.debug("transaction.rolled_back", backend="sqlalchemy", nested=nested)
            return outcome

        return self.intercepting_failure(run)

    def _transaction_session(self) -> Session:
        session = getattr(self, "session", None)
        if session is None:
            raise ExtensionError(
                "When using the SQLAlchemy extension, you need to define a `session` "
                "attribute holding the SQLAlchemy Session"
            )
        return session
