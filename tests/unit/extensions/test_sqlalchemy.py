"""
Unit tests for SQLAlchemyTransactions — Session doubles, no database.

Real commit/rollback behaviour is covered by the integration suite.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from stepwise import ExtensionError, Failure, Operation, Success
from stepwise.extensions.sqlalchemy import SQLAlchemyTransactions


def _session() -> MagicMock:
    session = MagicMock()
    session.in_transaction.return_value = False
    for begin in (session.begin, session.begin_nested):
        begin.return_value.__exit__.return_value = False
    return session


class WithSession(SQLAlchemyTransactions, Operation):
    def __init__(self, session):
        self.session = session


class TestTransaction:
    def test_raises_a_meaningful_error_without_session(self):
        class NoSession(SQLAlchemyTransactions, Operation):
            pass

        with pytest.raises(ExtensionError, match="define a `session` attribute"):
            NoSession().transaction(lambda: None)

    def test_returns_the_body_value_and_commits(self):
        session = _session()

        class Op(WithSession):
            def call(self):
                return self.transaction(lambda: self.step(Success(1)) + 1)

        assert Op(session).call() == Success(2)
        session.begin.assert_called_once_with()
        exit_args = session.begin.return_value.__exit__.call_args.args
        assert exit_args == (None, None, None)

    def test_failure_rolls_back_and_becomes_the_result(self):
        """
        GIVEN a transaction block whose step fails
        WHEN the operation runs
        THEN the block exits with an exception (rollback) and the failure is returned.
        """
        session = _session()
        after: list[str] = []

        class Op(WithSession):
            def call(self):
                self.transaction(lambda: self.step(Failure("failure")))
                after.append("after transaction")

        assert Op(session).call() == Failure("failure")
        exc_type = session.begin.return_value.__exit__.call_args.args[0]
        assert exc_type is not None and issubclass(exc_type, Exception)
        assert after == []

    def test_uses_a_savepoint_when_nested(self):
        session = _session()

        class Op(WithSession):
            def call(self):
                return self.transaction(lambda: "ok", nested=True)

        assert Op(session).call() == Success("ok")
        session.begin_nested.assert_called_once_with()
        session.begin.assert_not_called()

    def test_merges_class_level_options(self):
        session = _session()

        class Op(WithSession):
            transaction_options = {"nested": True}

            def call(self):
                return self.transaction(lambda: "ok")

        Op(session).call()
        session.begin_nested.assert_called_once_with()

    def test_call_options_override_class_level_ones(self):
        session = _session()

        class Op(WithSession):
            transaction_options = {"nested": True}

            def call(self):
                return self.transaction(lambda: "ok", nested=False)

        Op(session).call()
        session.begin.assert_called_once_with()

    def test_accepts_another_session_at_runtime(self):
        default, other = _session(), _session()

        class Op(WithSession):
            def call(self):
                return self.transaction(lambda: "ok", session=other)

        Op(default).call()
        other.begin.assert_called_once_with()
        default.begin.assert_not_called()

    def test_exceptions_propagate(self):
        session = _session()

        def boom():
            raise RuntimeError("driver error")

        class Op(WithSession):
            def call(self):
                return self.transaction(boom)

        with pytest.raises(RuntimeError, match="driver error"):
            Op(session).call()


class TestJoinedTransaction:
    """A session that already began a transaction is committed or rolled back directly."""

    def test_commits_the_open_transaction(self):
        session = _session()
        session.in_transaction.return_value = True

        class Op(WithSession):
            def call(self):
                return self.transaction(lambda: self.step(Success("ok")))

        assert Op(session).call() == Success("ok")
        session.begin.assert_not_called()
        session.commit.assert_called_once_with()
        session.rollback.assert_not_called()

    def test_rolls_back_the_open_transaction_on_failure(self):
        session = _session()
        session.in_transaction.return_value = True

        class Op(WithSession):
            def call(self):
                return self.transaction(lambda: self.step(Failure("failure")))

        assert Op(session).call() == Failure("failure")
        session.rollback.assert_called_once_with()
        session.commit.assert_not_called()

    def test_nested_still_opens_a_savepoint(self):
        session = _session()
        session.in_transaction.return_value = True

        class Op(WithSession):
            def call(self):
                return self.transaction(lambda: "ok", nested=True)

        Op(session).call()
        session.begin_nested.assert_called_once_with()
        session.commit.assert_not_called()
