"""
Test assertions for Result values.

Expressive assert helpers that produce clear failure messages.

Usage in tests:
    from stepwise import ResultAssertions

    def test_create_user():
        result = CreateUser().call(valid_input)
        user = ResultAssertions.assert_success(result)
        assert user.name == "Alice"

    def test_invalid_email():
        result = CreateUser().call(bad_input)
        ResultAssertions.assert_failure(result, "invalid_email")
"""

from __future__ import annotations

from typing import Any, TypeVar

from stepwise.result import Result

T = TypeVar("T")

_UNSET: Any = object()


class ResultAssertions:
    """Expressive test assertions for Result values."""

    @staticmethod
    def assert_success(result: Result[T, Any], message: str = "") -> T:
        """
        Assert the Result is a Success and return the value.

            value = ResultAssertions.assert_success(result)
        """
        context = f" — {message}" if message else ""
        assert isinstance(result, Result), f"Expected a Result but got {result!r}{context}"
        assert result.is_success(), f"Expected Success but got {result!r}{context}"
        return result.value()

    @staticmethod
    def assert_failure(
        result: Result[Any, Any],
        expected_error: Any = _UNSET,
        message: str = "",
    ) -> Any:
        """
        Assert the Result is a Failure, optionally checking its payload.
        Returns the payload.

            ResultAssertions.assert_failure(result, "not_possible")
        """
        context = f" — {message}" if message else ""
        assert isinstance(result, Result), f"Expected a Result but got {result!r}{context}"
        assert result.is_failure(), f"Expected Failure but got {result!r}{context}"
        error = result.error()
        if expected_error is not _UNSET:
            assert error == expected_error, (
                f"Expected failure {expected_error!r} but got {error!r}{context}"
            )
        return error

    @staticmethod
    def assert_success_value(result: Result[Any, Any], expected_value: Any) -> None:
        """Assert the Result is a Success with the specific value."""
        value = ResultAssertions.assert_success(result)
        assert value == expected_value, (
            f"Expected success value {expected_value!r} but got {value!r}"
        )

    @staticmethod
    def assert_failure_kind(result: Result[Any, Any], expected_kind: str) -> Any:
        """
        Assert a Failure whose payload is a (kind, details) pair of the given kind.
        Returns the details.

            errors = ResultAssertions.assert_failure_kind(result, "invalid")
        """
        error = ResultAssertions.assert_failure(result)
        assert isinstance(error, tuple) and len(error) == 2, (
            f"Expected a (kind, details) failure but got {error!r}"
        )
        kind, details = error
        assert kind == expected_kind, f"Expected failure kind {expected_kind!r} but got {kind!r}"
        return details
