"""
Result — the success/failure value every step returns.

A Result is either Success(value) or Failure(error). Operations compose
steps that return Results; the first Failure short-circuits the rest.

    ┌───────────┐    step     ┌───────────┐    step     ┌──────────┐
    │ validate  │──Success────│  persist  │──Success────│  notify  │──→ Success(user)
    └─────┬─────┘             └─────┬─────┘             └─────┬────┘
          │ Failure                 │ Failure                 │ Failure
          └─────────────────────────┴─────────────────────────┴──→ Failure(error)

Design choices:
  - Frozen dataclasses for both variants, equality is value-based
  - Any payload is accepted, None included (a body returning nothing
    still succeeds)
  - match/case binds the whole payload: `case Success(v)` never spreads
    a list value into several names
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Optional, TypeVar

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E")
A = TypeVar("A")
B = TypeVar("B")
R = TypeVar("R")


class Result(Generic[T, E]):
    """
    Two possible states:
      - Success(value: T) — the happy path
      - Failure(error: E) — the failure track

    The error payload is opaque: a symbol-like string, a tuple such as
    ("invalid", errors), an exception, a domain object.

        >>> Result.success(42).map(lambda x: x * 2)
        Success(84)

        >>> Result.failure("not_found").map(lambda x: x * 2).is_failure()
        True
    """

    __slots__ = ()

    # ──────────────────────── Introspection ────────────────────────

    def is_success(self) -> bool:
        """Check if this Result is a Success."""
        return isinstance(self, Success)

    def is_failure(self) -> bool:
        """Check if this Result is a Failure."""
        return isinstance(self, Failure)

    def value(self) -> T:
        """
        Extract the success value. Raises ValueError if called on a Failure.

        Prefer .value_or() or match/case for safe access.
        """
        if isinstance(self, Success):
            return self._value
        raise ValueError(f"Cannot get value from a Failure: {self._error!r}")  # type: ignore[attr-defined]

    def error(self) -> E:
        """Extract the failure payload. Raises ValueError if called on a Success."""
        if isinstance(self, Failure):
            return self._error
        raise ValueError(f"Cannot get error from a Success: {self._value!r}")  # type: ignore[attr-defined]

    def value_or(self, default: T) -> T:
        """Extract value or return a default on failure."""
        match self:
            case Success(v):
                return v
            case _:
                return default

    # ──────────────────────── Core Transformations ────────────────────────

    def either(
        self,
        on_success: Callable[[T], R],
        on_failure: Callable[[E], R],
    ) -> R:
        """
        Apply one of two functions depending on the state.

            result.either(
                on_success=lambda user: f"Hello {user.name}",
                on_failure=lambda err: f"Error: {err}",
            )
        """
        match self:
            case Success(v):
                return on_success(v)
            case Failure(err):
                return on_failure(err)
        raise TypeError("unreachable")  # pragma: no cover

    def map(self, mapper: Callable[[T], U]) -> Result[U, E]:
        """
        Transform the success value. Short-circuits on failure.

            Result.success(5).map(lambda x: x * 2)   # → Success(10)
            Result.failure("x").map(lambda x: x * 2) # → Failure('x')
        """
        match self:
            case Success(v):
                return Success(mapper(v))
            case _:
                return self  # type: ignore[return-value]

    def map_failure(self, mapper: Callable[[E], U]) -> Result[T, U]:
        """Transform the failure payload. Passes a success through unchanged."""
        match self:
            case Failure(err):
                return Failure(mapper(err))
            case _:
                return self  # type: ignore[return-value]

    def flat_map(self, mapper: Callable[[T], Result[U, E]]) -> Result[U, E]:
        """
        Chain a Result-returning function. Short-circuits on failure.

        The expression-level counterpart of `step` inside an operation.
        """
        match self:
            case Success(v):
                return mapper(v)
            case _:
                return self  # type: ignore[return-value]

    def ensure(self, predicate: Callable[[T], bool], error: E) -> Result[T, E]:
        """
        Validate the success value against a condition.
        Short-circuits on existing failure.

            Result.success(order).ensure(lambda o: o.total > 0, "empty_order")
        """
        return self.flat_map(lambda v: Success(v) if predicate(v) else Failure(error))

    # ──────────────────────── Side Effects ────────────────────────

    def peek(self, action: Callable[[T], Any]) -> Result[T, E]:
        """Execute a side effect on the success value without altering the Result."""
        match self:
            case Success(v):
                action(v)
        return self

    def peek_failure(self, action: Callable[[E], Any]) -> Result[T, E]:
        """Execute a side effect on failure without altering the Result."""
        match self:
            case Failure(err):
                action(err)
        return self

    # ──────────────────────── Recovery ────────────────────────

    def recover(self, recovery_fn: Callable[[E], T]) -> Result[T, E]:
        """Recover from failure by producing a success value."""
        match self:
            case Failure(err):
                return Success(recovery_fn(err))
            case _:
                return self

    def get_or_else_get(self, fallback: Callable[[E], T]) -> T:
        """Extract value or compute a default from the failure."""
        return self.either(lambda v: v, fallback)

    # ──────────────────────── Static Factories ────────────────────────

    @staticmethod
    def success(value: T) -> Result[T, Any]:
        """Create a successful Result wrapping the given value."""
        return Success(value)

    @staticmethod
    def failure(error: E) -> Result[Any, E]:
        """Create a failed Result carrying the given payload."""
        return Failure(error)

    @staticmethod
    def from_computation(
        computation: Callable[[], T],
        on_error: Callable[[Exception], E],
    ) -> Result[T, E]:
        """
        Create a Result from a computation that may raise.

            Result.from_computation(
                lambda: repo.find(user_id),
                lambda exc: ("database_error", str(exc)),
            )
        """
        try:
            return Success(computation())
        except Exception as e:
            return Failure(on_error(e))

    @staticmethod
    def from_optional(value: Optional[T], error: E) -> Result[T, E]:
        """Success for a non-None value, Failure(error) otherwise."""
        if value is not None:
            return Success(value)
        return Failure(error)

    @staticmethod
    def combine(
        ra: Result[A, E],
        rb: Result[B, E],
        combiner: Callable[[A, B], R],
    ) -> Result[R, E]:
        """Combine two Results. Both must succeed for the combination to succeed."""
        return ra.flat_map(lambda a: rb.map(lambda b: combiner(a, b)))

    @staticmethod
    def all_of(results: Iterable[Result[T, E]]) -> Result[list[T], E]:
        """
        Collect Results into a Result of list.
        Returns the first failure encountered, or Success with all values.
        """
        values: list[T] = []
        for r in results:
            match r:
                case Success(v):
                    values.append(v)
                case _:
                    return r  # type: ignore[return-value]
        return Success(values)

    # ──────────────────────── Dunder methods ────────────────────────

    def __bool__(self) -> bool:
        """Allow truthiness check: `if result: ...` succeeds only on Success."""
        return self.is_success()


@dataclass(frozen=True, slots=True)
class Success(Result[T, Any]):
    """The success track — wraps a value of type T."""

    _value: T

    def __repr__(self) -> str:
        return f"Success({self._value!r})"


@dataclass(frozen=True, slots=True)
class Failure(Result[Any, E]):
    """The failure track — wraps an error payload of type E."""

    _error: E

    def __repr__(self) -> str:
        return f"Failure({self._error!r})"
