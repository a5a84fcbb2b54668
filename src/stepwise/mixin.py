"""
Steps DSL — focus on the happy path, short-circuit on the first failure.

    class CreateUser(StepsMixin):
        def call(self, input):
            return self.steps(lambda: self._create(input))

        def _create(self, input):
            attrs = self.step(self.validate(input))
            user = self.step(self.persist(attrs))
            self.step(self.notify(user))
            return user

`step` unwraps a Success or halts the enclosing `steps` with the Failure.
Subclass `stepwise.Operation` instead to have `call` wrapped in `steps`
automatically.
"""

from __future__ import annotations

from typing import Any, Callable, NoReturn, TypeVar

from stepwise.channel import halt, run_scoped
from stepwise.errors import InvalidStepResultError
from stepwise.result import Failure, Result, Success

T = TypeVar("T")


class StepsMixin:
    """Instance-level primitives of the DSL."""

    def steps(self, body: Callable[[], T]) -> Result[T, Any]:
        """
        Run `body` as one short-circuiting scope.

        Returns Success(<body's return value>) when it completes, or the
        Failure any nested `step` halted with.
        """
        return run_scoped(lambda: Success(body()))  # type: ignore[return-value]

    def step(self, result: Result[T, Any]) -> T:
        """
        Unwrap a Success, or halt the enclosing scope with the Failure.

        Raises InvalidStepResultError for anything that is not a Result.
        """
        if isinstance(result, Success):
            return result.value()
        if isinstance(result, Failure):
            halt(result)
        raise InvalidStepResultError(result)

    def intercepting_failure(
        self,
        body: Callable[[], T],
        handler: Callable[[Failure], Any] | None = None,
    ) -> T:
        """
        Run `body` in its own boundary and react to a failure before it escapes.

        If the body yields a Failure (halted or returned), `handler` is
        called with it and the failure keeps propagating to the next outer
        boundary. A handler may raise its own signal instead, e.g. to roll
        back a transaction. Any other outcome is returned unchanged and the
        handler is not called.
        """
        outcome = run_scoped(body)
        if isinstance(outcome, Failure):
            if handler is not None:
                handler(outcome)
            halt(outcome)
        return outcome

    def throw_failure(self, failure: Failure) -> NoReturn:
        """Halt the enclosing scope with an already built Failure."""
        halt(failure)
