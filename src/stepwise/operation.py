"""
Operation — the base class of the DSL.

Subclass it and write the happy path in `call`. Each fallible call goes
through `step`: a Success is unwrapped, a Failure stops the method and
becomes its return value. A normal return is wrapped in Success.

    class CreateUser(Operation):
        def call(self, input):
            attrs = self.step(self.validate(input))
            user = self.step(self.persist(attrs))
            self.step(self.notify(user))
            return user

    match CreateUser().call(input):
        case Success(user):
            print(f"User {user.name} created")
        case Failure(("invalid_input", errors)):
            print(f"Invalid input: {errors}")
        case Failure("database_error"):
            print("Database error")

Wrap another method, several methods, or none at all:

    class Run(Operation, operate_on="run"): ...
    class Both(Operation, operate_on=("run", "apply")): ...
    class Manual(Operation, skip_wrapping=True):
        def call(self, input):
            return self.steps(lambda: self.step(self.validate(input)))

Define `on_failure(self, failure)` or `on_failure(self, failure, method_name)`
to observe every failed wrapped call.
"""

from __future__ import annotations

from typing import Any, Callable

from stepwise.class_context import OperationMeta
from stepwise.mixin import StepsMixin


class Operation(StepsMixin, metaclass=OperationMeta):
    """Base class; `call` of every subclass runs inside `steps`."""

    def _call_wrapped(
        self,
        method_name: str,
        func: Callable[..., Any],
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Any:
        """
        Invoke the original body of a wrapped method.

        Runs inside the method's `steps` scope. Extensions override it
        cooperatively to act on the arguments first.
        """
        return func(self, *args, **kwargs)
