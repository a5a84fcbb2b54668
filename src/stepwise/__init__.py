"""
stepwise — compose fallible steps, short-circuit on the first failure.

    from stepwise import Operation, Success, Failure

    class CreateUser(Operation):
        def call(self, input):
            attrs = self.step(self.validate(input))
            user = self.step(self.persist(attrs))
            self.step(self.notify(user))
            return user

    CreateUser().call(input)   # → Success(user) or the first Failure

`call` runs inside `steps` automatically; `step` unwraps a Success or
stops the method with the Failure. Transactions and input validation
live in `stepwise.extensions`.
"""

from stepwise.result import Result, Success, Failure
from stepwise.errors import (
    OperationError,
    InvalidStepResultError,
    AlreadyDefinedError,
    ConfigurationLockedError,
    FailureHookArityError,
    MissingDependencyError,
    ExtensionError,
)
from stepwise.mixin import StepsMixin
from stepwise.class_context import FailureObserver, WrappingConfig
from stepwise.operation import Operation
from stepwise.routine import Routine, RoutineAware
from stepwise.assertions import ResultAssertions
from stepwise.config import StepwiseSettings
from stepwise.logs import configure_logging, configure_structlog

__all__ = [
    "Result",
    "Success",
    "Failure",
    "OperationError",
    "InvalidStepResultError",
    "AlreadyDefinedError",
    "ConfigurationLockedError",
    "FailureHookArityError",
    "MissingDependencyError",
    "ExtensionError",
    "StepsMixin",
    "FailureObserver",
    "WrappingConfig",
    "Operation",
    "Routine",
    "RoutineAware",
    "ResultAssertions",
    "StepwiseSettings",
    "configure_structlog",
    "configure_logging",
]

__version__ = "1.0.0"
