"""
Programmer errors — misuse of the operation DSL.

These are NOT business failures. A business failure travels as a
Failure value and is recovered at the nearest `steps` boundary.
The errors below signal a defect in the consuming code and always
propagate to the caller; the failure channel never captures them.
"""

from __future__ import annotations

from typing import Any, Iterable


class OperationError(Exception):
    """Base class for every error raised by stepwise itself."""


class InvalidStepResultError(OperationError):
    """A step returned something that is not a Success or a Failure."""

    def __init__(self, result: Any) -> None:
        self.result = result
        super().__init__(
            "Your step must return `Success(..)` or `Failure(..)` from "
            f"`stepwise.result`. Instead, it was `{result!r}`."
        )


class AlreadyDefinedError(OperationError):
    """`operate_on` was called after some of the given methods were defined."""

    def __init__(self, methods: Iterable[str]) -> None:
        self.methods = tuple(methods)
        super().__init__(
            "'.operate_on' must be called before the given methods are defined. "
            f"The following methods have already been defined: {', '.join(self.methods)}"
        )


class ConfigurationLockedError(OperationError):
    """Wrapping configuration changed after a method was already wrapped."""

    def __init__(self, methods: Iterable[str]) -> None:
        self.methods = tuple(methods)
        super().__init__(
            "'.operate_on' and '.skip_wrapping' can't be called after any methods "
            "in the class have already been wrapped. "
            f"The following methods have already been wrapped: {', '.join(self.methods)}"
        )


class FailureHookArityError(OperationError):
    """The `on_failure` hook accepts neither one nor two positional arguments."""

    def __init__(self, arity: int | str) -> None:
        self.arity = arity
        super().__init__(
            "'on_failure' must accept either the failure (1 argument) or the "
            "failure and the wrapped method name (2 arguments). "
            f"Its arity is {arity}."
        )


class MissingDependencyError(OperationError):
    """An extension was imported without its third-party package installed."""

    def __init__(self, package: str, extension: str) -> None:
        self.package = package
        self.extension = extension
        super().__init__(
            f"To use the {extension} extension, you first need to install the "
            f"{package} package, e.g. `pip install stepwise[{extension.lower()}]`."
        )


class ExtensionError(OperationError):
    """An extension is used without what it requires from the host class."""
