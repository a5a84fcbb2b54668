"""
Class context — which methods of an operation run inside `steps`.

Every Operation subclass carries an immutable WrappingConfig:

    methods_to_wrap   names to enclose in `steps`      default ("call",)
    wrapped_methods   names already wrapped on this exact class

Configuration happens either when the class is built, through class
keywords, or right after, through `operate_on` / `skip_wrapping`:

    class Run(Operation, operate_on="run"): ...
    class Manual(Operation, skip_wrapping=True): ...

    class Later(Operation): ...
    Later.operate_on("run", "apply")
    Later.run = run        # wrapped on assignment

Once a method has been wrapped on a class, its configuration is locked.
A subclass starts from a copy of its parent's `methods_to_wrap` and wraps
its own definitions independently; changes never travel sideways or up.
"""

from __future__ import annotations

import functools
import inspect
from dataclasses import dataclass, replace
from typing import Any, Callable, Iterable, Protocol

import structlog

from stepwise.errors import (
    AlreadyDefinedError,
    ConfigurationLockedError,
    FailureHookArityError,
)
from stepwise.result import Failure, Result

log = structlog.get_logger(logger_name=__name__)

DEFAULT_METHODS_TO_WRAP: tuple[str, ...] = ("call",)
FAILURE_HOOKS: tuple[str, ...] = ("on_failure", "_on_failure")

_CONFIG_ATTR = "_wrapping_config"


# ──────────────────────── Configuration value ────────────────────────


@dataclass(frozen=True, slots=True)
class WrappingConfig:
    """Immutable per-class wrapping configuration."""

    methods_to_wrap: tuple[str, ...] = DEFAULT_METHODS_TO_WRAP
    wrapped_methods: tuple[str, ...] = ()

    def register(self, owner: type, *methods: str) -> WrappingConfig:
        """
        Replace the methods to wrap.

        Raises ConfigurationLockedError once anything is wrapped, and
        AlreadyDefinedError for names defined directly on `owner`.
        """
        self._ensure_pristine()
        already_defined = [m for m in methods if m in vars(owner)]
        if already_defined:
            raise AlreadyDefinedError(already_defined)
        return replace(self, methods_to_wrap=_unique(methods))

    def void(self) -> WrappingConfig:
        """Wrap nothing."""
        self._ensure_pristine()
        return replace(self, methods_to_wrap=())

    def for_subclass(self) -> WrappingConfig:
        return WrappingConfig(methods_to_wrap=self.methods_to_wrap)

    def should_wrap(self, name: str) -> bool:
        return name in self.methods_to_wrap and name not in self.wrapped_methods

    def mark_wrapped(self, name: str) -> WrappingConfig:
        return replace(self, wrapped_methods=(*self.wrapped_methods, name))

    def _ensure_pristine(self) -> None:
        if self.wrapped_methods:
            raise ConfigurationLockedError(self.wrapped_methods)


def _unique(names: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(names))


def _as_names(operate_on: str | Iterable[str]) -> tuple[str, ...]:
    if isinstance(operate_on, str):
        return (operate_on,)
    return _unique(operate_on)


# ──────────────────────── Failure hook ────────────────────────


class FailureObserver(Protocol):
    """
    Shape of the optional hook, for type checkers.

    The hook may also take only the failure payload.
    """

    def on_failure(self, failure: Any, method_name: str) -> Any: ...


def _positional_arity(hook: Callable[..., Any]) -> int | str:
    params = inspect.signature(hook).parameters.values()
    if any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in params):
        return "variable"
    return sum(
        1
        for p in params
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    )


def dispatch_failure_hook(instance: Any, result: Result[Any, Any], method_name: str) -> None:
    """
    Call the instance's failure hook when `result` is a Failure.

    The hook receives the failure payload, plus the wrapped method name
    when it accepts two arguments. Its return value is ignored.
    """
    if not isinstance(result, Failure):
        return
    hook = next(
        (h for h in (getattr(instance, name, None) for name in FAILURE_HOOKS) if h is not None),
        None,
    )
    if hook is None:
        return

    arity = _positional_arity(hook)
    if arity == 1:
        hook(result.error())
    elif arity == 2:
        hook(result.error(), method_name)
    else:
        raise FailureHookArityError(arity)
    log.debug("operation.hook_dispatched", operation=type(instance).__name__, method=method_name)


# ──────────────────────── Physical wrapping ────────────────────────


def _wrap(name: str, func: Callable[..., Any]) -> Callable[..., Any]:
    @functools.wraps(func)
    def wrapper(self: Any, *args: Any, **kwargs: Any) -> Result[Any, Any]:
        result = self.steps(lambda: self._call_wrapped(name, func, args, kwargs))
        if isinstance(result, Failure):
            log.debug("operation.failed", operation=type(self).__name__, method=name)
        dispatch_failure_hook(self, result, name)
        return result

    return wrapper


class OperationMeta(type):
    """
    Metaclass installing the `steps` wrapper around configured methods.

    Accepts the class keywords `operate_on` (a name or names) and
    `skip_wrapping` (bool). Other keywords go to `__init_subclass__`.
    """

    def __new__(
        mcs,
        name: str,
        bases: tuple[type, ...],
        namespace: dict[str, Any],
        /,
        operate_on: str | Iterable[str] | None = None,
        skip_wrapping: bool = False,
        **kwargs: Any,
    ) -> OperationMeta:
        cls = super().__new__(mcs, name, bases, namespace, **kwargs)

        parent = next((base for base in cls.__mro__[1:] if _CONFIG_ATTR in vars(base)), None)
        if parent is None:
            # Root of the hierarchy: configured, never wrapped.
            type.__setattr__(cls, _CONFIG_ATTR, WrappingConfig())
            return cls

        config = parent.__dict__[_CONFIG_ATTR].for_subclass()
        if skip_wrapping:
            config = config.void()
        elif operate_on is not None:
            config = replace(config, methods_to_wrap=_as_names(operate_on))
        type.__setattr__(cls, _CONFIG_ATTR, config)

        for attr, value in namespace.items():
            cls._install_wrapper(attr, value)
        return cls

    def __init__(
        cls,
        name: str,
        bases: tuple[type, ...],
        namespace: dict[str, Any],
        /,
        **kwargs: Any,
    ) -> None:
        super().__init__(name, bases, namespace)

    def __setattr__(cls, name: str, value: Any) -> None:
        super().__setattr__(name, value)
        cls._install_wrapper(name, value)

    @property
    def wrapping_config(cls) -> WrappingConfig:
        """The configuration of this exact class."""
        return cls.__dict__[_CONFIG_ATTR]

    def operate_on(cls, *methods: str) -> None:
        """
        Wrap the given methods instead of the current ones.

        Must be called before defining any of them on this class and
        before any method of this class has been wrapped.
        """
        type.__setattr__(cls, _CONFIG_ATTR, cls.wrapping_config.register(cls, *methods))

    def skip_wrapping(cls) -> None:
        """Wrap no method at all; `steps` must then be called explicitly."""
        type.__setattr__(cls, _CONFIG_ATTR, cls.wrapping_config.void())

    def _install_wrapper(cls, name: str, value: Any) -> None:
        config = cls.__dict__.get(_CONFIG_ATTR)
        if config is None or not inspect.isfunction(value):
            return
        if name in config.wrapped_methods:
            # Redefinition of an already wrapped method stays wrapped.
            type.__setattr__(cls, name, _wrap(name, value))
        elif config.should_wrap(name):
            type.__setattr__(cls, name, _wrap(name, value))
            type.__setattr__(cls, _CONFIG_ATTR, config.mark_wrapped(name))
