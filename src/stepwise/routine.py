"""
Routines — shared context for multi-component operations.

A Routine runs an operation and makes itself available to every
collaborator taking part in that run, without threading it through
each call. Collaborators mix in RoutineAware and read `self.routine`.

    class Averages(Routine):
        def __init__(self, elements):
            self.elements = elements

        def callee(self):
            return AverageOperation().call

    class Sum(RoutineAware):
        def call(self):
            return Success(sum(self.routine.elements))

    Averages(range(1, 26)).resume()   # → Success(13.0)

The current routine lives in a ContextVar: each `resume` runs in a copy
of the caller's context, so concurrent runs on other threads or asyncio
tasks never see each other's routine.
"""

from __future__ import annotations

import contextvars
from typing import Any, Callable

import structlog

log = structlog.get_logger(logger_name=__name__)

_current_routine: contextvars.ContextVar[Routine | None] = contextvars.ContextVar(
    "stepwise_routine", default=None
)


class Routine:
    """Override `callee` to return the callable this routine runs."""

    def callee(self) -> Callable[..., Any]:
        return lambda *args, **kwargs: None

    def resume(self, *args: Any, **kwargs: Any) -> Any:
        """Run the callee with this routine as the current one."""
        return contextvars.copy_context().run(self._run, *args, **kwargs)

    def _run(self, *args: Any, **kwargs: Any) -> Any:
        _current_routine.set(self)
        log.debug("routine.started", routine=type(self).__name__)
        return self.callee()(*args, **kwargs)


class RoutineAware:
    """Mixin giving collaborators access to the routine they run under."""

    @property
    def routine(self) -> Routine | None:
        """The routine of the current run, or None outside any run."""
        return _current_routine.get()
