"""
Failure channel — non-local exit carrying a Failure to the nearest boundary.

`halt(failure)` aborts an arbitrarily deep chain of ordinary calls;
`run_scoped(body)` is the boundary that catches it and returns the
failure as a plain value:

    run_scoped(body)
      └─ body()
           └─ helper()
                └─ step(Failure("boom"))  ── halt ──┐
      ◄──────────────────────────────────────────────┘  returns Failure("boom")

The signal derives from BaseException, like GeneratorExit, so business
code catching `Exception` never swallows it by accident. It unwinds the
calling stack only and is never shared between threads.
"""

from __future__ import annotations

from typing import Callable, NoReturn, TypeVar

from stepwise.result import Failure

T = TypeVar("T")


class ChannelTag:
    """Identity token pairing a `halt` with its `run_scoped` boundary."""

    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return f"<ChannelTag {self.name}>"


HALT = ChannelTag("halt")


class _Halt(BaseException):
    __slots__ = ("tag", "failure")

    def __init__(self, tag: ChannelTag, failure: Failure) -> None:
        super().__init__(tag, failure)
        self.tag = tag
        self.failure = failure


def new_tag(name: str) -> ChannelTag:
    """Create a tag for a channel that must not collide with `HALT`."""
    return ChannelTag(name)


def halt(failure: Failure, tag: ChannelTag = HALT) -> NoReturn:
    """Abort up to the nearest `run_scoped` boundary listening on `tag`."""
    raise _Halt(tag, failure)


def run_scoped(body: Callable[[], T], tag: ChannelTag = HALT) -> T | Failure:
    """
    Run `body`, returning either its value or the failure it halted with.

    Signals carrying another tag keep unwinding past this boundary.
    """
    try:
        return body()
    except _Halt as signal:
        if signal.tag is not tag:
            raise
        return signal.failure
