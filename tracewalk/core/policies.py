from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol, Union

from tracewalk.core.event import Event


@dataclass(frozen=True)
class ImmediateFailure:
    """Signal an unmatched trace as soon as the divergence is seen."""


@dataclass(frozen=True)
class DelayedFailure:
    """
    Signal an unmatched trace after a fixed grace window (seconds).

    The walker is already Failed when the timer starts; the window only shifts when
    the observer hears about it.
    """
    window: float = 0.5

    def __post_init__(self) -> None:
        if self.window < 0:
            raise ValueError(f"failure window must be >= 0, got {self.window!r}")


FailurePolicy = Union[ImmediateFailure, DelayedFailure]


class AfterTerminal(str, Enum):
    """What a settled walker does with further events."""
    IGNORE = "ignore"
    RECORD = "record"
    RAISE = "raise"


class OriginFilter(Protocol):
    def accepts(self, event: Event) -> bool: ...


class AcceptAll:
    def accepts(self, event: Event) -> bool:
        return True


class ExactOrigin:
    def __init__(self, origin: str) -> None:
        self.origin = origin

    def accepts(self, event: Event) -> bool:
        return event.origin == self.origin

    def __repr__(self) -> str:
        return f"ExactOrigin({self.origin!r})"


class PredicateFilter:
    def __init__(self, predicate: Callable[[Event], bool]) -> None:
        self.predicate = predicate

    def accepts(self, event: Event) -> bool:
        return bool(self.predicate(event))


def as_origin_filter(spec: Union[None, str, OriginFilter, Callable[[Event], bool]]) -> OriginFilter:
    """
    Resolve an origin filter from a loose spec.
    None accepts everything, a string matches the origin exactly and a plain
    callable is used as a predicate.
    """
    if spec is None:
        return AcceptAll()
    if isinstance(spec, str):
        return ExactOrigin(spec)
    if hasattr(spec, "accepts"):
        return spec  # type: ignore[return-value]
    if callable(spec):
        return PredicateFilter(spec)
    raise TypeError(f"cannot build an origin filter from {spec!r}")
