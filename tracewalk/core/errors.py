from __future__ import annotations
from typing import Iterable, Tuple


class TracewalkError(Exception):
    """Base class for all tracewalk errors."""


class TreeError(TracewalkError, ValueError):
    """A transition tree is malformed or was queried at a leaf."""


class UnmatchedTrace(TracewalkError):
    """
    An event arrived for which the current cursor has no known child.

    ``trace`` holds every event name observed up to and including the diverging one.
    """

    def __init__(self, trace: Iterable[str]) -> None:
        self.trace: Tuple[str, ...] = tuple(trace)
        super().__init__(f"unmatched trace: {list(self.trace)!r}")


class CompletionError(TracewalkError, RuntimeError):
    """A completion was resolved twice or observed by more than one consumer."""


class LateEventError(TracewalkError, RuntimeError):
    """An event reached a walker that already settled (harness bug)."""


class SchedulerError(TracewalkError, RuntimeError):
    """A deferred callback could not be scheduled (e.g. no running event loop)."""
