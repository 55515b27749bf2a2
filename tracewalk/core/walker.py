from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from tracewalk.core.completion import Completion
from tracewalk.core.errors import LateEventError
from tracewalk.core.event import Event
from tracewalk.core.policies import (
    AcceptAll,
    AfterTerminal,
    DelayedFailure,
    FailurePolicy,
    ImmediateFailure,
    OriginFilter,
    as_origin_filter,
)
from tracewalk.core.scheduling import LoopScheduler, Scheduler, TimerHandle
from tracewalk.core.tree import Branch, Leaf, NotFound, build_tree, lookup

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Pending:
    cursor: Branch


@dataclass(frozen=True)
class Succeeded:
    label: str


@dataclass(frozen=True)
class Failed:
    trace: Tuple[str, ...]


WalkerState = Union[Pending, Succeeded, Failed]


@dataclass
class WalkerConfig:
    failure_policy: FailurePolicy = field(default_factory=ImmediateFailure)
    origin_filter: OriginFilter = field(default_factory=AcceptAll)
    after_terminal: AfterTerminal = AfterTerminal.IGNORE

    def __post_init__(self) -> None:
        # Accept a bare origin string or a predicate callable as well as a filter object
        self.origin_filter = as_origin_filter(self.origin_filter)
        self.after_terminal = AfterTerminal(self.after_terminal)


class TraceWalker:
    """
    Walk a transition tree one observed event at a time.

    Each accepted event is appended to the trace, then moves the cursor one level down.
    Reaching a leaf resolves the completion with its label; an event with no child at
    the cursor fails the walk with the trace so far. Both outcomes are final.
    """

    def __init__(self,
                 tree,
                 config: Optional[WalkerConfig] = None,
                 scheduler: Optional[Scheduler] = None) -> None:
        self.root: Branch = build_tree(tree)
        self.config = config or WalkerConfig()
        self.scheduler: Scheduler = scheduler or LoopScheduler()
        self.completion = Completion()
        self.state: WalkerState = Pending(self.root)
        self._trace: List[str] = []
        self._timer: Optional[TimerHandle] = None
        self._walked = 0
        self.ignored = 0

    @property
    def trace(self) -> Tuple[str, ...]:
        return tuple(self._trace)

    @property
    def depth(self) -> int:
        """Number of events consumed while the walk was pending."""
        return self._walked

    @property
    def settled(self) -> bool:
        return not isinstance(self.state, Pending)

    @property
    def failure_pending(self) -> bool:
        """True while a delayed failure is waiting for its window to elapse."""
        return self._timer is not None

    def expected(self) -> List[str]:
        if isinstance(self.state, Pending):
            return self.state.cursor.names()
        return []

    def observe(self, event: Union[Event, str]) -> WalkerState:
        if isinstance(event, str):
            event = Event(event)

        if not self.config.origin_filter.accepts(event):
            logger.debug("Discarding %s from origin %r", event.name, event.origin)
            self.ignored += 1
            return self.state

        if not isinstance(self.state, Pending):
            return self._observe_after_terminal(event)

        child = lookup(self.state.cursor, event.name)

        if child is NotFound:
            self._fail(event.name)
            return self.state

        self._trace.append(event.name)
        self._walked += 1
        if isinstance(child, Leaf):
            self.state = Succeeded(child.label)
            logger.info("Trace matched %s via %s", child.label, list(self._trace))
            self.completion.resolve(child.label)
        else:
            logger.debug("Step %d: %s (expecting one of %s)",
                         len(self._trace), event.name, child.names())
            self.state = Pending(child)
        return self.state

    def _observe_after_terminal(self, event: Event) -> WalkerState:
        policy = self.config.after_terminal
        if policy is AfterTerminal.RAISE:
            raise LateEventError(f"event {event.name!r} arrived after the walk settled as {self.state!r}")
        if policy is AfterTerminal.RECORD:
            logger.debug("Recording late event %s (walk already settled)", event.name)
            self._trace.append(event.name)
        else:
            logger.debug("Ignoring late event %s (walk already settled)", event.name)
            self.ignored += 1
        return self.state

    def _fail(self, name: str) -> None:
        # Schedule before committing: a scheduling error leaves the walker pending
        policy = self.config.failure_policy
        timer: Optional[TimerHandle] = None
        if isinstance(policy, DelayedFailure):
            timer = self.scheduler.call_later(policy.window, self._fire_failure)

        self._trace.append(name)
        self._walked += 1
        self.state = Failed(tuple(self._trace))
        logger.warning("Unmatched event %s after %d step(s); trace=%s",
                       name, len(self._trace) - 1, list(self._trace))
        if timer is not None:
            logger.debug("Deferring failure delivery by %.3fs", policy.window)
            self._timer = timer
        else:
            self.completion.reject(self.state.trace)

    def _fire_failure(self) -> None:
        self._timer = None
        assert isinstance(self.state, Failed)
        self.completion.reject(self.state.trace)

    def flush(self) -> bool:
        """Deliver a deferred failure now. Returns True if one was pending."""
        if self._timer is None:
            return False
        self._timer.cancel()
        self._fire_failure()
        return True
