from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
from tracewalk.core.event import EventLog
from tracewalk.core.scheduling import ManualScheduler
from tracewalk.core.tree import Branch
from tracewalk.core.walker import Failed, Pending, Succeeded, TraceWalker, WalkerConfig, WalkerState

@dataclass
class ReplayRequest:
    log: EventLog
    tree: Any
    config: WalkerConfig = field(default_factory=WalkerConfig)
    alias_map: Optional[Dict[str, str]] = None
    # Deliver a still-deferred failure when the log runs out instead of waiting out the window
    flush_at_end: bool = False

@dataclass
class ReplayResult:
    state: WalkerState
    trace: Tuple[str, ...]
    delivered: bool
    delivered_at: Optional[float]
    decided_at: Optional[float]
    ignored: int
    source: Optional[str] = None

    @property
    def outcome(self) -> str:
        if isinstance(self.state, Succeeded):
            return "succeeded"
        if isinstance(self.state, Failed):
            return "failed"
        return "pending"

    @property
    def label(self) -> Optional[str]:
        return self.state.label if isinstance(self.state, Succeeded) else None

    @property
    def failure_trace(self) -> Optional[Tuple[str, ...]]:
        return self.state.trace if isinstance(self.state, Failed) else None

    @property
    def expected(self) -> List[str]:
        if isinstance(self.state, Pending):
            return self.state.cursor.names()
        return []

class Evaluator:
    def __init__(self, config: Optional[WalkerConfig] = None) -> None:
        self.config = config or WalkerConfig()

    def replay(self, req: ReplayRequest) -> ReplayResult:
        """
        Drive a fresh walker over a recorded log on a virtual clock.

        The clock is advanced to each event's timestamp before the event is observed, so
        a delayed failure fires at the same point relative to later events as it would
        live. Once the log is exhausted, outstanding timers are run.
        """
        log = req.log
        if req.alias_map:
            log = log.canonicalize(req.alias_map)
        log_sorted = log.sort_by_time(in_place=False)

        start = log_sorted.events[0].timestamp if log_sorted.events else 0.0
        scheduler = ManualScheduler(start=start)
        walker = TraceWalker(req.tree, config=req.config, scheduler=scheduler)

        delivered_at: List[float] = []
        walker.completion.subscribe(
            lambda _label: delivered_at.append(scheduler.now),
            lambda _trace: delivered_at.append(scheduler.now),
        )

        decided_at: Optional[float] = None
        for e in log_sorted.events:
            scheduler.advance_to(e.timestamp)
            was_pending = not walker.settled
            walker.observe(e)
            if was_pending and walker.settled:
                decided_at = e.timestamp

        if req.flush_at_end:
            walker.flush()
        else:
            scheduler.run_all()

        return ReplayResult(
            state=walker.state,
            trace=walker.trace,
            delivered=walker.completion.done,
            delivered_at=delivered_at[0] if delivered_at else None,
            decided_at=decided_at,
            ignored=walker.ignored,
        )

    def replay_batch(self, logs: List[EventLog], tree: Branch, **kwargs) -> List[ReplayResult]:
        """
        Replay several logs against one tree with this evaluator's config.

        kwargs may include: alias_map, flush_at_end, sources (names attached to results).
        """
        sources = kwargs.get("sources") or [None] * len(logs)
        results: List[ReplayResult] = []
        for log, source in zip(logs, sources):
            req = ReplayRequest(
                log=log,
                tree=tree,
                config=self.config,
                alias_map=kwargs.get("alias_map"),
                flush_at_end=kwargs.get("flush_at_end", False),
            )
            res = self.replay(req)
            res.source = source
            results.append(res)
        return results

    @staticmethod
    def default() -> "Evaluator":
        return Evaluator()
