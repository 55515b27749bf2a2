from __future__ import annotations
import asyncio
import heapq
import itertools
from typing import Callable, List, Optional, Protocol, Tuple

from tracewalk.core.errors import SchedulerError


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...


class LoopScheduler:
    """
    Schedule deferred callbacks on an asyncio event loop.

    Without an explicit loop the running loop is looked up at scheduling time, so the
    walker can be constructed outside a coroutine and fed from inside one.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self.loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self.loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError as e:
                raise SchedulerError(
                    "no running event loop; pass LoopScheduler(loop) or use a ManualScheduler"
                ) from e
        return loop.call_later(delay, callback)


class ManualTimer:
    def __init__(self, when: float, callback: Callable[[], None]) -> None:
        self.when = when
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Virtual-clock scheduler: time only moves when advance()/advance_to() is called.

    Used for offline replay of recorded event logs (the clock follows event timestamps)
    and for deterministic tests of the delayed failure policy.
    """

    def __init__(self, start: float = 0.0) -> None:
        self.now = float(start)
        self._queue: List[Tuple[float, int, ManualTimer]] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(self.now + max(0.0, float(delay)), callback)
        heapq.heappush(self._queue, (timer.when, next(self._seq), timer))
        return timer

    def pending(self) -> int:
        return sum(1 for _, _, t in self._queue if not t.cancelled)

    def advance_to(self, when: float) -> int:
        """Move the clock forward to ``when``, firing due timers in order. Returns the number fired."""
        fired = 0
        when = max(self.now, float(when))
        while self._queue and self._queue[0][0] <= when:
            due, _, timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self.now = due
            timer.callback()
            fired += 1
        self.now = when
        return fired

    def advance(self, delta: float) -> int:
        return self.advance_to(self.now + float(delta))

    def run_all(self) -> int:
        """Fire every outstanding timer, moving the clock to the last one."""
        fired = 0
        while self._queue:
            fired += self.advance_to(self._queue[0][0])
        return fired
