import pytest
from tracewalk.core.errors import SchedulerError
from tracewalk.core.scheduling import LoopScheduler, ManualScheduler

def test_manual_scheduler_fires_in_time_order():
    s = ManualScheduler()
    fired = []
    s.call_later(0.3, lambda: fired.append(("b", s.now)))
    s.call_later(0.1, lambda: fired.append(("a", s.now)))
    assert s.advance(0.2) == 1
    assert fired == [("a", 0.1)]
    assert s.now == 0.2
    s.run_all()
    assert fired == [("a", 0.1), ("b", 0.3)]

def test_cancelled_timer_never_fires():
    s = ManualScheduler(start=10.0)
    fired = []
    h = s.call_later(1.0, lambda: fired.append(1))
    h.cancel()
    assert s.pending() == 0
    assert s.run_all() == 0
    assert fired == []

def test_clock_never_moves_backwards():
    s = ManualScheduler(start=5.0)
    s.advance_to(2.0)
    assert s.now == 5.0

def test_loop_scheduler_needs_a_loop():
    with pytest.raises(SchedulerError):
        LoopScheduler().call_later(0.1, lambda: None)
