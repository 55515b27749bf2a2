import asyncio
import pytest
from tracewalk.core.completion import Completion, Failure, Success
from tracewalk.core.errors import CompletionError, UnmatchedTrace

def test_resolve_notifies_observer_once():
    seen = []
    c = Completion()
    c.subscribe(seen.append, lambda t: seen.append(("fail", t)))
    c.resolve("source_exec")
    assert seen == ["source_exec"]
    assert c.done and c.result == Success("source_exec")

def test_second_resolution_is_rejected():
    c = Completion()
    c.reject(["a", "b"])
    assert c.result == Failure(("a", "b"))
    with pytest.raises(CompletionError):
        c.resolve("late")
    with pytest.raises(CompletionError):
        c.reject(["again"])

def test_late_subscriber_gets_settled_result():
    c = Completion()
    c.reject(["x"])
    seen = []
    c.subscribe(lambda label: seen.append(label), lambda t: seen.append(t))
    assert seen == [("x",)]

def test_only_one_observer():
    c = Completion()
    c.subscribe(lambda _: None, lambda _: None)
    with pytest.raises(CompletionError):
        c.subscribe(lambda _: None, lambda _: None)

def test_wait_raises_unmatched_trace():
    async def scenario():
        c = Completion()
        asyncio.get_running_loop().call_soon(c.reject, ["boom"])
        with pytest.raises(UnmatchedTrace) as info:
            await c.wait()
        return info.value.trace

    assert asyncio.run(scenario()) == ("boom",)
