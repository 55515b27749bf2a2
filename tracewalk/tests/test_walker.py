import pytest
from tracewalk.core import (
    AfterTerminal,
    Event,
    ExactOrigin,
    Failed,
    LateEventError,
    Pending,
    PredicateFilter,
    Succeeded,
    TraceWalker,
    WalkerConfig,
)
from tracewalk.core.scheduling import ManualScheduler
from tracewalk.core.tree import iter_paths
from tracewalk.scenarios import SCRIPT_LOADER_TREE

def make_walker(**cfg):
    outcomes = []
    walker = TraceWalker(SCRIPT_LOADER_TREE, config=WalkerConfig(**cfg), scheduler=ManualScheduler())
    walker.completion.subscribe(
        lambda label: outcomes.append(("ok", label)),
        lambda trace: outcomes.append(("fail", trace)),
    )
    return walker, outcomes

def feed(walker, names):
    for n in names:
        walker.observe(n)
    return walker.state

@pytest.mark.parametrize("names, label", [
    (["scriptloader_load_source", "scriptloader_execute"], "source_exec"),
    (["scriptloader_load_source", "scriptloader_encode_and_execute", "scriptloader_bytecode_saved"], "bytecode_saved"),
    (["scriptloader_load_bytecode", "scriptloader_execute"], "bytecode_exec"),
    (["scriptloader_load_bytecode", "scriptloader_fallback", "scriptloader_load_source", "scriptloader_execute"],
     "fallback_source_exec"),
])
def test_known_scenarios_succeed(names, label):
    walker, outcomes = make_walker()
    assert feed(walker, names) == Succeeded(label)
    assert outcomes == [("ok", label)]

def test_unknown_first_event_fails_immediately():
    walker, outcomes = make_walker()
    state = walker.observe("scriptloader_generate_bytecode")
    assert state == Failed(("scriptloader_generate_bytecode",))
    assert outcomes == [("fail", ("scriptloader_generate_bytecode",))]

def test_every_tree_path_succeeds():
    for path, label in iter_paths(SCRIPT_LOADER_TREE):
        walker, outcomes = make_walker()
        feed(walker, path)
        assert walker.state == Succeeded(label)
        assert outcomes == [("ok", label)]

def test_divergence_at_step_k_carries_k_events():
    for path, _ in iter_paths(SCRIPT_LOADER_TREE):
        for k in range(1, len(path) + 1):
            names = list(path[:k - 1]) + ["scriptloader_generate_bytecode"]
            walker, outcomes = make_walker()
            feed(walker, names)
            assert walker.state == Failed(tuple(names))
            assert len(walker.state.trace) == k
            assert outcomes == [("fail", tuple(names))]

def test_trace_grows_one_event_at_a_time_while_pending():
    path = ["scriptloader_load_bytecode", "scriptloader_fallback", "scriptloader_load_source"]
    walker, outcomes = make_walker()
    for n, name in enumerate(path, start=1):
        walker.observe(name)
        assert len(walker.trace) == n
        assert walker.depth == n
        assert isinstance(walker.state, Pending)
    assert outcomes == []
    assert walker.expected() == ["scriptloader_encode_and_execute", "scriptloader_execute"]

def test_origin_filter_discards_before_recording():
    walker, outcomes = make_walker(origin_filter=ExactOrigin("watchme"))
    walker.observe(Event("ping", origin="window"))
    walker.observe(Event("scriptloader_load_source", origin="watchme"))
    walker.observe(Event("scriptloader_generate_bytecode", origin="other-script"))
    walker.observe(Event("scriptloader_execute", origin="watchme"))
    assert walker.trace == ("scriptloader_load_source", "scriptloader_execute")
    assert walker.ignored == 2
    assert outcomes == [("ok", "source_exec")]

def test_predicate_origin_filter():
    walker, outcomes = make_walker(origin_filter=PredicateFilter(lambda e: e.name.startswith("scriptloader_")))
    feed(walker, ["ping", "scriptloader_load_bytecode", "ping", "scriptloader_execute"])
    assert walker.trace == ("scriptloader_load_bytecode", "scriptloader_execute")
    assert outcomes == [("ok", "bytecode_exec")]

def test_events_after_success_are_ignored_by_default():
    walker, outcomes = make_walker()
    feed(walker, ["scriptloader_load_bytecode", "scriptloader_execute", "scriptloader_fallback"])
    assert walker.state == Succeeded("bytecode_exec")
    assert walker.trace == ("scriptloader_load_bytecode", "scriptloader_execute")
    assert walker.ignored == 1
    assert outcomes == [("ok", "bytecode_exec")]

def test_record_policy_keeps_history_but_not_the_outcome():
    walker, outcomes = make_walker(after_terminal=AfterTerminal.RECORD)
    feed(walker, ["scriptloader_generate_bytecode", "scriptloader_load_source", "scriptloader_execute"])
    assert walker.state == Failed(("scriptloader_generate_bytecode",))
    assert walker.trace == ("scriptloader_generate_bytecode", "scriptloader_load_source", "scriptloader_execute")
    assert walker.depth == 1
    assert outcomes == [("fail", ("scriptloader_generate_bytecode",))]

def test_raise_policy_flags_late_events():
    walker, _ = make_walker(after_terminal=AfterTerminal.RAISE)
    feed(walker, ["scriptloader_load_source", "scriptloader_execute"])
    with pytest.raises(LateEventError):
        walker.observe("scriptloader_execute")

def test_walker_accepts_plain_mapping_tree():
    walker = TraceWalker({"start": {"stop": "done"}}, scheduler=ManualScheduler())
    walker.observe("start")
    walker.observe("stop")
    assert walker.state == Succeeded("done")
    assert walker.settled
    assert walker.expected() == []

def test_config_accepts_loose_origin_and_policy_values():
    cfg = WalkerConfig(origin_filter="watchme", after_terminal="record")
    assert isinstance(cfg.origin_filter, ExactOrigin)
    assert cfg.after_terminal is AfterTerminal.RECORD
    cfg = WalkerConfig(origin_filter=lambda e: e.origin in ("watchme", "watchme2"))
    assert cfg.origin_filter.accepts(Event("x", origin="watchme2"))
    assert not cfg.origin_filter.accepts(Event("x", origin="other"))
