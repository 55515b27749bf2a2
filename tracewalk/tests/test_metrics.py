from tracewalk.core import DelayedFailure, Evaluator, Event, EventLog, WalkerConfig
from tracewalk.core.metrics import summarize
from tracewalk.scenarios import SCRIPT_LOADER_TREE

def _replay(logs, config=None):
    return Evaluator(config).replay_batch(logs, SCRIPT_LOADER_TREE)

def test_summary_counts_and_rates():
    results = _replay([
        EventLog.from_names(["scriptloader_load_source", "scriptloader_execute"]),
        EventLog.from_names(["scriptloader_load_bytecode", "scriptloader_execute"]),
        EventLog.from_names(["scriptloader_load_source", "scriptloader_execute"]),
        EventLog.from_names(["scriptloader_load_bytecode", "scriptloader_generate_bytecode"]),
        EventLog.from_names(["scriptloader_load_source"]),
    ])
    s = summarize(results)
    assert (s.total, s.succeeded, s.failed, s.pending) == (5, 3, 1, 1)
    assert s.success_rate == 3 / 5
    assert s.by_label == {"bytecode_exec": 1, "source_exec": 2}
    assert s.details["divergence_depth"] == {"mean": 2.0, "min": 2.0, "max": 2.0}
    assert s.details["divergence_points"] == {"scriptloader_generate_bytecode": 1}
    assert s.details["settled_rate"] == 4 / 5
    assert s.details["trace_length"]["max"] == 2.0

def test_summary_latency_reflects_failure_window():
    config = WalkerConfig(failure_policy=DelayedFailure(window=0.25))
    results = _replay([
        EventLog([Event("scriptloader_fallback", 0.0)]),
        EventLog([Event("scriptloader_load_bytecode", 0.0), Event("scriptloader_execute", 0.3)]),
    ], config)
    lat = summarize(results).details["latency"]
    assert lat["max"] == 0.25
    assert lat["min"] == 0.0

def test_summary_of_nothing():
    s = summarize([])
    assert s.total == 0
    assert s.success_rate == 0.0
    assert s.details["divergence_depth"]["mean"] is None
