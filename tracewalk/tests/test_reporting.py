import json
from tracewalk.core import Evaluator, EventLog, ReplayRequest, summarize
from tracewalk.reporting import (
    build_batch_report,
    build_json_report,
    build_step_rows,
    format_step_table,
    format_summary,
    format_text_report,
)
from tracewalk.scenarios import SCRIPT_LOADER_TREE

def _replay(names):
    return Evaluator.default().replay(ReplayRequest(log=EventLog.from_names(names), tree=SCRIPT_LOADER_TREE))

def test_step_rows_mark_divergence():
    rows = build_step_rows(
        ["scriptloader_load_source", "scriptloader_generate_bytecode", "scriptloader_execute"],
        SCRIPT_LOADER_TREE,
    )
    assert [r["match"] for r in rows] == [True, False, None]
    assert rows[1]["expected"] == ["scriptloader_encode_and_execute", "scriptloader_execute"]
    assert rows[2]["expected"] == []

def test_step_rows_mark_reached_label():
    rows = build_step_rows(["scriptloader_load_bytecode", "scriptloader_execute"], SCRIPT_LOADER_TREE)
    assert rows[-1]["reached"] == "bytecode_exec"
    assert "=> bytecode_exec" in format_step_table(rows)

def test_step_table_truncates():
    rows = build_step_rows(["x"] * 5)
    table = format_step_table(rows, max_rows=2)
    assert "... (3 more rows)" in table

def test_json_report_is_serializable():
    res = _replay(["scriptloader_load_source", "scriptloader_generate_bytecode"])
    report = build_json_report(res, tree=SCRIPT_LOADER_TREE)
    assert report["outcome"] == "failed"
    assert report["failure_trace"] == ["scriptloader_load_source", "scriptloader_generate_bytecode"]
    assert len(report["steps"]) == 2
    json.dumps(report)

def test_text_report_for_pending_walk():
    res = _replay(["scriptloader_load_bytecode"])
    text = format_text_report(res, SCRIPT_LOADER_TREE, title="pending walk")
    assert "pending walk" in text
    assert "Outcome:  pending" in text
    assert "scriptloader_fallback" in text

def test_batch_report_and_summary_text():
    results = [_replay(["scriptloader_load_source", "scriptloader_execute"]),
               _replay(["scriptloader_generate_bytecode"])]
    summary = summarize(results)
    report = build_batch_report(results, summary)
    assert report["summary"]["succeeded"] == 1
    json.dumps(report)
    text = format_summary(summary)
    assert "source_exec: 1" in text
    assert "diverged at scriptloader_generate_bytecode: 1" in text
