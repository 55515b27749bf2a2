from __future__ import annotations
from typing import Any, Dict, List, Optional, Sequence

from tracewalk.core.evaluator import ReplayResult
from tracewalk.core.metrics import OutcomeSummary
from tracewalk.core.tree import Branch, Leaf, NotFound, lookup


def build_step_rows(trace: Sequence[str], tree: Optional[Branch] = None) -> List[Dict[str, Any]]:
    """
    Turn a trace into display-friendly rows, one per observed event.

    With a tree, each row is re-walked against it and carries:
      - match: True if the event was a known transition, False where the walk diverged,
        None for events seen after the walk settled (recorded late events);
      - expected: the event names the cursor accepted at that step;
      - reached: the terminal label when the step settled the walk.
    """
    rows: List[Dict[str, Any]] = []
    node: Optional[Branch] = tree
    for idx, name in enumerate(trace, start=1):
        row: Dict[str, Any] = {"index": idx, "event": name, "match": None, "expected": [], "reached": None}
        if node is not None:
            row["expected"] = node.names()
            child = lookup(node, name)
            if child is NotFound:
                row["match"] = False
                node = None
            elif isinstance(child, Leaf):
                row["match"] = True
                row["reached"] = child.label
                node = None
            else:
                row["match"] = True
                node = child
        rows.append(row)
    return rows


def _trim(s: str, width: int) -> str:
    return s if len(s) <= width else (s[: max(0, width - 1)] + "…")


def format_step_table(
    rows: List[Dict[str, Any]],
    *,
    max_rows: int = 50,
    col_widths: Optional[Dict[str, int]] = None,
) -> str:
    """
    Pretty-print a text table of trace steps.

    Columns:
      IDX | EVENT | MATCH | EXPECTED (or reached label)
    """
    widths = {
        "idx": 4,
        "event": 34,
        "match": 7,
        "expected": 60,
    }
    if col_widths:
        widths.update(col_widths)

    header = (
        f"{'IDX':>{widths['idx']}} | {'EVENT':<{widths['event']}} | "
        f"{'MATCH':^{widths['match']}} | {'EXPECTED':<{widths['expected']}}"
    )
    sep = "-" * len(header)

    out_lines = [header, sep]
    shown = 0
    for r in rows:
        if shown >= max_rows:
            break
        match = r.get("match", None)
        match_s = "✓" if match is True else ("✗" if match is False else "·")
        if r.get("reached"):
            info = f"=> {r['reached']}"
        else:
            info = ", ".join(r.get("expected") or []) or "—"
        line = (
            f"{r['index']:>{widths['idx']}} | {_trim(r['event'], widths['event']):<{widths['event']}} | "
            f"{match_s:^{widths['match']}} | {_trim(info, widths['expected']):<{widths['expected']}}"
        )
        out_lines.append(line)
        shown += 1

    if shown < len(rows):
        out_lines.append(f"... ({len(rows) - shown} more rows)")
    return "\n".join(out_lines)


def build_json_report(result: ReplayResult, *, tree: Optional[Branch] = None) -> Dict[str, Any]:
    """
    Create a JSON-serializable report of one replay: outcome, label or failure trace,
    delivery timing, and (with the tree) per-step rows.
    """
    report: Dict[str, Any] = {
        "source": result.source,
        "outcome": result.outcome,
        "label": result.label,
        "trace": list(result.trace),
        "failure_trace": list(result.failure_trace) if result.failure_trace is not None else None,
        "delivered": result.delivered,
        "decided_at": result.decided_at,
        "delivered_at": result.delivered_at,
        "ignored": result.ignored,
    }
    if result.outcome == "pending":
        report["expected"] = result.expected
    if tree is not None:
        report["steps"] = build_step_rows(result.trace, tree)
    return report


def build_batch_report(
    results: List[ReplayResult],
    summary: OutcomeSummary,
    *,
    tree: Optional[Branch] = None,
) -> Dict[str, Any]:
    return {
        "summary": {
            "total": summary.total,
            "succeeded": summary.succeeded,
            "failed": summary.failed,
            "pending": summary.pending,
            "success_rate": summary.success_rate,
            "by_label": summary.by_label,
            "details": summary.details,
        },
        "results": [build_json_report(r, tree=tree) for r in results],
    }


def format_text_report(
    result: ReplayResult,
    tree: Optional[Branch] = None,
    *,
    max_rows: int = 50,
    title: Optional[str] = None,
) -> str:
    """
    Build a human-friendly text report with:
      - header + outcome + label (or the full unmatched trace),
      - delivery timing,
      - the step table (first max_rows).
    """
    lines: List[str] = []
    hdr = title or (f"tracewalk replay: {result.source}" if result.source else "tracewalk replay")
    lines.append("=" * 80)
    lines.append(hdr)
    lines.append("=" * 80)
    lines.append(f"Outcome:  {result.outcome}")
    if result.label is not None:
        lines.append(f"Label:    {result.label}")
    if result.failure_trace is not None:
        lines.append(f"Unmatched trace: {list(result.failure_trace)}")
    if result.outcome == "pending":
        lines.append(f"Waiting for one of: {', '.join(result.expected) or '(nothing)'}")
    lines.append(f"Delivered: {result.delivered}"
                 + (f" at t={result.delivered_at:.3f}" if result.delivered_at is not None else ""))
    if result.ignored:
        lines.append(f"Ignored events: {result.ignored}")

    lines.append("")
    lines.append("Steps:")
    lines.append(format_step_table(build_step_rows(result.trace, tree), max_rows=max_rows))
    lines.append("=" * 80)
    return "\n".join(lines)


def format_summary(summary: OutcomeSummary) -> str:
    lines: List[str] = []
    lines.append(f"Replayed: {summary.total}  succeeded={summary.succeeded}  "
                 f"failed={summary.failed}  pending={summary.pending}")
    lines.append(f"Success rate: {summary.success_rate:.3f}")
    if summary.by_label:
        lines.append("By label:")
        for label, n in summary.by_label.items():
            lines.append(f"  · {label}: {n}")
    d = summary.details or {}
    depth = d.get("divergence_depth") or {}
    if depth.get("mean") is not None:
        lines.append(f"Divergence depth: mean={depth['mean']:.2f}, max={depth['max']:.0f}")
    for name, n in (d.get("divergence_points") or {}).items():
        lines.append(f"  · diverged at {name}: {n}")
    lat = d.get("latency") or {}
    if lat.get("mean") is not None:
        lines.append(f"Delivery latency: mean={lat['mean']:.3f}s, max={lat['max']:.3f}s")
    return "\n".join(lines)
