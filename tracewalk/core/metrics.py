from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from tracewalk.core.evaluator import ReplayResult
import numpy as np

@dataclass
class OutcomeSummary:
    total: int
    succeeded: int
    failed: int
    pending: int
    success_rate: float
    by_label: Dict[str, int] = field(default_factory=dict)
    details: Dict[str, Any] = field(default_factory=dict)

def _stats(values: List[float]) -> Dict[str, Optional[float]]:
    if not values:
        return {"mean": None, "min": None, "max": None}
    arr = np.asarray(values, dtype=float)
    return {"mean": float(arr.mean()), "min": float(arr.min()), "max": float(arr.max())}

def summarize(results: List[ReplayResult]) -> OutcomeSummary:
    """
    Aggregate a batch of replay results.

    details carries:
      - divergence_depth: stats over the failure trace lengths (the step at which each
        failed log left the tree);
      - trace_length: stats over all observed trace lengths;
      - latency: stats over delivery time minus the time of the last walked event,
        i.e. how long observers waited after the decisive event;
      - divergence_points: count of failures by the diverging event name.
    """
    by_label: Dict[str, int] = {}
    succeeded = failed = pending = 0
    depths: List[float] = []
    lengths: List[float] = []
    divergence_points: Dict[str, int] = {}

    for r in results:
        lengths.append(float(len(r.trace)))
        if r.outcome == "succeeded":
            succeeded += 1
            by_label[r.label] = by_label.get(r.label, 0) + 1
        elif r.outcome == "failed":
            failed += 1
            ft = r.failure_trace or ()
            depths.append(float(len(ft)))
            if ft:
                divergence_points[ft[-1]] = divergence_points.get(ft[-1], 0) + 1
        else:
            pending += 1

    total = len(results)
    settled = np.array([r.outcome != "pending" for r in results], dtype=bool)
    delivered = np.array([r.delivered for r in results], dtype=bool)
    latencies = [
        float(r.delivered_at) - float(r.decided_at)
        for r in results
        if r.delivered_at is not None and r.decided_at is not None
    ]

    return OutcomeSummary(
        total=total,
        succeeded=succeeded,
        failed=failed,
        pending=pending,
        success_rate=(succeeded / total) if total else 0.0,
        by_label=dict(sorted(by_label.items())),
        details={
            "divergence_depth": _stats(depths),
            "trace_length": _stats(lengths),
            "settled_rate": float(settled.mean()) if total else 0.0,
            "delivered_rate": float(delivered.mean()) if total else 0.0,
            "latency": _stats(latencies),
            "divergence_points": dict(sorted(divergence_points.items())),
        },
    )
