from __future__ import annotations
from typing import Any, Dict, Tuple
import json
from pathlib import Path

from tracewalk.core.event import EventLog
from tracewalk.core.evaluator import Evaluator, ReplayRequest
from tracewalk.core.policies import (
    AcceptAll,
    AfterTerminal,
    DelayedFailure,
    ExactOrigin,
    FailurePolicy,
    ImmediateFailure,
    OriginFilter,
)
from tracewalk.core.tree import Branch, build_tree
from tracewalk.core.walker import WalkerConfig
from tracewalk.io.json_io import load_tree
from tracewalk.scenarios import BUILTIN_TREES, get_builtin_tree

def load_config(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        text = f.read()
    suffix = p.suffix.lower()
    if suffix in (".yaml", ".yml"):
        try:
            import yaml  # type: ignore
        except Exception as e:
            raise ImportError("PyYAML is required to load YAML config files. Install with `pip install pyyaml`.") from e
        return yaml.safe_load(text) or {}
    # default to JSON
    return json.loads(text or "{}")

def _make_failure_policy(spec: Dict[str, Any] | str | None) -> FailurePolicy:
    if not spec:
        return ImmediateFailure()
    if isinstance(spec, str):
        spec = {"type": spec}
    t = str(spec.get("type", "immediate")).lower()
    if t in ("immediate", "now"):
        return ImmediateFailure()
    if t in ("delayed", "deferred", "grace"):
        if "window_ms" in spec:
            return DelayedFailure(window=float(spec["window_ms"]) / 1000.0)
        return DelayedFailure(window=float(spec.get("window", 0.5)))
    raise ValueError(f"Unknown failure policy type: {t!r}")

def _make_origin_filter(spec: Dict[str, Any] | str | None) -> OriginFilter:
    if not spec:
        return AcceptAll()
    if isinstance(spec, str):
        return ExactOrigin(spec)
    t = str(spec.get("type", "exact")).lower()
    if t in ("none", "any", "all"):
        return AcceptAll()
    if t in ("exact", "equals", "eq"):
        if "origin" not in spec:
            raise ValueError("Exact origin filter needs an 'origin' value")
        return ExactOrigin(str(spec["origin"]))
    raise ValueError(f"Unknown origin filter type: {t!r}")

def _make_after_terminal(spec: str | None) -> AfterTerminal:
    if not spec:
        return AfterTerminal.IGNORE
    try:
        return AfterTerminal(str(spec).lower())
    except ValueError:
        raise ValueError(f"Unknown after_terminal policy: {spec!r}") from None

def resolve_tree(spec: Any, base_dir: str | Path | None = None) -> Branch:
    """
    Resolve a tree spec: a built-in tree name, a path to a JSON/YAML tree file
    (relative paths resolved against base_dir), or an inline nested mapping.
    """
    if spec is None:
        return get_builtin_tree("script_loader")
    if isinstance(spec, Branch):
        return spec
    if isinstance(spec, dict):
        return build_tree(spec)
    name = str(spec)
    if name in BUILTIN_TREES:
        return BUILTIN_TREES[name]
    p = Path(name)
    if base_dir is not None and not p.is_absolute():
        p = Path(base_dir) / p
    return load_tree(p)

def build_walker_config(cfg: Dict[str, Any]) -> WalkerConfig:
    return WalkerConfig(
        failure_policy=_make_failure_policy(cfg.get("failure_policy")),
        origin_filter=_make_origin_filter(cfg.get("origin_filter")),
        after_terminal=_make_after_terminal(cfg.get("after_terminal")),
    )

def build_from_config(log: EventLog, cfg: Dict[str, Any], base_dir: str | Path | None = None) -> Tuple[Evaluator, ReplayRequest]:
    config = build_walker_config(cfg)
    tree = resolve_tree(cfg.get("tree"), base_dir=base_dir)
    aliases = cfg.get("aliases") or {}
    evaluator = Evaluator(config=config)
    req = ReplayRequest(
        log=log,
        tree=tree,
        config=config,
        alias_map={str(k): str(v) for k, v in aliases.items()} or None,
        flush_at_end=bool(cfg.get("flush_at_end", False)),
    )
    return evaluator, req
