from __future__ import annotations
import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional
from tracewalk.io.json_io import load_log, save_json
from tracewalk.io import load_config, build_walker_config, resolve_tree
from tracewalk.core.errors import TracewalkError
from tracewalk.core.evaluator import Evaluator
from tracewalk.core.metrics import summarize
from tracewalk.core.tree import iter_paths
from tracewalk.reporting import build_batch_report, build_json_report, format_summary, format_text_report
from tracewalk import __version__

logger = logging.getLogger(__name__)

def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(message)s",
        stream=sys.stderr,
    )

def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="tracewalk", description="tracewalk CLI")
    parser.add_argument("--log-level", default="warning", help="Logging level (debug, info, warning, error)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("version", help="Show tracewalk version and exit")

    p_paths = sub.add_parser("paths", help="List every known event path and its label")
    p_paths.add_argument("--tree", required=False, help="Built-in tree name or tree file (JSON/YAML)")

    p_replay = sub.add_parser("replay", help="Replay recorded event logs through a walker")
    p_replay.add_argument("--trace", required=True, action="append", help="Path to an event log JSON (repeatable)")
    p_replay.add_argument("--config", required=False, help="Path to configuration file (JSON/YAML)")
    p_replay.add_argument("--tree", required=False, help="Built-in tree name or tree file; overrides the config")
    p_replay.add_argument("--out", required=False, help="Path to write the JSON report")

    args = parser.parse_args(argv)
    _configure_logging(args.log_level)

    if args.cmd == "version":
        print(__version__)
        return 0

    if args.cmd == "paths":
        tree = resolve_tree(args.tree)
        for path, label in iter_paths(tree):
            print(f"{label}: {' -> '.join(path)}")
        return 0

    if args.cmd == "replay":
        cfg: Dict[str, Any] = {}
        base_dir = None
        try:
            if args.config:
                cfg = load_config(args.config)
                base_dir = Path(args.config).resolve().parent
            tree = resolve_tree(args.tree if args.tree else cfg.get("tree"), base_dir=None if args.tree else base_dir)
            evaluator = Evaluator(config=build_walker_config(cfg))
            logs = [load_log(p) for p in args.trace]
            results = evaluator.replay_batch(
                logs,
                tree,
                sources=list(args.trace),
                alias_map=cfg.get("aliases") or None,
                flush_at_end=bool(cfg.get("flush_at_end", False)),
            )
        except (TracewalkError, ValueError, OSError) as e:
            # TreeError and malformed JSON/config are ValueErrors; missing files are OSErrors
            logger.error("Replay aborted: %s", e)
            return 2

        if len(results) == 1:
            report: Dict[str, Any] = build_json_report(results[0], tree=tree)
            text = format_text_report(results[0], tree)
        else:
            summary = summarize(results)
            report = build_batch_report(results, summary, tree=tree)
            text = "\n".join([format_text_report(r, tree) for r in results] + [format_summary(summary)])

        if args.out:
            save_json(args.out, report)
        else:
            print(text)
        return 0 if all(r.outcome == "succeeded" for r in results) else 1

    return 0

if __name__ == "__main__":
    sys.exit(main())
