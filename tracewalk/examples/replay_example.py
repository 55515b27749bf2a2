"""
Replay the recorded script-loader logs shipped with the package and print reports.
"""
from pathlib import Path
import tracewalk
from tracewalk.io import load_config, build_walker_config, load_log
from tracewalk.core import Evaluator, summarize
from tracewalk.scenarios import SCRIPT_LOADER_TREE
from tracewalk.reporting import format_summary, format_text_report


def main() -> None:
    pkg_dir = Path(tracewalk.__file__).resolve().parent
    traces_dir = pkg_dir / "examples" / "traces"
    cfg = load_config(traces_dir / "config.yaml")

    paths = sorted(traces_dir.glob("*.json"))
    logs = [load_log(p) for p in paths]

    ev = Evaluator(config=build_walker_config(cfg))
    results = ev.replay_batch(logs, SCRIPT_LOADER_TREE, sources=[p.name for p in paths])

    for res in results:
        print(format_text_report(res, SCRIPT_LOADER_TREE, max_rows=20))
    print(format_summary(summarize(results)))


if __name__ == "__main__":
    main()
