from __future__ import annotations
import json
from typing import Any, Dict
from pathlib import Path
from tracewalk.core.event import EventLog
from tracewalk.core.tree import Branch, build_tree, tree_to_dict

def save_log(path: str | Path, log: EventLog) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        json.dump(log.to_dict(), f, ensure_ascii=False, indent=2)

def load_log(path: str | Path) -> EventLog:
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict) and "events" in data:
        return EventLog.from_dict(data)
    if isinstance(data, list):
        return EventLog.from_dict({"events": data, "schema_version": "1"})
    raise ValueError("Unrecognized event log JSON format")

def load_tree(path: str | Path) -> Branch:
    p = Path(path)
    with p.open("r", encoding="utf-8") as f:
        text = f.read()
    if p.suffix.lower() in (".yaml", ".yml"):
        try:
            import yaml  # type: ignore
        except Exception as e:
            raise ImportError("PyYAML is required to load YAML tree files. Install with `pip install pyyaml`.") from e
        data = yaml.safe_load(text)
    else:
        data = json.loads(text)
    return build_tree(data)

def save_tree(path: str | Path, tree: Branch) -> None:
    save_json(path, tree_to_dict(tree))  # type: ignore[arg-type]

def save_json(path: str | Path, obj: Dict[str, Any]) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        json.dump(obj, f, ensure_ascii=False, indent=2)
