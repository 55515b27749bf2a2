from .json_io import load_log, save_log, load_tree, save_tree, save_json
from .config_loader import load_config, resolve_tree, build_walker_config, build_from_config

__all__ = [
    "load_log",
    "save_log",
    "load_tree",
    "save_tree",
    "save_json",
    "load_config",
    "resolve_tree",
    "build_walker_config",
    "build_from_config",
]
