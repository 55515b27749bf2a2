"""
Built-in transition trees.

SCRIPT_LOADER_TREE covers the events a script loader with a bytecode cache fires for a
single script element: either the source is loaded (then executed, or executed while its
bytecode is encoded and saved), or cached bytecode is loaded (then executed, or rejected
and the loader falls back to the source path).
"""
from __future__ import annotations
from enum import Enum
from typing import Dict

from tracewalk.core.tree import Branch, build_tree


class ScriptLoaderEvent(str, Enum):
    LOAD_SOURCE = "scriptloader_load_source"
    LOAD_BYTECODE = "scriptloader_load_bytecode"
    GENERATE_BYTECODE = "scriptloader_generate_bytecode"
    EXECUTE = "scriptloader_execute"
    ENCODE_AND_EXECUTE = "scriptloader_encode_and_execute"
    BYTECODE_SAVED = "scriptloader_bytecode_saved"
    BYTECODE_FAILED = "scriptloader_bytecode_failed"
    FALLBACK = "scriptloader_fallback"


class ScriptLoaderOutcome(str, Enum):
    SOURCE_EXEC = "source_exec"
    BYTECODE_SAVED = "bytecode_saved"
    BYTECODE_FAILED = "bytecode_failed"
    BYTECODE_EXEC = "bytecode_exec"
    FALLBACK_SOURCE_EXEC = "fallback_source_exec"
    FALLBACK_BYTECODE_SAVED = "fallback_bytecode_saved"
    FALLBACK_BYTECODE_FAILED = "fallback_bytecode_failed"


E = ScriptLoaderEvent
O = ScriptLoaderOutcome

SCRIPT_LOADER_TREE = build_tree({
    E.LOAD_SOURCE.value: {
        E.ENCODE_AND_EXECUTE.value: {
            E.BYTECODE_SAVED.value: O.BYTECODE_SAVED,
            E.BYTECODE_FAILED.value: O.BYTECODE_FAILED,
        },
        E.EXECUTE.value: O.SOURCE_EXEC,
    },
    E.LOAD_BYTECODE.value: {
        # Same as the root minus the bytecode path
        E.FALLBACK.value: {
            E.LOAD_SOURCE.value: {
                E.ENCODE_AND_EXECUTE.value: {
                    E.BYTECODE_SAVED.value: O.FALLBACK_BYTECODE_SAVED,
                    E.BYTECODE_FAILED.value: O.FALLBACK_BYTECODE_FAILED,
                },
                E.EXECUTE.value: O.FALLBACK_SOURCE_EXEC,
            },
        },
        E.EXECUTE.value: O.BYTECODE_EXEC,
    },
})

BUILTIN_TREES: Dict[str, Branch] = {
    "script_loader": SCRIPT_LOADER_TREE,
}


def get_builtin_tree(name: str) -> Branch:
    try:
        return BUILTIN_TREES[name]
    except KeyError:
        raise KeyError(f"unknown built-in tree {name!r}; available: {sorted(BUILTIN_TREES)}") from None
