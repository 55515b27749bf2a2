from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Set, Tuple, Union

from tracewalk.core.errors import TreeError


@dataclass(frozen=True)
class Leaf:
    label: str


@dataclass(frozen=True)
class Branch:
    children: Mapping[str, "Node"]

    def __post_init__(self) -> None:
        # Freeze the mapping so a built tree cannot be edited during a walk
        if not isinstance(self.children, MappingProxyType):
            object.__setattr__(self, "children", MappingProxyType(dict(self.children)))

    def __contains__(self, name: object) -> bool:
        return name in self.children

    def names(self) -> List[str]:
        return list(self.children)


class _NotFound:
    _instance = None

    def __new__(cls) -> "_NotFound":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NotFound"

    def __bool__(self) -> bool:
        return False


NotFound = _NotFound()

Node = Union[Branch, Leaf]
ChildResult = Union[Branch, Leaf, _NotFound]


def lookup(node: Node, event_name: str) -> ChildResult:
    """
    Return the child of ``node`` reached by ``event_name``.

    Only a Branch can be queried; asking a Leaf is a caller error since a settled
    walk has no further transitions.
    """
    if not isinstance(node, Branch):
        raise TreeError(f"cannot look up {event_name!r} below a leaf")
    return node.children.get(event_name, NotFound)


def _label_of(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return value


def _build(value: Any, path: Tuple[str, ...]) -> Node:
    if isinstance(value, (Branch, Leaf)):
        return value
    if isinstance(value, (str, Enum)):
        label = _label_of(value)
        if not isinstance(label, str) or not label:
            raise TreeError(f"leaf at {list(path)!r} must be a non-empty string label")
        return Leaf(label)
    if isinstance(value, Mapping):
        if not value:
            raise TreeError(f"branch at {list(path)!r} has no transitions")
        children: Dict[str, Node] = {}
        for key, child in value.items():
            if not isinstance(key, str) or not key:
                raise TreeError(f"event name {key!r} at {list(path)!r} must be a non-empty string")
            children[key] = _build(child, path + (key,))
        return Branch(children)
    raise TreeError(f"unsupported node {value!r} at {list(path)!r}; expected a mapping or a label")


def build_tree(spec: Mapping[str, Any]) -> Branch:
    """
    Build an immutable transition tree from nested mappings.

    Mapping values are either further mappings (more transitions) or terminal labels
    (strings or str-valued enums). The root must be a mapping.
    """
    if isinstance(spec, Branch):
        return spec
    if not isinstance(spec, Mapping):
        raise TreeError("the root of a transition tree must be a mapping of event names")
    root = _build(spec, ())
    assert isinstance(root, Branch)
    return root


def iter_paths(node: Node, prefix: Tuple[str, ...] = ()) -> Iterator[Tuple[Tuple[str, ...], str]]:
    """Yield every (event-name path, terminal label) pair in declaration order."""
    if isinstance(node, Leaf):
        yield prefix, node.label
        return
    for name, child in node.children.items():
        yield from iter_paths(child, prefix + (name,))


def labels(node: Node) -> Set[str]:
    return {label for _, label in iter_paths(node)}


def vocabulary(node: Node) -> Set[str]:
    """All event names appearing anywhere in the tree."""
    names: Set[str] = set()
    for path, _ in iter_paths(node):
        names.update(path)
    return names


def tree_to_dict(node: Node) -> Union[Dict[str, Any], str]:
    if isinstance(node, Leaf):
        return node.label
    return {name: tree_to_dict(child) for name, child in node.children.items()}
