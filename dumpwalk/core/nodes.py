"""
Nodes — Node kinds and per-walk render context

A value being dumped is one of three kinds:
- SEQUENCE: mappings and non-text sequences/sets (keyed or positional entries)
- COMPOSITE: any other object (named members)
- LEAF: scalars, text and None

RenderContext carries the walk state down the tree. It is frozen: descending
builds a new context, so a branch's visited identities never leak into its
siblings (cycle detection is per path, not global).
"""

import numbers
from collections.abc import Mapping, Sequence, Set
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, FrozenSet, Optional


DEFAULT_INDENT = "    "

# Text types are sequences in Python but render as leaves
TEXT_TYPES = (str, bytes, bytearray)

# Display names for scalar types; anything else uses type(value).__name__
TYPE_NAMES = {
    bool: "boolean",
    int: "integer",
    float: "float",
    str: "string",
    type(None): "NULL",
}


class NodeKind(Enum):
    """Structural kind of a value in the dump tree."""
    SEQUENCE = "sequence"
    COMPOSITE = "composite"
    LEAF = "leaf"


def node_kind(value: Any) -> NodeKind:
    """
    Classify a value's structural kind.

    Args:
        value: Any Python value

    Returns:
        NodeKind.SEQUENCE for mappings and non-text sequences/sets,
        NodeKind.LEAF for None, numbers and text, NodeKind.COMPOSITE otherwise
    """
    if isinstance(value, TEXT_TYPES):
        return NodeKind.LEAF
    if isinstance(value, (Mapping, Sequence, Set)):
        return NodeKind.SEQUENCE
    if value is None or isinstance(value, numbers.Number):
        return NodeKind.LEAF
    return NodeKind.COMPOSITE


def type_name(value: Any) -> str:
    """Runtime type name used in leaf labels, e.g. 'integer' or 'string'."""
    return TYPE_NAMES.get(type(value), type(value).__name__)


def iter_entries(node: Any):
    """Yield (key, child) pairs of a SEQUENCE node in iteration order."""
    if isinstance(node, Mapping):
        yield from node.items()
    else:
        yield from enumerate(node)


def format_key(key: Any) -> str:
    """Key marker for a sequence entry: [0] for integers, ['name'] otherwise."""
    if isinstance(key, int) and not isinstance(key, bool):
        return f"[{key}]"
    return f"['{key}']"


def format_scalar(value: Any) -> str:
    """
    Inline text for a leaf value.

    Text is single-quoted, booleans are true/false, None is NULL,
    everything else uses str().
    """
    if isinstance(value, str):
        return f"'{value}'"
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "NULL"
    return str(value)


@dataclass(frozen=True)
class RenderContext:
    """
    Walk state for one recursive frame.

    Attributes:
        indent_unit: String repeated once per depth level
        depth: Current nesting level (root children are at depth 1)
        parent_kind: Kind of the enclosing node, None at the root
        visited: Identities of nodes already expanded on this path
    """
    indent_unit: str = DEFAULT_INDENT
    depth: int = 0
    parent_kind: Optional[NodeKind] = None
    visited: FrozenSet[int] = field(default_factory=frozenset)

    @property
    def is_root(self) -> bool:
        return self.parent_kind is None

    @property
    def pad(self) -> str:
        """Indentation for lines emitted at this depth."""
        return self.indent_unit * self.depth

    def deeper(self) -> "RenderContext":
        """Same frame, one level deeper (used after the root header)."""
        return replace(self, depth=self.depth + 1)

    def descend(self, kind: NodeKind) -> "RenderContext":
        """Context for a child branch of a node of the given kind."""
        return replace(self, depth=self.depth + 1, parent_kind=kind)

    def has_seen(self, node: Any) -> bool:
        return id(node) in self.visited

    def mark(self, node: Any) -> "RenderContext":
        """Copy of this context with node recorded as visited."""
        return replace(self, visited=self.visited | {id(node)})
