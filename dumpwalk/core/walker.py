"""
TreeRenderer — Depth-first rendering of a value as an indented text tree

Output format (indent "  "):
    Root object Order
      -> <publ> id = (integer) 7
      -> <publ> lines = array (2)
        [0] => (string) 'apple'
        [1] => (string) 'pear'
      -> <prot> _owner = object Customer
        -> <publ> name = (string) 'Ada'
        -> <publ> last_order = object Order
          (...)
      -> <priv:stat> __count = (integer) 3

Every recursive frame guards its own body: a failure anywhere below a node
keeps the text rendered so far and appends a single
"dump_walk() error: <message>" line in place of the rest of that subtree.
"""

import logging
from typing import Any, Optional, TYPE_CHECKING

from ..errors import RenderFault, fault_message, format_fault
from .classifier import ChildClassifier, default_classifier
from .members import iter_members
from .nodes import (
    DEFAULT_INDENT, NodeKind, RenderContext,
    format_key, format_scalar, iter_entries, node_kind, type_name,
)

if TYPE_CHECKING:
    from ..config import Config


logger = logging.getLogger(__name__)

# Deepest nesting level rendered before the walk gives up on a subtree
MAX_DEPTH = 200

CYCLE_MARKER = "(...)"


def root_header(value: Any, kind: NodeKind) -> str:
    """
    One-line description of the root value.

    Leaf roots have no trailing newline since nothing follows them.
    """
    if kind is NodeKind.SEQUENCE:
        return f"Root array({len(value)})\n"
    if kind is NodeKind.COMPOSITE:
        return f"Root object {type(value).__name__}\n"
    return f"Root ({type_name(value)}) {format_scalar(value)}"


def inline_value(display_value: Any) -> str:
    """Text appended after a non-branching child's label (with leading space)."""
    if node_kind(display_value) is not NodeKind.LEAF:
        # Non-branching object or row: the label says it all
        return ""
    return f" {format_scalar(display_value)}"


class TreeRenderer:
    """
    Render any value as an indented tree.

    Sequences list their entries as "[key] => ...", objects list their
    members as "-> <tag> name = ...". Objects and containers already expanded
    on the current path render as "(...)".
    """

    def __init__(
        self,
        indent_unit: str = DEFAULT_INDENT,
        classifier: ChildClassifier = None,
        max_depth: int = MAX_DEPTH
    ):
        """
        Initialize renderer.

        Args:
            indent_unit: String repeated once per nesting level
            classifier: ChildClassifier (shared default if None)
            max_depth: Deepest level expanded before reporting an error
        """
        self.indent_unit = indent_unit
        self.classifier = classifier or default_classifier
        self.max_depth = max_depth

    @classmethod
    def from_config(cls, config: "Config") -> "TreeRenderer":
        """Build a renderer from the display section of a Config."""
        display = config.display
        return cls(
            indent_unit=display.indent,
            classifier=ChildClassifier(reference_zone=display.timezone),
            max_depth=display.max_depth,
        )

    def render(self, value: Any) -> str:
        """
        Render value as a text tree. Never raises.

        Args:
            value: Any Python value

        Returns:
            The dump, with error lines in place of subtrees that failed
        """
        return self._walk(value, RenderContext(indent_unit=self.indent_unit))

    def _walk(self, node: Any, ctx: RenderContext) -> str:
        out = []
        try:
            kind = node_kind(node)

            if ctx.is_root:
                out.append(root_header(node, kind))
                ctx = ctx.deeper()

            if ctx.depth > self.max_depth:
                raise RenderFault(f"maximum depth of {self.max_depth} exceeded")

            if kind is NodeKind.LEAF:
                return "".join(out)

            if ctx.has_seen(node):
                out.append(f"{ctx.pad}{CYCLE_MARKER}\n")
                return "".join(out)
            ctx = ctx.mark(node)

            if kind is NodeKind.SEQUENCE:
                for key, child in iter_entries(node):
                    prefix = f"{ctx.pad}{format_key(key)} => "
                    out.append(self._render_child(prefix, child, ctx, kind))
            else:
                for member in iter_members(node):
                    prefix = f"{ctx.pad}-> <{member.tag}> {member.name} = "
                    out.append(self._render_child(prefix, member.value, ctx, kind))

            return "".join(out)
        except Exception as exc:
            logger.debug("walk failed at depth %d on %s: %s", ctx.depth, type(node).__name__, fault_message(exc))
            out.append(format_fault(exc))
            return "".join(out)

    def _render_child(self, prefix: str, child: Any, ctx: RenderContext, kind: NodeKind) -> str:
        label, display_value, is_branch = self.classifier.classify(child)
        if is_branch:
            return f"{prefix}{label}\n" + self._walk(display_value, ctx.descend(kind))
        return f"{prefix}{label}{inline_value(display_value)}\n"


def dump_walk(node: Any, indent_string: str = DEFAULT_INDENT, renderer: Optional[TreeRenderer] = None) -> str:
    """
    Render node as an indented tree, like a cleaner repr() for nested data.

    Args:
        node: Any Python value
        indent_string: String repeated once per nesting level
        renderer: Preconfigured TreeRenderer (indent_string ignored if given)

    Returns:
        Multi-line dump text
    """
    if renderer is None:
        renderer = TreeRenderer(indent_unit=indent_string)
    return renderer.render(node)
