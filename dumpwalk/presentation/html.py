"""
HTML — Embed a dump in an HTML page

pre_dump() escapes every HTML-significant character (< > & " ') so the dump
text can never inject markup, then wraps it in a bordered <pre> block.
"""

import html
from typing import Any

from ..core.walker import TreeRenderer, dump_walk


HTML_OPEN = "<div style='background: white;border:3px grey solid;'><div></div><pre>"
HTML_CLOSE = "</pre></div>"


def wrap_html(text: str) -> str:
    """Escape text and wrap it in the dump container markup."""
    return f"{HTML_OPEN}{html.escape(text, quote=True)}{HTML_CLOSE}"


def pre_dump(node: Any, renderer: TreeRenderer = None) -> str:
    """
    Render node with dump_walk() as an HTML fragment.

    Args:
        node: Any Python value
        renderer: Preconfigured TreeRenderer (default indent if None)

    Returns:
        '<div ...><div></div><pre>escaped dump</pre></div>'
    """
    return wrap_html(dump_walk(node, renderer=renderer))
