"""
Presentation — Output surfaces around the core tree renderer

- HTML: pre_dump() for embedding dumps in a page
- Output: encoding-safe printing for the CLI
"""

from .html import pre_dump, wrap_html, HTML_OPEN, HTML_CLOSE
from .output import safe_print

__all__ = [
    "pre_dump", "wrap_html", "HTML_OPEN", "HTML_CLOSE",
    "safe_print",
]
