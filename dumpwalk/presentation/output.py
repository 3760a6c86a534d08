"""
Output — Encoding-safe printing for the CLI

Config values and project paths may hold any text. Printing them to a
console with a narrow encoding (cp1252, ascii) degrades to '?' instead of
raising.
"""

import sys


def safe_print(text: str, file=None) -> None:
    """
    Print text, replacing characters the stream cannot encode.

    Args:
        text: Text to print
        file: Output stream (default: sys.stdout)
    """
    if file is None:
        file = sys.stdout

    try:
        print(text, file=file)
    except UnicodeEncodeError:
        encoding = getattr(file, 'encoding', None) or 'utf-8'
        print(text.encode(encoding, errors='replace').decode(encoding), file=file)
