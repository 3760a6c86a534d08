"""
Errors — The single fault kind raised while walking a value

A RenderFault never escapes dump_walk(). Each recursive frame catches it
(along with any other exception raised by user objects) and replaces the
rest of its subtree with an ERROR_PREFIX line.
"""

ERROR_PREFIX = "dump_walk() error: "


class RenderFault(Exception):
    """Raised when a value cannot be inspected, classified or descended into."""


def fault_message(exc: BaseException) -> str:
    """str(exc), or the exception's type name when str() itself fails."""
    try:
        return str(exc)
    except Exception:
        return type(exc).__name__


def format_fault(exc: BaseException) -> str:
    """Format an exception as the inline error line shown in a dump."""
    return f"{ERROR_PREFIX}{fault_message(exc)}\n"
