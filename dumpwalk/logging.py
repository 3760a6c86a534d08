"""
Logging — Logger setup and dump-to-log helper

Library modules log through logging.getLogger(__name__) and never configure
handlers themselves; applications (and the CLI) call configure_logging().
"""

import logging
from typing import Any, Optional

from .core.nodes import DEFAULT_INDENT
from .core.walker import dump_walk


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def configure_logging(level: int = logging.WARNING):
    """Attach a stream handler to the dumpwalk logger (idempotent)."""
    logger = logging.getLogger("dumpwalk")
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)


def log_dump(
    label: str,
    node: Any,
    logger: Optional[logging.Logger] = None,
    indent_string: str = DEFAULT_INDENT
) -> None:
    """
    Write label followed by the dump of node at DEBUG level.

    Nothing is rendered when the logger is not enabled for DEBUG.

    Args:
        label: Text logged before the dump
        node: Any Python value
        logger: Logger to use (default: root logger)
        indent_string: Indent unit for the dump
    """
    log = logger or logging.getLogger()
    if not log.isEnabledFor(logging.DEBUG):
        return
    log.debug("%s\n%s", label, dump_walk(node, indent_string))
