"""
dumpwalk — Readable tree dumps of Python values

Like repr() for nested data, but labelled and indented:
types, container sizes, member visibility and class-level members are shown,
and cyclic object graphs print "(...)" instead of recursing forever.

Usage:
    from dumpwalk import dump_walk, pre_dump

    print(dump_walk({"a": 1, "b": [2, 3]}, "  "))
    # Root array(2)
    #   ['a'] => (integer) 1
    #   ['b'] => array (2)
    #     [0] => (integer) 2
    #     [1] => (integer) 3

    html = pre_dump(order)        # escaped, wrapped in <pre>
    log_dump("order state", order, logger)
"""

__version__ = "1.0.1"

# Core layer
from .core.nodes import NodeKind, RenderContext, node_kind, DEFAULT_INDENT
from .core.members import Member, Visibility, iter_members
from .core.classifier import ChildClassifier, Classification, classify, register
from .core.walker import TreeRenderer, dump_walk, MAX_DEPTH

# Errors
from .errors import RenderFault, ERROR_PREFIX

# Presentation layer
from .presentation.html import pre_dump

# Ambient
from .logging import configure_logging, log_dump
from .config import Config, ConfigManager, DisplayConfig, LoggingConfig, get_config

__all__ = [
    # Core
    'NodeKind', 'RenderContext', 'node_kind', 'DEFAULT_INDENT',
    'Member', 'Visibility', 'iter_members',
    'ChildClassifier', 'Classification', 'classify', 'register',
    'TreeRenderer', 'dump_walk', 'MAX_DEPTH',
    # Errors
    'RenderFault', 'ERROR_PREFIX',
    # Presentation
    'pre_dump',
    # Ambient
    'configure_logging', 'log_dump',
    'Config', 'ConfigManager', 'DisplayConfig', 'LoggingConfig', 'get_config',
]
