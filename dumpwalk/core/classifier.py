"""
ChildClassifier — Decide how each child value is labelled and whether it branches

For every child the walker asks for a Classification:
    (type_label, display_value, is_branch)

Branching is reserved for collections and generic objects whose structure is
worth expanding. Known leaf-like objects (dates, database handles, callables,
classes, modules, enum members) render on a single line instead.

The lookup is open: hosts register a marker (a type, or a dotted
"module.QualName" string matched against the MRO so optional libraries never
need importing) together with a strategy returning a Classification.

Usage:
    from dumpwalk.core.classifier import ChildClassifier, Classification

    classifier = ChildClassifier()
    classifier.register(Money, lambda m: Classification("object Money", f"{m.amount} {m.currency}", False))
    label, value, branch = classifier.classify(Money(3, "EUR"))
"""

import datetime as dt
import functools
import inspect
import sqlite3
import types
from enum import Enum
from typing import Any, Callable, List, NamedTuple, Optional, Tuple, Union
from zoneinfo import ZoneInfo

from ..errors import RenderFault, fault_message
from .nodes import NodeKind, node_kind, type_name


REFERENCE_ZONE = "America/Los_Angeles"


class Classification(NamedTuple):
    """Result of classifying a child value."""
    type_label: str
    display_value: Any
    is_branch: bool


Marker = Union[type, str]
Strategy = Callable[[Any], Classification]


# =============================================================================
# Built-in strategies
# =============================================================================

def object_label(value: Any) -> str:
    return f"object {type(value).__name__}"


def format_datetime(value: dt.datetime, zone: dt.tzinfo) -> str:
    """
    Format a datetime in the reference zone as 'Y-m-d h:mm:ss am TZ'.

    Naive datetimes are taken as UTC. The input is never modified.

    Example:
        2024-01-15 12:30:00+00:00 -> "2024-01-15 4:30:00 am PST"
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    local = value.astimezone(zone)
    hour = local.hour % 12 or 12
    meridiem = "am" if local.hour < 12 else "pm"
    return f"{local:%Y-%m-%d} {hour}:{local:%M:%S} {meridiem} {local.tzname()}"


def classify_plain_object(value: Any) -> Classification:
    """Leaf-like object shown with its type only (no expansion)."""
    return Classification(object_label(value), value, False)


def classify_date(value: Any) -> Classification:
    return Classification(object_label(value), value.isoformat(), False)


def classify_enum(value: Enum) -> Classification:
    return Classification(object_label(value), value.name, False)


def classify_class(value: type) -> Classification:
    return Classification(f"class {value.__qualname__}", value, False)


def classify_module(value: types.ModuleType) -> Classification:
    return Classification(f"module {value.__name__}", value, False)


def fixed_label(label: str) -> Strategy:
    """Strategy giving every member of a type family the same label."""
    def strategy(value: Any) -> Classification:
        return Classification(label, value, False)
    return strategy


def described(description: str) -> Strategy:
    """Strategy labelling a value as '<TypeName> (<description>)'."""
    def strategy(value: Any) -> Classification:
        return Classification(f"{type(value).__name__} ({description})", value, False)
    return strategy


# =============================================================================
# Callables
# =============================================================================

def is_callable_value(value: Any) -> bool:
    """Functions, lambdas, methods, builtins and partials (not classes or callable instances)."""
    return inspect.isroutine(value) or isinstance(value, functools.partial)


def _annotation_name(annotation: Any) -> str:
    if annotation is inspect.Parameter.empty:
        return ""
    if isinstance(annotation, type):
        return annotation.__name__
    return str(annotation).replace("typing.", "")


def _default_repr(default: Any) -> str:
    if isinstance(default, int) and not isinstance(default, bool):
        return str(default)
    if isinstance(default, str):
        return f'"{default}"'
    return type_name(default)


def format_parameter(param: inspect.Parameter) -> str:
    """
    Render one parameter as '<annotation> $<name>[?][ = <default>]'.

    Variadic parameters are prefixed with * or ** and count as optional.
    """
    out = f"${param.name}"
    if param.kind is inspect.Parameter.VAR_POSITIONAL:
        out = f"*{out}"
    elif param.kind is inspect.Parameter.VAR_KEYWORD:
        out = f"**{out}"
    out = f"{_annotation_name(param.annotation)} {out}".strip()

    has_default = param.default is not inspect.Parameter.empty
    variadic = param.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
    if has_default or variadic:
        out = f"{out}?"
    if has_default:
        out = f"{out} = {_default_repr(param.default)}"
    return out


def classify_callable(value: Any) -> Classification:
    try:
        signature = inspect.signature(value)
    except (TypeError, ValueError):
        return Classification("closure (?)", value, False)
    params = ", ".join(format_parameter(p) for p in signature.parameters.values())
    return Classification(f"closure ({params})", value, False)


# =============================================================================
# Classifier
# =============================================================================

def _match(entries: List[Tuple[Marker, Strategy]], value: Any) -> Optional[Strategy]:
    dotted = None
    for marker, strategy in entries:
        if isinstance(marker, str):
            if dotted is None:
                dotted = {f"{k.__module__}.{k.__qualname__}" for k in type(value).__mro__}
            if marker in dotted:
                return strategy
        elif isinstance(value, marker):
            return strategy
    return None


class ChildClassifier:
    """
    Maps child values to (type_label, display_value, is_branch).

    Priority:
        1. Sequence-like handles (sqlite3.Row) that render on one line
        2. Other collections (always branch)
        3. Registered markers, host registrations first (any non-collection value)
        4. Callables
        5. Other objects (branch)
        6. Scalars, None and text
    """

    def __init__(self, reference_zone: str = REFERENCE_ZONE):
        """
        Initialize classifier with the built-in strategies.

        Args:
            reference_zone: IANA zone that datetimes are displayed in
        """
        self.reference_zone = reference_zone
        self._zone = ZoneInfo(reference_zone)
        self._strategies: List[Tuple[Marker, Strategy]] = []
        # Checked before the collection rule: these are Sequences in Python
        self._handles: List[Tuple[Marker, Strategy]] = [
            (sqlite3.Row, fixed_label("object Row")),
        ]
        self._register_builtins()

    def _register_builtins(self):
        zone = self._zone
        builtins = [
            # Dates (datetime before date: datetime subclasses date)
            (dt.datetime, lambda v: Classification(object_label(v), format_datetime(v, zone), False)),
            (dt.date, classify_date),
            (dt.time, classify_date),
            # Database handles
            (sqlite3.Connection, classify_plain_object),
            (sqlite3.Cursor, fixed_label("object Cursor")),
            ("sqlalchemy.sql.base.Executable", described("prepared statement")),
            ("sqlalchemy.engine.base.Engine", described("database handle")),
            ("sqlalchemy.engine.base.Connection", described("database handle")),
            # Other single-line objects
            (Enum, classify_enum),
            (type, classify_class),
            (types.ModuleType, classify_module),
        ]
        for marker, strategy in builtins:
            self.register(marker, strategy, first=False)

    def register(self, marker: Marker, strategy: Strategy, first: bool = True):
        """
        Register a rendering strategy for a type family.

        Args:
            marker: Type (isinstance match) or dotted "module.QualName"
                    string matched against every class in the value's MRO
            strategy: Callable returning a Classification
            first: If True, take precedence over existing registrations
        """
        if not isinstance(marker, (type, str)):
            raise TypeError(f"marker must be a type or dotted name, got {type(marker).__name__}")
        entry = (marker, strategy)
        if first:
            self._strategies.insert(0, entry)
        else:
            self._strategies.append(entry)

    def find_strategy(self, value: Any) -> Optional[Strategy]:
        """Return the first registered strategy matching value, if any."""
        return _match(self._handles, value) or _match(self._strategies, value)

    def classify(self, value: Any) -> Classification:
        """
        Classify a child value.

        Args:
            value: Child of a sequence or member of an object

        Returns:
            Classification(type_label, display_value, is_branch)

        Raises:
            RenderFault: If a strategy fails on this value
        """
        kind = node_kind(value)
        if kind is NodeKind.SEQUENCE:
            strategy = _match(self._handles, value)
            if strategy is None:
                return Classification(f"array ({len(value)})", value, True)
        else:
            strategy = self.find_strategy(value)

        if strategy is not None:
            try:
                return strategy(value)
            except RenderFault:
                raise
            except Exception as exc:
                raise RenderFault(f"cannot classify {type(value).__name__}: {fault_message(exc)}") from exc

        if kind is NodeKind.COMPOSITE:
            if is_callable_value(value):
                return classify_callable(value)
            return Classification(object_label(value), value, True)

        return Classification(f"({type_name(value)})", value, False)


# Shared instance used by dump_walk() and pre_dump()
default_classifier = ChildClassifier()


def classify(value: Any) -> Classification:
    """Classify a value with the shared default classifier."""
    return default_classifier.classify(value)


def register(marker: Marker, strategy: Strategy):
    """Register a strategy on the shared default classifier."""
    default_classifier.register(marker, strategy)
