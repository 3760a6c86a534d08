"""
Members — Enumerate the named members of an object

Python has no declared accessibility, so visibility follows naming:
- _Cls__name (name-mangled)  -> priv, shown as __name
- _name                      -> prot
- name                       -> publ

Members come from, in order:
1. __dump_members__() if the type defines it (explicit capability interface)
2. Instance attributes (vars(obj))
3. __slots__ values along the MRO
4. Class-level data attributes of user-defined classes (static members)
"""

import inspect
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, List, Set

from ..errors import RenderFault, fault_message


# Set by ABCMeta on every abstract class; not user data
IGNORED_CLASS_ATTRS = {"_abc_impl"}

# Py_TPFLAGS_HEAPTYPE: set for classes defined in Python code
_HEAPTYPE_FLAG = 1 << 9


class Visibility(Enum):
    """Accessibility tag shown for each member."""
    PRIVATE = "priv"
    PUBLIC = "publ"
    PROTECTED = "prot"


@dataclass(frozen=True)
class Member:
    """
    One named member of a composite value.

    Attributes:
        name: Display name (unmangled)
        value: Current value
        visibility: Accessibility tag
        is_static: True for class-level members
    """
    name: str
    value: Any
    visibility: Visibility = Visibility.PUBLIC
    is_static: bool = False

    @property
    def tag(self) -> str:
        """Tag rendered between angle brackets, e.g. 'prot:stat'."""
        return self.visibility.value + (":stat" if self.is_static else "")


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def _mangle_prefixes(cls: type) -> List[str]:
    """Name-mangling prefixes ('_Cls__') for every class in the MRO."""
    prefixes = []
    for klass in cls.__mro__:
        stripped = klass.__name__.lstrip("_")
        if stripped:
            prefixes.append(f"_{stripped}__")
    return prefixes


def split_name(name: str, prefixes: List[str]):
    """
    Resolve an attribute name into (display name, visibility).

    Args:
        name: Attribute name as stored on the object
        prefixes: Mangling prefixes from _mangle_prefixes()

    Returns:
        Tuple of (display_name, Visibility)
    """
    for prefix in prefixes:
        if name.startswith(prefix) and len(name) > len(prefix):
            return "__" + name[len(prefix):], Visibility.PRIVATE
    if _is_dunder(name):
        return name, Visibility.PUBLIC
    if name.startswith("__"):
        return name, Visibility.PRIVATE
    if name.startswith("_"):
        return name, Visibility.PROTECTED
    return name, Visibility.PUBLIC


def _is_user_class(cls: type) -> bool:
    return cls is not object and bool(cls.__flags__ & _HEAPTYPE_FLAG)


def _is_data_attribute(value: Any) -> bool:
    """True for plain class-level data (not methods, descriptors or classes)."""
    if isinstance(value, (type, property, classmethod, staticmethod)):
        return False
    if inspect.isroutine(value):
        return False
    if inspect.isdatadescriptor(value) or inspect.ismethoddescriptor(value):
        return False
    return True


def _slot_names(cls: type) -> Iterator[tuple]:
    """Yield (owner class, slot name) for every declared slot along the MRO."""
    for klass in reversed(cls.__mro__):
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for slot in slots:
            if slot in ("__dict__", "__weakref__"):
                continue
            yield klass, slot


def _custom_members(obj: Any) -> Iterator[Member]:
    try:
        members = list(obj.__dump_members__())
    except Exception as exc:
        raise RenderFault(f"__dump_members__() failed on {type(obj).__name__}: {fault_message(exc)}") from exc
    for member in members:
        if not isinstance(member, Member):
            raise RenderFault(
                f"__dump_members__() of {type(obj).__name__} returned "
                f"{type(member).__name__}, expected Member"
            )
        yield member


def iter_members(obj: Any) -> Iterator[Member]:
    """
    Enumerate the members of an object.

    Args:
        obj: Any composite value

    Yields:
        Member for each instance attribute, slot and class-level attribute

    Raises:
        RenderFault: If a member cannot be read
    """
    cls = type(obj)
    if hasattr(cls, "__dump_members__"):
        yield from _custom_members(obj)
        return

    prefixes = _mangle_prefixes(cls)
    seen: Set[str] = set()

    # Instance attributes
    try:
        instance_vars = dict(vars(obj))
    except TypeError:
        instance_vars = {}
    for raw_name, value in instance_vars.items():
        seen.add(raw_name)
        name, visibility = split_name(raw_name, prefixes)
        yield Member(name, value, visibility)

    # Slots
    for owner, slot in _slot_names(cls):
        raw_name = slot
        if slot.startswith("__") and not slot.endswith("__"):
            raw_name = f"_{owner.__name__.lstrip('_')}{slot}"
        if raw_name in seen:
            continue
        seen.add(raw_name)
        try:
            value = getattr(obj, raw_name)
        except AttributeError:
            continue  # slot never assigned
        except Exception as exc:
            raise RenderFault(f"cannot read member '{slot}' of {cls.__name__}: {fault_message(exc)}") from exc
        name, visibility = split_name(raw_name, prefixes)
        yield Member(name, value, visibility)

    # Class-level (static) attributes
    for klass in cls.__mro__:
        if not _is_user_class(klass):
            continue
        for raw_name, value in list(klass.__dict__.items()):
            if raw_name in seen or _is_dunder(raw_name) or raw_name in IGNORED_CLASS_ATTRS:
                continue
            if not _is_data_attribute(value):
                continue
            seen.add(raw_name)
            name, visibility = split_name(raw_name, prefixes)
            yield Member(name, value, visibility, is_static=True)
