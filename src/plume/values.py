"""Plume value model.

Templates read plain Python objects. Every object a template can see is
classified into one of five kinds, and each lookup or partial-resolution site
handles all of them explicitly:

    ABSENT    None
    SCALAR    str, numbers, bool, anything without a more specific kind
    LIST      list, tuple, other non-string sequences
    MAP       any Mapping (dict, ChainMap scopes, ...)
    CALLABLE  functions and other callables

Truthiness differs from Python's: ``0`` is truthy, only absent values,
``False``, empty strings and empty containers are falsy.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any


class ValueKind(Enum):
    """Tag of the value union."""

    ABSENT = "absent"
    SCALAR = "scalar"
    LIST = "list"
    MAP = "map"
    CALLABLE = "callable"


_TEXT_TYPES = (str, bytes, bytearray)


def kind_of(value: Any) -> ValueKind:
    """Classify a Python object as a template value."""
    if value is None:
        return ValueKind.ABSENT
    if isinstance(value, _TEXT_TYPES):
        return ValueKind.SCALAR
    if isinstance(value, Mapping):
        return ValueKind.MAP
    if isinstance(value, Sequence):
        return ValueKind.LIST
    if callable(value):
        return ValueKind.CALLABLE
    return ValueKind.SCALAR


def is_truthy(value: Any) -> bool:
    """Template truthiness.

    Example:
        >>> [is_truthy(v) for v in (None, False, "", [], {}, 0, "0", [None])]
        [False, False, False, False, False, True, True, True]
    """
    kind = kind_of(value)
    if kind is ValueKind.ABSENT:
        return False
    if kind is ValueKind.SCALAR:
        if isinstance(value, _TEXT_TYPES):
            return len(value) > 0
        return value is not False
    if kind is ValueKind.LIST or kind is ValueKind.MAP:
        return len(value) > 0
    return True


def to_text(value: Any) -> str:
    """Coerce a value to output text.

    Lists concatenate their elements, which lets a callable or registry entry
    return a list of rendered fragments. Bytes are decoded as UTF-8 with
    undecodable sequences replaced by U+FFFD.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")
    if kind_of(value) is ValueKind.LIST:
        return "".join(to_text(item) for item in value)
    return str(value)
