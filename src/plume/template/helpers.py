"""Pure runtime helpers used by the compiled renderer.

These functions implement variable lookup and scope handling. None of them
keep state; they are safe for concurrent use.

Scopes:
    A scope is a Map (usually a dict, or a ChainMap inside sections) or a
    List read positionally through the compile-time VariableIndex. Inside a
    section, a Map element is layered over the enclosing scope so names the
    element does not define fall back to outer scopes:

        >>> scope, _ = bind_child_scope({"name": "a"}, {"name": "x", "site": "s"})
        >>> scope["name"], scope["site"]
        ('a', 's')

"""

from __future__ import annotations

from collections import ChainMap
from collections.abc import Iterator
from typing import Any

from plume.exceptions import ErrorCode, InvalidArgumentError
from plume.values import ValueKind, kind_of


def lookup(scope: Any, name: str, index: int) -> Any:
    """Read a variable from a scope.

    List scopes are read by position, Map scopes by name. Any other scope,
    and any miss, yields None (absent).
    """
    kind = kind_of(scope)
    if kind is ValueKind.LIST:
        return scope[index] if index < len(scope) else None
    if kind is ValueKind.MAP:
        return scope.get(name)
    return None


def lookup_key(scope: Any, name: str) -> Any:
    """Read a variable by name only. Used by conditionals."""
    if kind_of(scope) is ValueKind.MAP:
        return scope.get(name)
    return None


def iterate(value: Any) -> Iterator[Any]:
    """Normalize a section value into the elements to repeat over.

    Lists yield their elements; absent yields nothing; any other value is a
    single element.
    """
    kind = kind_of(value)
    if kind is ValueKind.LIST:
        return iter(value)
    if kind is ValueKind.ABSENT:
        return iter(())
    return iter((value,))


def bind_child_scope(element: Any, scope: Any, outer: Any = None) -> tuple[Any, Any]:
    """Build the scope for one section element.

    ``outer`` is the nearest Map scope above ``scope``. It carries name
    fallback across positional rows: a List scope is read by index, but the
    Maps enclosing it stay reachable for the sections nested inside it.

    Returns ``(child_scope, child_outer)``:

    - Map element: layered over the nearest Map scope
    - List element: used as-is, read positionally; the Map chain is kept
    - anything else: the nearest Map scope; a positional enclosing scope is
      dropped because the section's indices do not apply to it
    """
    if kind_of(scope) is ValueKind.MAP:
        outer = scope
    kind = kind_of(element)
    if kind is ValueKind.MAP:
        if isinstance(outer, ChainMap):
            child = outer.new_child(element)
        elif outer is not None:
            child = ChainMap(element, outer)
        else:
            child = element
        return child, child
    if kind is ValueKind.LIST:
        return element, outer
    return outer, outer


def build_scope_chain(variables: Any, copy: bool = True) -> Any:
    """Normalize render() input into the root scope.

    None becomes an empty dict. Maps and Lists are shallow-copied when
    ``copy`` is set, so a render never observes later caller mutation of the
    top-level container. Other values pass through; lookups against them
    yield absent.
    """
    kind = kind_of(variables)
    if kind is ValueKind.ABSENT:
        return {}
    if not copy:
        return variables
    if kind is ValueKind.MAP:
        return dict(variables)
    if kind is ValueKind.LIST:
        return list(variables)
    return variables


def merge_context(variables: Any, context: dict[str, Any]) -> Any:
    """Merge keyword variables from ``render(**context)`` into ``variables``.

    Raises:
        InvalidArgumentError: If ``variables`` is not a Map or None.
    """
    if not context:
        return variables
    kind = kind_of(variables)
    if kind is ValueKind.ABSENT:
        return dict(context)
    if kind is ValueKind.MAP:
        return {**variables, **context}
    raise InvalidArgumentError(
        f"Keyword variables cannot be combined with {type(variables).__name__} variables",
        code=ErrorCode.INVALID_VARIABLES,
    )

