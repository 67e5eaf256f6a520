"""Template registry — lazily classified partial and layout sources.

A registry wraps whatever the caller passed as ``templates`` (a dict, a
loader, any object supporting ``[name]``) and classifies each entry the first
time it is asked for:

    Template, callable, list   used as-is
    text containing ``{{``     compiled into a Template (registry escape mode)
    None or missing            absent
    anything else              coerced to text

Readable objects (with ``read()``) are read first, then classified as text.
Results are memoized per name, so a raw string is compiled at most once per
registry.

Thread-Safety:
    Classification is pure and results are stored with ``dict.setdefault``,
    so concurrent first lookups of one name agree on a single value (the
    first stored wins). A registry can be shared between renders and threads.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from plume.utils.escape import EscapeMode, coerce_escape_mode
from plume.values import ValueKind, kind_of, to_text

logger = logging.getLogger(__name__)

# Registry name reserved for a child's rendered output in layout chains.
CONTENT_SLOT = ""

_TAG_TRIGGER = "{{"


class TemplateRegistry:
    """Lazily classifying name → value mapping for partials and layouts.

    Attributes:
        escape: Escape mode for templates compiled from raw text

    Example:
            >>> registry = TemplateRegistry({"greeting": "Hi {{name}}", "n": 3})
            >>> registry.resolve("n")
            '3'
            >>> type(registry.resolve("greeting")).__name__
            'Template'
            >>> registry.resolve("missing") is None
            True

    """

    __slots__ = ("_cache", "_escape", "_source")

    def __init__(
        self,
        source: Any = None,
        *,
        escape: EscapeMode | str | None = None,
    ):
        self._source = source
        self._escape = coerce_escape_mode(escape)
        self._cache: dict[str, Any] = {}

    @property
    def escape(self) -> EscapeMode:
        return self._escape

    def resolve(self, name: str) -> Any:
        """Return the classified value for ``name`` (None when absent)."""
        try:
            return self._cache[name]
        except KeyError:
            pass
        value = self._classify(name, self._fetch(name))
        return self._cache.setdefault(name, value)

    __getitem__ = resolve

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.resolve(name) is not None

    def extend(self, name: str, value: Any) -> TemplateRegistry:
        """Return a registry with ``name`` bound to ``value``.

        ``value`` is stored as given, without classification; layout chains
        use this to bind already-rendered text under CONTENT_SLOT. The new
        registry shares this one's source and starts with a copy of its
        cache.
        """
        extended = TemplateRegistry.__new__(TemplateRegistry)
        extended._source = self._source
        extended._escape = self._escape
        extended._cache = dict(self._cache)
        extended._cache[name] = value
        return extended

    def _fetch(self, name: str) -> Any:
        source = self._source
        if source is None:
            return None
        if isinstance(source, Mapping):
            return source.get(name)
        try:
            return source[name]
        except LookupError:
            return None

    def _classify(self, name: str, raw: Any) -> Any:
        from plume.template.core import Template

        if raw is None or isinstance(raw, Template):
            return raw
        if hasattr(raw, "read"):
            raw = to_text(raw.read())
        kind = kind_of(raw)
        if kind is ValueKind.CALLABLE or kind is ValueKind.LIST:
            return raw
        text = to_text(raw)
        if _TAG_TRIGGER in text:
            logger.debug("Compiling registry entry %r as a template", name)
            return Template(text, escape=self._escape, name=name)
        return text

    def __repr__(self) -> str:
        return f"<TemplateRegistry escape={self._escape.value} cached={sorted(self._cache)!r}>"
