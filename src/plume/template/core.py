"""Plume Template — source text plus a lazily compiled renderer.

Architecture:
    ```
    Template
    ├── _content: str              # Raw source, immutable
    ├── _escape: EscapeMode        # Default escaping for {{name}}
    ├── _name: str | None          # For error messages
    └── _renderer: CompiledRenderer | None   # Built on first use
    ```

Compilation is lazy: constructing a Template never parses it, so a malformed
template raises ParseError the first time it is rendered or compiled.

Layouts:
    ``render(parents=...)`` renders the template, then renders each parent in
    turn with the previous output bound to the empty partial name::

        child = Template("Hello")
        layout = Template("<body>{{*}}</body>")
        child.render(parents=layout)        # '<body>Hello</body>'

Persistence:
    Only ``(content, escape)`` are persisted, for both ``to_dict()`` and
    pickle; the renderer is rebuilt on first use after loading.

Thread-Safety:
    Templates are immutable apart from the renderer cache. Two threads
    racing on first use may both compile; one result is kept and both are
    equivalent. Rendering keeps all state local to the call.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from plume.compiler import Compiler, EscapeKind, Program
from plume.exceptions import ErrorCode, InvalidArgumentError
from plume.lexer import tokenize
from plume.template.helpers import build_scope_chain, merge_context
from plume.template.registry import CONTENT_SLOT, TemplateRegistry
from plume.template.renderer import CompiledRenderer
from plume.utils.escape import EscapeMode, coerce_escape_mode
from plume.values import to_text

logger = logging.getLogger(__name__)

_DEFAULT_ESCAPE_KIND = {
    EscapeMode.NONE: EscapeKind.RAW,
    EscapeMode.MARKUP: EscapeKind.MARKUP,
}


class Template:
    """Compiled-on-demand template.

    Args:
        content: Template source, or a readable object (anything with
            ``read()``) whose contents are the source
        escape: Default escaping for sigil-less tags: None/"none"/"text" for
            raw output, "markup"/"html"/"html_escape" for HTML escaping
        name: Template name used in error messages

    Raises:
        InvalidArgumentError: For an unknown escape option.

    Example:
            >>> Template("Hello {{name}}!").render({"name": "World"})
            'Hello World!'

            >>> Template("{{name}}", escape="html").render(name="<b>")
            '&lt;b&gt;'

    """

    __slots__ = ("__weakref__", "_content", "_escape", "_name", "_renderer")

    def __init__(
        self,
        content: Any,
        escape: EscapeMode | str | None = None,
        *,
        name: str | None = None,
    ):
        self._escape = coerce_escape_mode(escape)
        if hasattr(content, "read"):
            content = content.read()
        self._content: str = to_text(content) if not isinstance(content, str) else content
        self._name = name
        self._renderer: CompiledRenderer | None = None

    @property
    def content(self) -> str:
        return self._content

    @property
    def escape(self) -> EscapeMode:
        return self._escape

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def renderer(self) -> CompiledRenderer:
        """The compiled renderer, built on first access.

        Raises:
            ParseError: If the template source is malformed.
        """
        renderer = self._renderer
        if renderer is None:
            renderer = self._renderer = CompiledRenderer(self.compile())
        return renderer

    def compile(
        self,
        *,
        variables: set[str] | None = None,
        templates: set[str] | None = None,
        sections: set[str] | None = None,
    ) -> Program:
        """Compile the source into a fresh Program.

        Optional sets are filled with the names the template references:
        ``variables`` (output, inverted and conditional tags), ``templates``
        (partials) and ``sections``. This does not touch the cached renderer.

        Raises:
            ParseError: If the template source is malformed.
        """
        compiler = Compiler(
            _DEFAULT_ESCAPE_KIND[self._escape], name=self._name, source=self._content
        )
        program = compiler.compile(tokenize(self._content))
        if variables is not None:
            variables.update(program.variables)
        if templates is not None:
            templates.update(program.templates)
        if sections is not None:
            sections.update(program.sections)
        return program

    def render(
        self,
        variables: Any = None,
        templates: Any = None,
        parents: Any = None,
        **context: Any,
    ) -> str:
        """Render the template.

        Args:
            variables: Mapping (looked up by name), list (looked up by
                position) or None
            templates: Partial sources: a TemplateRegistry, a mapping, or any
                object supporting ``[name]``
            parents: Layout chain. A Template, raw text, readable or callable
                for one parent, or a list/tuple of them. Each parent sees the
                previous output through ``{{*}}``.
            **context: Extra variables, merged over a mapping ``variables``

        Returns:
            Rendered output

        Raises:
            ParseError: If this template (or a parent) is malformed.
            ReentrancyError: If a partial renders this template again.
            InvalidArgumentError: For an unsupported ``parents`` shape.
        """
        chain = self._parent_chain(parents)
        scope = build_scope_chain(merge_context(variables, context))
        if not isinstance(templates, TemplateRegistry):
            templates = TemplateRegistry(templates, escape=self._escape)

        output = self.renderer(scope, templates)
        if chain:
            logger.debug(
                "Rendering %s into %d parent template(s)", self._name or "<template>", len(chain)
            )

        # Raw-text parents take the escape mode of the template they wrap.
        escape = self._escape
        for parent in chain:
            templates = templates.extend(CONTENT_SLOT, output)
            if isinstance(parent, Template):
                output = parent.renderer(scope, templates)
                escape = parent.escape
            elif callable(parent):
                output = to_text(parent(scope, templates))
            else:
                parent = Template(parent, escape=escape)
                output = parent.renderer(scope, templates)
        return output

    def _parent_chain(self, parents: Any) -> list[Any]:
        if parents is None:
            return []
        if isinstance(parents, (list, tuple)):
            for parent in parents:
                self._check_parent(parent)
            return list(parents)
        self._check_parent(parents)
        return [parents]

    @staticmethod
    def _check_parent(parent: Any) -> None:
        if isinstance(parent, (Template, str)) or callable(parent) or hasattr(parent, "read"):
            return
        raise InvalidArgumentError(
            f"Invalid parent template of type {type(parent).__name__}",
            code=ErrorCode.INVALID_PARENTS,
        )

    # =========================================================================
    # Introspection
    # =========================================================================

    def referenced_variables(self) -> frozenset[str]:
        """Variable names read by output, inverted and conditional tags."""
        return self.renderer.program.variables

    def referenced_templates(self) -> frozenset[str]:
        """Partial names this template inserts (``""`` is the layout slot)."""
        return self.renderer.program.templates

    def referenced_sections(self) -> frozenset[str]:
        """Names opened as sections."""
        return self.renderer.program.sections

    # =========================================================================
    # Persistence
    # =========================================================================

    def to_dict(self) -> dict[str, str]:
        """Structured form: ``{"content": ..., "escape": ...}``."""
        return {"content": self._content, "escape": self._escape.value}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, name: str | None = None) -> Template:
        """Rebuild a Template from ``to_dict()`` output."""
        return cls(data["content"], escape=data.get("escape"), name=name)

    def __getstate__(self) -> dict[str, str]:
        return self.to_dict()

    def __setstate__(self, state: Mapping[str, Any]) -> None:
        self._content = state["content"]
        self._escape = coerce_escape_mode(state.get("escape"))
        self._name = None
        self._renderer = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Template):
            return NotImplemented
        return self._content == other._content and self._escape is other._escape

    def __hash__(self) -> int:
        return hash((self._content, self._escape))

    def __repr__(self) -> str:
        label = f" {self._name!r}" if self._name else ""
        return f"<Template{label} escape={self._escape.value} compiled={self._renderer is not None}>"

