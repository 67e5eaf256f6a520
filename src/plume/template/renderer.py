"""Compiled renderer — executes a Program against a scope and registry.

Execution model:
    The program is a flat tuple of steps. The renderer walks it with an
    index, dispatching on step type through a dict. Block openers carry the
    position of their exit step: a skipped block jumps past it, a section
    re-runs the slice between opener and exit once per element.

StringBuilder Pattern:
    Output is appended to a local list and joined once at the end. Nothing
    is returned if a step raises, so no partial output leaks.

Reentrancy:
    Every call runs inside ``render_guard``. A renderer that is invoked again
    from within its own execution (a self-referential partial) raises
    ReentrancyError before running any step.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from plume.compiler.steps import (
    EnterConditional,
    EnterInverted,
    EnterSection,
    EscapeKind,
    ExitConditional,
    ExitInverted,
    ExitSection,
    Output,
    Partial,
    Program,
    Step,
    Text,
)
from plume.render_context import is_rendering, render_guard
from plume.template.helpers import bind_child_scope, iterate, lookup, lookup_key
from plume.utils.escape import css_escape, html_escape, js_escape, uri_escape
from plume.values import ValueKind, is_truthy, kind_of, to_text

if TYPE_CHECKING:
    from plume.template.registry import TemplateRegistry

_ESCAPES: dict[EscapeKind, Callable[[str], str]] = {
    EscapeKind.RAW: str,
    EscapeKind.MARKUP: html_escape,
    EscapeKind.URI: uri_escape,
    EscapeKind.SCRIPT: js_escape,
    EscapeKind.STYLE: css_escape,
}


def render_partial(
    value: Any, scope: Any, registry: TemplateRegistry, outer: Any = None
) -> str:
    """Turn a resolved registry value into output text.

    Templates render against the current scope and registry; callables are
    called with ``(scope, registry)`` and their result is taken as rendered
    text; lists and scalars are coerced to text; absent gives ``""``.
    """
    from plume.template.core import Template

    if isinstance(value, Template):
        return value.renderer(scope, registry, outer)
    kind = kind_of(value)
    if kind is ValueKind.ABSENT:
        return ""
    if kind is ValueKind.CALLABLE:
        return to_text(value(scope, registry))
    return to_text(value)


class CompiledRenderer:
    """Callable produced by compiling a template.

    ``renderer(scope, registry) -> str``. One renderer exists per Template
    and is reused for every render.

    Every handler receives the current scope and ``outer``, the nearest Map
    scope above it. Under a positional (List) row, ``outer`` is what keeps
    the enclosing names reachable from nested sections.

    Attributes:
        program: The compiled Program
    """

    __slots__ = ("_dispatch", "_steps", "program")

    def __init__(self, program: Program):
        self.program = program
        self._steps = program.steps
        self._dispatch: dict[type[Step], Callable[..., int]] = {
            Text: self._run_text,
            Output: self._run_output,
            EnterSection: self._run_section,
            EnterInverted: self._run_inverted,
            EnterConditional: self._run_conditional,
            Partial: self._run_partial,
            ExitSection: self._run_exit,
            ExitInverted: self._run_exit,
            ExitConditional: self._run_exit,
        }

    @property
    def in_progress(self) -> bool:
        """True while this renderer is executing in the current context."""
        return is_rendering(self)

    def __call__(self, scope: Any, registry: TemplateRegistry, outer: Any = None) -> str:
        with render_guard(self, self.program.name):
            buf: list[str] = []
            self._execute(0, len(self._steps), scope, outer, registry, buf)
            return "".join(buf)

    def _execute(
        self,
        start: int,
        stop: int,
        scope: Any,
        outer: Any,
        registry: TemplateRegistry,
        buf: list[str],
    ) -> None:
        steps = self._steps
        dispatch = self._dispatch
        position = start
        while position < stop:
            step = steps[position]
            position = dispatch[type(step)](step, position, scope, outer, registry, buf)

    # =========================================================================
    # Step handlers: each returns the position of the next step to run
    # =========================================================================

    def _run_text(
        self,
        step: Text,
        position: int,
        scope: Any,
        outer: Any,
        registry: TemplateRegistry,
        buf: list[str],
    ) -> int:
        buf.append(step.value)
        return position + 1

    def _run_output(
        self,
        step: Output,
        position: int,
        scope: Any,
        outer: Any,
        registry: TemplateRegistry,
        buf: list[str],
    ) -> int:
        value = lookup(scope, step.name, step.index)
        if value is not None:
            buf.append(_ESCAPES[step.escape](to_text(value)))
        return position + 1

    def _run_section(
        self,
        step: EnterSection,
        position: int,
        scope: Any,
        outer: Any,
        registry: TemplateRegistry,
        buf: list[str],
    ) -> int:
        value = lookup(scope, step.name, step.index)
        if is_truthy(value):
            for element in iterate(value):
                child, child_outer = bind_child_scope(element, scope, outer)
                self._execute(position + 1, step.end, child, child_outer, registry, buf)
        return step.end + 1

    def _run_inverted(
        self,
        step: EnterInverted,
        position: int,
        scope: Any,
        outer: Any,
        registry: TemplateRegistry,
        buf: list[str],
    ) -> int:
        if not is_truthy(lookup(scope, step.name, step.index)):
            self._execute(position + 1, step.end, scope, outer, registry, buf)
        return step.end + 1

    def _run_conditional(
        self,
        step: EnterConditional,
        position: int,
        scope: Any,
        outer: Any,
        registry: TemplateRegistry,
        buf: list[str],
    ) -> int:
        if is_truthy(lookup_key(scope, step.name)) != step.negated:
            self._execute(position + 1, step.end, scope, outer, registry, buf)
        return step.end + 1

    def _run_partial(
        self,
        step: Partial,
        position: int,
        scope: Any,
        outer: Any,
        registry: TemplateRegistry,
        buf: list[str],
    ) -> int:
        buf.append(render_partial(registry.resolve(step.name), scope, registry, outer))
        return position + 1

    def _run_exit(
        self,
        step: Step,
        position: int,
        scope: Any,
        outer: Any,
        registry: TemplateRegistry,
        buf: list[str],
    ) -> int:
        return position + 1

    def __repr__(self) -> str:
        return f"<CompiledRenderer {self.program.name or '<template>'} steps={len(self._steps)}>"
