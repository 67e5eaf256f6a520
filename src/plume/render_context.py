"""Plume render guard — call-scoped reentrancy detection.

A compiled renderer must not be invoked again while one of its invocations
is still running on the same call path. That is how a template that includes
itself through a partial is caught:

    page = Template("<p>{{*page}}</p>")
    page.render(templates={"page": page})   # ReentrancyError

The in-progress marker is held in a ContextVar rather than on the renderer,
so the guard only sees invocations made from the current thread or asyncio
task. Two threads rendering the same template at the same time do not
interfere with each other.

Thread Safety:
    ContextVars are thread-local by design. Each thread/async task has its
    own set of active renderers.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

from plume.exceptions import ReentrancyError

# ids of the renderers currently executing in this context
_active_renderers: ContextVar[frozenset[int]] = ContextVar(
    "plume_active_renderers", default=frozenset()
)


def is_rendering(renderer: object) -> bool:
    """Return True if ``renderer`` is executing in the current context."""
    return id(renderer) in _active_renderers.get()


@contextmanager
def render_guard(renderer: object, template_name: str | None = None) -> Iterator[None]:
    """Mark ``renderer`` as in progress for the duration of the block.

    Raises:
        ReentrancyError: If ``renderer`` is already in progress in this
            context. Nothing inside the block runs in that case.
    """
    active = _active_renderers.get()
    key = id(renderer)
    if key in active:
        raise ReentrancyError(
            "Template is already being rendered; a partial refers back to it",
            template_name=template_name,
        )
    token = _active_renderers.set(active | {key})
    try:
        yield
    finally:
        _active_renderers.reset(token)
