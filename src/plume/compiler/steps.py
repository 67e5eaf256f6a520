"""Program steps emitted by the Plume compiler.

A compiled template is a flat tuple of steps. Block openers carry ``end``,
the position of their matching exit step, so the renderer can skip or repeat
a body without searching. Steps are immutable and safe to share between
threads.

    Hello {{name}}{{#items}}[{{label}}]{{/items}}

    0000 Text 'Hello '
    0001 Output name [0] raw
    0002 EnterSection items [1] -> 0006
    0003   Text '['
    0004   Output label [0] raw
    0005   Text ']'
    0006 ExitSection items
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum


class EscapeKind(Enum):
    """Escaping applied by an Output step."""

    RAW = "raw"
    MARKUP = "markup"
    URI = "uri"
    SCRIPT = "script"
    STYLE = "style"


@dataclass(frozen=True, slots=True)
class Step:
    """Base class for all program steps.

    Steps track the source location of the token that produced them.
    """

    lineno: int
    col_offset: int


@dataclass(frozen=True, slots=True)
class Text(Step):
    """Emit literal text."""

    value: str


@dataclass(frozen=True, slots=True)
class Output(Step):
    """Emit a variable: ``{{name}}``, ``{{&name}}``, ``{{=name}}``, ..."""

    name: str
    index: int
    escape: EscapeKind = EscapeKind.RAW


@dataclass(frozen=True, slots=True)
class EnterSection(Step):
    """Repeat the body per element: ``{{#name}}`` / ``{{:name}}``"""

    name: str
    index: int
    end: int = -1


@dataclass(frozen=True, slots=True)
class ExitSection(Step):
    name: str


@dataclass(frozen=True, slots=True)
class EnterInverted(Step):
    """Render the body once when the variable is falsy: ``{{^name}}``"""

    name: str
    index: int
    end: int = -1


@dataclass(frozen=True, slots=True)
class ExitInverted(Step):
    name: str


@dataclass(frozen=True, slots=True)
class EnterConditional(Step):
    """Render the body once on a keyed truth test: ``{{?name}}`` / ``{{?!name}}``"""

    name: str
    negated: bool = False
    end: int = -1


@dataclass(frozen=True, slots=True)
class ExitConditional(Step):
    name: str


@dataclass(frozen=True, slots=True)
class Partial(Step):
    """Insert a registry entry resolved at render time: ``{{*name}}``"""

    name: str


_BLOCK_OPENERS = (EnterSection, EnterInverted, EnterConditional)
_BLOCK_CLOSERS = (ExitSection, ExitInverted, ExitConditional)


@dataclass(frozen=True, slots=True)
class Program:
    """Compiled step sequence plus the names it references.

    Attributes:
        steps: Flat tuple of steps
        variables: Names read by output, inverted and conditional tags
        templates: Names referenced by partial tags (``""`` is the layout slot)
        sections: Names opened as sections
        name: Template name, for diagnostics
    """

    steps: tuple[Step, ...]
    variables: frozenset[str] = frozenset()
    templates: frozenset[str] = frozenset()
    sections: frozenset[str] = frozenset()
    name: str | None = field(default=None, compare=False)

    def __len__(self) -> int:
        return len(self.steps)

    def dump(self) -> str:
        """Render a numbered listing of the program, indented by block depth."""
        return "\n".join(_dump_lines(self.steps))


def _describe(step: Step) -> str:
    if isinstance(step, Text):
        return f"Text {step.value!r}"
    if isinstance(step, Output):
        return f"Output {step.name} [{step.index}] {step.escape.value}"
    if isinstance(step, (EnterSection, EnterInverted)):
        return f"{type(step).__name__} {step.name} [{step.index}] -> {step.end:04d}"
    if isinstance(step, EnterConditional):
        test = "?!" if step.negated else "?"
        return f"EnterConditional {test}{step.name} -> {step.end:04d}"
    if isinstance(step, Partial):
        return f"Partial {step.name!r}"
    return f"{type(step).__name__} {getattr(step, 'name', '')}".rstrip()


def _dump_lines(steps: Sequence[Step]) -> list[str]:
    lines = []
    depth = 0
    for position, step in enumerate(steps):
        if isinstance(step, _BLOCK_CLOSERS):
            depth -= 1
        lines.append(f"{position:04d} {'  ' * depth}{_describe(step)}")
        if isinstance(step, _BLOCK_OPENERS):
            depth += 1
    return lines
