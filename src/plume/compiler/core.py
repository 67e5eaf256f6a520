"""Plume Compiler Core — token stream to step program.

The Compiler walks the token stream once, keeping an explicit stack of open
blocks, and appends typed steps to a flat program:

    Template Source → Lexer → Tokens → Compiler → Program → CompiledRenderer

Design Principles:
1. **Single pass**: no intermediate tree, blocks are matched with a stack
2. **Linear program**: block openers record the position of their exit step
3. **Compile-time indexing**: every lookup carries both its name and its
   position in the enclosing section's VariableIndex
4. **O(1) dispatch**: dict-based sigil → handler lookup

Sigils:
    ``&`` ``%`` ``$`` ``.``   escaped output (markup, URI, script, style)
    (none)                    output with the template's default escaping
    ``=``                     raw output
    ``:`` ``#``               section
    ``^``                     inverted section
    ``?`` ``?!``              conditional, negated conditional
    ``*``                     partial
    ``/``                     close the innermost block

"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import replace

from plume._types import Token, TokenType
from plume.compiler.frames import FrameKind, ParseFrame, VariableIndex
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
from plume.exceptions import ErrorCode, ParseError

logger = logging.getLogger(__name__)

_OUTPUT_SIGILS: dict[str, EscapeKind] = {
    "&": EscapeKind.MARKUP,
    "%": EscapeKind.URI,
    "$": EscapeKind.SCRIPT,
    ".": EscapeKind.STYLE,
    "=": EscapeKind.RAW,
}


class Compiler:
    """Compile a token stream into a Program.

    A Compiler instance holds state for a single compilation and is not
    reusable; create one per template.

    Attributes:
        _default_escape: Escaping for sigil-less output tags
        _name: Template name for error messages
        _source: Template source for error snippets
        _stack: Open block frames; the BASE frame is always at the bottom
        _steps: Program being built

    Example:
            >>> from plume.lexer import tokenize
            >>> program = Compiler().compile(tokenize("Hello {{name}}!"))
            >>> print(program.dump())
            0000 Text 'Hello '
            0001 Output name [0] raw
            0002 Text '!'

    """

    __slots__ = (
        "_default_escape",
        "_name",
        "_sections",
        "_sigil_dispatch",
        "_source",
        "_stack",
        "_steps",
        "_templates",
        "_variables",
    )

    def __init__(
        self,
        default_escape: EscapeKind = EscapeKind.RAW,
        *,
        name: str | None = None,
        source: str | None = None,
    ):
        self._default_escape = default_escape
        self._name = name
        self._source = source
        self._stack: list[ParseFrame] = [ParseFrame(FrameKind.BASE, "", VariableIndex())]
        self._steps: list[Step] = []
        self._variables: set[str] = set()
        self._templates: set[str] = set()
        self._sections: set[str] = set()
        self._sigil_dispatch: dict[str | None, Callable[[Token], None]] = {
            None: self._compile_output,
            "&": self._compile_output,
            "%": self._compile_output,
            "$": self._compile_output,
            ".": self._compile_output,
            "=": self._compile_output,
            ":": self._compile_section,
            "#": self._compile_section,
            "^": self._compile_inverted,
            "?": self._compile_conditional,
            "?!": self._compile_conditional,
            "*": self._compile_partial,
            "/": self._compile_close,
        }

    def compile(self, tokens: Iterable[Token]) -> Program:
        """Compile tokens into a Program.

        Raises:
            ParseError: On unbalanced or mismatched block tags, or a tag
                that requires a name but has none.
        """
        for token in tokens:
            if token.type is TokenType.TEXT:
                self._steps.append(Text(token.lineno, token.col_offset, token.value))
            else:
                self._sigil_dispatch[token.sigil](token)

        if len(self._stack) != 1:
            unclosed = self._stack[1]
            raise self._error(
                f"Unclosed {unclosed.kind.value} {unclosed.tag} in template",
                ErrorCode.UNCLOSED_BLOCK,
                unclosed.lineno,
                unclosed.col_offset,
                expected=unclosed.name,
            )

        program = Program(
            steps=tuple(self._steps),
            variables=frozenset(self._variables),
            templates=frozenset(self._templates),
            sections=frozenset(self._sections),
            name=self._name,
        )
        logger.debug(
            "Compiled template %s: %d steps, %d variables, %d partials",
            self._name or "<template>",
            len(program),
            len(program.variables),
            len(program.templates),
        )
        return program

    # =========================================================================
    # Sigil handlers
    # =========================================================================

    def _compile_output(self, token: Token) -> None:
        name = self._require_name(token)
        if token.sigil is None:
            escape = self._default_escape
        else:
            escape = _OUTPUT_SIGILS[token.sigil]
        index = self._stack[-1].index.index_for(name)
        self._steps.append(Output(token.lineno, token.col_offset, name, index, escape))
        self._variables.add(name)

    def _compile_section(self, token: Token) -> None:
        name = self._require_name(token)
        # The section variable itself lives in the enclosing scope
        index = self._stack[-1].index.index_for(name)
        self._push(token, FrameKind.SECTION, VariableIndex())
        self._steps.append(EnterSection(token.lineno, token.col_offset, name, index))
        self._sections.add(name)

    def _compile_inverted(self, token: Token) -> None:
        name = self._require_name(token)
        index = self._stack[-1].index.index_for(name)
        self._push(token, FrameKind.INVERTED, self._stack[-1].index)
        self._steps.append(EnterInverted(token.lineno, token.col_offset, name, index))
        self._variables.add(name)

    def _compile_conditional(self, token: Token) -> None:
        name = self._require_name(token)
        self._push(token, FrameKind.CONDITIONAL, self._stack[-1].index)
        self._steps.append(
            EnterConditional(token.lineno, token.col_offset, name, negated=token.sigil == "?!")
        )
        self._variables.add(name)

    def _compile_partial(self, token: Token) -> None:
        # Partials resolve against the registry at render time, never the index.
        self._steps.append(Partial(token.lineno, token.col_offset, token.value))
        self._templates.add(token.value)

    def _compile_close(self, token: Token) -> None:
        frame = self._stack[-1]
        if frame.kind is FrameKind.BASE:
            raise self._error(
                f"Unexpected {token.source}, too many tags closed",
                ErrorCode.UNEXPECTED_CLOSE,
                token.lineno,
                token.col_offset,
            )
        if frame.kind is FrameKind.SECTION and token.value and token.value != frame.name:
            raise self._error(
                f"Template contains unexpected {token.source}, expected {{{{/{frame.name}}}}}",
                ErrorCode.MISMATCHED_CLOSE,
                token.lineno,
                token.col_offset,
                expected=frame.name,
            )

        self._stack.pop()
        end = len(self._steps)
        self._steps[frame.start] = replace(self._steps[frame.start], end=end)

        if frame.kind is FrameKind.SECTION:
            exit_step: Step = ExitSection(token.lineno, token.col_offset, frame.name)
        elif frame.kind is FrameKind.INVERTED:
            exit_step = ExitInverted(token.lineno, token.col_offset, frame.name)
        else:
            exit_step = ExitConditional(token.lineno, token.col_offset, frame.name)
        self._steps.append(exit_step)

    # =========================================================================
    # Helpers
    # =========================================================================

    def _push(self, token: Token, kind: FrameKind, index: VariableIndex) -> None:
        self._stack.append(
            ParseFrame(
                kind,
                token.value,
                index,
                sigil=token.sigil or "",
                start=len(self._steps),
                lineno=token.lineno,
                col_offset=token.col_offset,
            )
        )

    def _require_name(self, token: Token) -> str:
        if not token.value:
            raise self._error(
                f"Missing name in {token.source}",
                ErrorCode.MISSING_NAME,
                token.lineno,
                token.col_offset,
            )
        return token.value

    def _error(
        self,
        message: str,
        code: ErrorCode,
        lineno: int,
        col_offset: int,
        *,
        expected: str | None = None,
    ) -> ParseError:
        return ParseError(
            message,
            code=code,
            name=self._name,
            lineno=lineno,
            col_offset=col_offset,
            source=self._source,
            expected=expected,
        )
