"""Plume lexer — splits template source into text runs and tags.

Grammar:
    tag   := "{{" ws* sigil? body "}}"
    sigil := "?!" | "&" | "%" | "$" | "." | ":" | "#" | "^" | "?" | "*" | "/" | "="
    body  := any characters except "}"

Brace escaping:
    A run of three or more ``{`` never opens a tag and collapses by one
    brace in the emitted text, likewise for runs of ``}``. Writing ``{{{x}}}``
    therefore produces the literal text ``{{x}}``.

    >>> [t.value for t in tokenize("a {{{b}}} c")]
    ['a {{b}} c']

    The rule applies to the whole run, even when a tag body follows it, so
    ``{{{{{y}}`` is the text ``{{{{y}}`` rather than ``{{{`` plus a tag.

An unterminated ``{{`` is literal text. Tokenization never fails: every input
character ends up in exactly one token, and tag names are validated by the
compiler, not here.
"""

from __future__ import annotations

import re
from bisect import bisect_right

from plume._types import Token, TokenType

# Runs of opening braces; only runs of exactly two can start a tag.
_OPEN_RUN_RE = re.compile(r"\{{2,}")

_TAG_RE = re.compile(r"\{\{\s*(\?!?|[&%$.:#^*/=])?([^}]*)\}\}")

_COLLAPSE_OPEN_RE = re.compile(r"\{(\{\{+)")
_COLLAPSE_CLOSE_RE = re.compile(r"\}(\}\}+)")


def collapse_braces(text: str) -> str:
    """Collapse every run of N>=3 braces to N-1 braces.

    Example:
        >>> collapse_braces("{{ {{{ }}}} }}")
        '{{ {{ }}} }}'
    """
    if "{{{" in text:
        text = _COLLAPSE_OPEN_RE.sub(r"\1", text)
    if "}}}" in text:
        text = _COLLAPSE_CLOSE_RE.sub(r"\1", text)
    return text


class Lexer:
    """Single-pass scanner over template source.

    Tracks line and column for each token so parse errors can point at the
    offending tag.

    Example:
        >>> Lexer("Hi {{name}}").tokenize()
        [Token(TEXT, 'Hi ', 1:0), Token(TAG, 'name', 1:3)]
    """

    __slots__ = ("_source", "_line_starts")

    def __init__(self, source: str):
        self._source = source
        self._line_starts: list[int] | None = None

    def tokenize(self) -> list[Token]:
        source = self._source
        tokens: list[Token] = []
        pos = 0
        search_from = 0
        # First "}" at or after the current run; a tag body cannot contain
        # "}", so a run opens a tag only when this brace starts "}}".
        close = -1

        while True:
            run = _OPEN_RUN_RE.search(source, search_from)
            if run is None:
                break
            search_from = run.end()
            if run.end() - run.start() != 2:
                continue
            if close < run.end():
                close = source.find("}", run.end())
                if close == -1:
                    break
            if not source.startswith("}}", close):
                continue
            tag = _TAG_RE.match(source, run.start())
            if tag is None:
                continue

            if run.start() > pos:
                tokens.append(self._text(pos, run.start()))
            sigil, body = tag.group(1), tag.group(2)
            lineno, col = self._location(run.start())
            tokens.append(Token(TokenType.TAG, body.strip(), sigil, lineno, col))
            pos = search_from = tag.end()

        if pos < len(source):
            tokens.append(self._text(pos, len(source)))
        return tokens

    def _text(self, start: int, end: int) -> Token:
        lineno, col = self._location(start)
        return Token(TokenType.TEXT, collapse_braces(self._source[start:end]), None, lineno, col)

    def _location(self, offset: int) -> tuple[int, int]:
        if self._line_starts is None:
            starts = [0]
            starts.extend(m.end() for m in re.finditer("\n", self._source))
            self._line_starts = starts
        line = bisect_right(self._line_starts, offset) - 1
        return line + 1, offset - self._line_starts[line]


def tokenize(source: str) -> list[Token]:
    """Tokenize template source.

    Convenience wrapper around ``Lexer(source).tokenize()``.
    """
    return Lexer(source).tokenize()
