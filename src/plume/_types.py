"""Token types produced by the Plume lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    """Kinds of token in a Plume token stream."""

    TEXT = "text"
    TAG = "tag"


@dataclass(frozen=True, slots=True)
class Token:
    """A literal text run or a ``{{ ... }}`` tag occurrence.

    For TEXT tokens ``value`` is the literal with brace escapes already
    collapsed and ``sigil`` is None. For TAG tokens ``value`` is the stripped
    tag name (``""`` when the tag has no name) and ``sigil`` the leading
    symbol, if any.

    Attributes:
        type: TEXT or TAG
        value: Literal text or tag name
        sigil: Tag sigil (``"#"``, ``"?!"``, ...) or None
        lineno: 1-based line of the token start
        col_offset: 0-based column of the token start
    """

    type: TokenType
    value: str
    sigil: str | None = None
    lineno: int = 1
    col_offset: int = 0

    def __repr__(self) -> str:
        if self.type is TokenType.TEXT:
            return f"Token(TEXT, {self.value!r}, {self.lineno}:{self.col_offset})"
        return f"Token(TAG, {self.sigil or ''}{self.value!r}, {self.lineno}:{self.col_offset})"

    @property
    def source(self) -> str:
        """Canonical tag text, e.g. ``{{#items}}``. Used in error messages."""
        if self.type is TokenType.TEXT:
            return self.value
        return f"{{{{{self.sigil or ''}{self.value}}}}}"
