"""Parse frames and variable indexing for the Plume compiler."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class VariableIndex:
    """First-seen index map from tag name to position.

    Every distinct name gets the next integer the first time it is seen, so
    a scope supplied as a list can be read positionally instead of by key:
    in ``{{#rows}}{{a}}-{{b}}{{/rows}}`` the section's index maps ``a`` to 0
    and ``b`` to 1, and a row ``["x", "y"]`` renders ``x-y``.

    Example:
        >>> index = VariableIndex()
        >>> index.index_for("a"), index.index_for("b"), index.index_for("a")
        (0, 1, 0)
    """

    __slots__ = ("_positions",)

    def __init__(self) -> None:
        self._positions: dict[str, int] = {}

    def index_for(self, name: str) -> int:
        """Return the position of ``name``, assigning the next one on first sight."""
        position = self._positions.get(name)
        if position is None:
            position = self._positions[name] = len(self._positions)
        return position

    def __repr__(self) -> str:
        return f"VariableIndex({self._positions!r})"


class FrameKind(Enum):
    """Kind of block a parse frame stands for."""

    BASE = "base"
    SECTION = "section"
    INVERTED = "inverted section"
    CONDITIONAL = "conditional"


@dataclass(slots=True)
class ParseFrame:
    """An open block on the compiler's stack.

    Sections own a fresh VariableIndex; inverted sections and conditionals
    share the enclosing frame's index because they do not change scope.

    Attributes:
        kind: Block kind
        name: Tag name that opened the block (``""`` for the base frame)
        index: Variable index used for lookups inside this block
        sigil: Opening sigil, for error messages
        start: Position of the opening step in the program
        lineno: Line of the opening tag
        col_offset: Column of the opening tag
    """

    kind: FrameKind
    name: str
    index: VariableIndex
    sigil: str = ""
    start: int = -1
    lineno: int = 0
    col_offset: int = 0

    @property
    def tag(self) -> str:
        """The opening tag as written, e.g. ``{{#items}}``."""
        return f"{{{{{self.sigil}{self.name}}}}}"
