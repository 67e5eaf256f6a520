"""Plume compiler — token stream to step program.

Example:
    >>> from plume.compiler import Compiler
    >>> from plume.lexer import tokenize
    >>> program = Compiler().compile(tokenize("{{#items}}{{name}}{{/items}}"))
    >>> len(program)
    3
"""

from plume.compiler.core import Compiler
from plume.compiler.frames import FrameKind, ParseFrame, VariableIndex
from plume.compiler.steps import EscapeKind, Program

__all__ = [
    "Compiler",
    "EscapeKind",
    "FrameKind",
    "ParseFrame",
    "Program",
    "VariableIndex",
]
