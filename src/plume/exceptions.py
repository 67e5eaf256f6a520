"""Exceptions for the Plume template system.

Exception Hierarchy:
TemplateError (base)
├── ParseError                # Malformed block structure, raised on first compile
├── InvalidArgumentError      # Bad escape option or parents shape (also ValueError)
├── TemplateNotFoundError     # Loader has no such template (also LookupError)
└── TemplateRuntimeError      # Render-time failure
    ├── ReentrancyError       # Renderer invoked while already executing
    └── MissingVariableError  # Reserved for a strict lookup mode, never raised

Every exception carries an ErrorCode so failures can be matched without
parsing messages:

    >>> try:
    ...     Template("{{#a}}x{{/b}}").render()
    ... except TemplateError as e:
    ...     e.code
    <ErrorCode.MISMATCHED_CLOSE: 'K-PAR-002'>

"""

from __future__ import annotations

from enum import Enum


class ErrorCode(Enum):
    """Searchable error codes for Plume errors.

    Format: K-{CATEGORY}-{NUMBER}
    Categories: PAR (parser), ARG (arguments), TPL (template loading), RUN (runtime)
    """

    # Parser errors (K-PAR-xxx)
    UNEXPECTED_CLOSE = "K-PAR-001"
    MISMATCHED_CLOSE = "K-PAR-002"
    UNCLOSED_BLOCK = "K-PAR-003"
    MISSING_NAME = "K-PAR-004"

    # Argument errors (K-ARG-xxx)
    INVALID_ESCAPE = "K-ARG-001"
    INVALID_PARENTS = "K-ARG-002"
    INVALID_VARIABLES = "K-ARG-003"

    # Loader errors (K-TPL-xxx)
    TEMPLATE_NOT_FOUND = "K-TPL-001"

    # Runtime errors (K-RUN-xxx)
    REENTRANT_RENDER = "K-RUN-001"
    MISSING_VARIABLE = "K-RUN-002"

    @property
    def category(self) -> str:
        """Error category ('parser', 'argument', 'template' or 'runtime')."""
        prefix = self.value.split("-")[1]
        return {
            "PAR": "parser",
            "ARG": "argument",
            "RUN": "runtime",
            "TPL": "template",
        }.get(prefix, "unknown")


class TemplateError(Exception):
    """Base exception for all Plume template errors.

    Attributes:
        code: Optional ErrorCode identifying the failure.
    """

    code: ErrorCode | None = None

    def __init__(self, message: str, *, code: ErrorCode | None = None):
        self.message = message
        if code is not None:
            self.code = code
        super().__init__(message)

    def format_compact(self) -> str:
        """Format the error as a one-block terminal diagnostic.

        Format::

            K-PAR-002: Unexpected {{/b}}, expected {{/a}}
              --> page.html:1:7
        """
        header = str(self)
        if self.code and self.code.value not in header:
            header = f"{self.code.value}: {header}"
        return header


class ParseError(TemplateError):
    """Malformed block structure in template source.

    Raised the first time a template is compiled, which happens lazily on
    first render. When ``source`` and ``lineno`` are known the message
    includes a snippet of the offending line with a caret under the tag.

    Attributes:
        message: Error description
        name: Template name, if any
        lineno: 1-based line of the offending tag
        col_offset: 0-based column of the offending tag
        expected: Tag name the parser expected to be closed, if any
    """

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        name: str | None = None,
        lineno: int | None = None,
        col_offset: int | None = None,
        source: str | None = None,
        expected: str | None = None,
    ):
        self.name = name
        self.lineno = lineno
        self.col_offset = col_offset
        self.source = source
        self.expected = expected
        super().__init__(message, code=code)
        self.args = (self._format_message(),)

    def _format_message(self) -> str:
        location = self.name or "<template>"
        if self.lineno:
            location += f":{self.lineno}"
            if self.col_offset is not None:
                location += f":{self.col_offset}"

        header = f"Parse Error: {self.message}\n  --> {location}"

        if self.source and self.lineno:
            lines = self.source.splitlines()
            if 0 < self.lineno <= len(lines):
                error_line = lines[self.lineno - 1]
                snippet = f"\n   |\n{self.lineno:>3} | {error_line}"
                if self.col_offset is not None:
                    snippet += f"\n   | {' ' * self.col_offset}^"
                return header + snippet

        return header

    def format_compact(self) -> str:
        parts = [f"{self.code.value}: {self.message}" if self.code else self.message]
        location = self.name or "<template>"
        if self.lineno:
            location += f":{self.lineno}"
            if self.col_offset is not None:
                location += f":{self.col_offset}"
        parts.append(f"  --> {location}")
        return "\n".join(parts)


class InvalidArgumentError(TemplateError, ValueError):
    """Unsupported option passed to a Plume API.

    Raised for an unknown escape mode or an unsupported ``parents`` shape.
    """


class TemplateNotFoundError(TemplateError, LookupError):
    """Template not found by a loader.

    A LookupError, so a TemplateRegistry backed by a loader treats a missing
    partial as absent and renders it as empty text.
    """

    code: ErrorCode | None = ErrorCode.TEMPLATE_NOT_FOUND


class TemplateRuntimeError(TemplateError):
    """Render-time error.

    Attributes:
        template_name: Name of the template being rendered, if any
    """

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        template_name: str | None = None,
    ):
        self.template_name = template_name
        if template_name:
            message = f"{message} (in {template_name})"
        super().__init__(message, code=code)


class ReentrancyError(TemplateRuntimeError):
    """A compiled renderer was invoked while it was already executing.

    Typically a template that includes itself through a partial, either
    directly (``{{*page}}`` inside ``page``) or through a chain of partials.
    """

    code: ErrorCode | None = ErrorCode.REENTRANT_RENDER


class MissingVariableError(TemplateRuntimeError):
    """Variable not found during a strict lookup.

    Plume lookups are lenient: a missing variable renders as empty text.
    This error is reserved for a strict lookup mode and is not raised today.
    """

    code: ErrorCode | None = ErrorCode.MISSING_VARIABLE
