"""Output escaping for the four tag contexts.

- ``html_escape``: markup text and attribute values (``{{&name}}``)
- ``uri_escape``: URI components (``{{%name}}``)
- ``js_escape``: JavaScript string literals (``{{$name}}``)
- ``css_escape``: CSS identifiers and strings (``{{.name}}``)

All functions take already-coerced text. Single-pass translation via
``str.translate()`` wherever the mapping is per-character.
"""

from __future__ import annotations

import re
from enum import Enum
from urllib.parse import quote

from plume.exceptions import ErrorCode, InvalidArgumentError

_HTML_ESCAPE_TABLE = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&quot;",
        "'": "&#39;",
    }
)

_JS_ESCAPE_TABLE = str.maketrans(
    {
        "\\": "\\\\",
        "'": "\\'",
        '"': '\\"',
        "`": "\\`",
        "\n": "\\n",
        "\r": "\\r",
        "\t": "\\t",
        "\0": "\\0",
        "<": "\\u003C",
        ">": "\\u003E",
        "&": "\\u0026",
        "\u2028": "\\u2028",
        "\u2029": "\\u2029",
    }
)

# Everything outside the CSS identifier alphabet gets a hex escape.
_CSS_UNSAFE_RE = re.compile(r"[^a-zA-Z0-9_\-\u00a0-\U0010ffff]")


def html_escape(text: str) -> str:
    """Escape ``& < > " '`` for HTML.

    Example:
        >>> html_escape('<a href="x">')
        '&lt;a href=&quot;x&quot;&gt;'
    """
    return text.translate(_HTML_ESCAPE_TABLE)


def uri_escape(text: str) -> str:
    """Percent-encode text for use as a URI component.

    Example:
        >>> uri_escape("a b/c?d=1")
        'a%20b%2Fc%3Fd%3D1'
    """
    return quote(text, safe="")


def js_escape(text: str) -> str:
    """Escape text for embedding inside a JavaScript string literal.

    ``<``, ``>`` and ``&`` become unicode escapes so the output cannot close a
    surrounding ``<script>`` element.
    """
    return text.translate(_JS_ESCAPE_TABLE)


def css_escape(text: str) -> str:
    """Escape text for CSS using hex escapes.

    Example:
        >>> css_escape("a;b")
        'a\\\\3b b'
    """
    return _CSS_UNSAFE_RE.sub(lambda m: f"\\{ord(m.group()):x} ", text)


class EscapeMode(Enum):
    """Default escaping for sigil-less ``{{name}}`` tags."""

    NONE = "none"
    MARKUP = "markup"


_ESCAPE_MODE_ALIASES: dict[str | None, EscapeMode] = {
    None: EscapeMode.NONE,
    "none": EscapeMode.NONE,
    "text": EscapeMode.NONE,
    "markup": EscapeMode.MARKUP,
    "html": EscapeMode.MARKUP,
    "html_escape": EscapeMode.MARKUP,
}


def coerce_escape_mode(option: EscapeMode | str | None) -> EscapeMode:
    """Resolve a user-supplied escape option.

    Accepts an EscapeMode, None, or one of ``"none"``, ``"text"``,
    ``"markup"``, ``"html"``, ``"html_escape"``.

    Raises:
        InvalidArgumentError: For any other value.
    """
    if isinstance(option, EscapeMode):
        return option
    key = option.lower() if isinstance(option, str) else option
    try:
        return _ESCAPE_MODE_ALIASES[key]
    except (KeyError, TypeError):
        raise InvalidArgumentError(
            f"Unknown escape mode {option!r}", code=ErrorCode.INVALID_ESCAPE
        ) from None
