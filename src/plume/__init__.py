"""Plume — a logic-light template compiler.

Markup with embedded ``{{ }}`` tags is compiled once into a step program and
rendered many times against different variables, partials and layouts.

Quickstart:
    >>> from plume import Template
    >>> Template("Hello {{name}}!").render({"name": "World"})
    'Hello World!'

Sections, inverted sections and conditionals:
    >>> t = Template("{{#items}}[{{name}}]{{/items}}{{^items}}none{{/items}}")
    >>> t.render(items=[{"name": "a"}, {"name": "b"}])
    '[a][b]'
    >>> t.render(items=[])
    'none'

Layouts:
    >>> Template("CHILD").render(parents=Template("<L>{{*}}</L>"))
    '<L>CHILD</L>'

Architecture:
Template Source → Lexer → Tokens → Compiler → Program → CompiledRenderer

Pipeline stages:
1. **Lexer**: Splits source into text runs and tags, collapsing brace escapes
2. **Compiler**: Matches blocks with an explicit stack, emits typed steps
3. **Renderer**: Walks the step program against a scope and registry
4. **Template**: Caches the renderer, resolves partials and layout chains

Tags:
    ``{{name}}``      output, escaped per the template's escape mode
    ``{{&name}}``     HTML-escaped output (``%`` URI, ``$`` script, ``.`` CSS)
    ``{{=name}}``     raw output
    ``{{#name}}``     section, repeated per element (also ``{{:name}}``)
    ``{{^name}}``     inverted section, rendered when ``name`` is falsy
    ``{{?name}}``     conditional (``{{?!name}}`` negated)
    ``{{*name}}``     partial; ``{{*}}`` is the layout content slot
    ``{{/name}}``     close the innermost block

"""

from plume._types import Token, TokenType
from plume.compiler import Compiler, EscapeKind, Program, VariableIndex
from plume.exceptions import (
    ErrorCode,
    InvalidArgumentError,
    MissingVariableError,
    ParseError,
    ReentrancyError,
    TemplateError,
    TemplateNotFoundError,
    TemplateRuntimeError,
)
from plume.lexer import tokenize
from plume.loaders import ChoiceLoader, FileSystemLoader
from plume.template import CONTENT_SLOT, CompiledRenderer, Template, TemplateRegistry
from plume.utils.escape import EscapeMode, css_escape, html_escape, js_escape, uri_escape
from plume.values import ValueKind, is_truthy, kind_of, to_text

__version__ = "0.1.0"

__all__ = [
    "CONTENT_SLOT",
    "ChoiceLoader",
    "CompiledRenderer",
    "Compiler",
    "ErrorCode",
    "EscapeKind",
    "EscapeMode",
    "FileSystemLoader",
    "InvalidArgumentError",
    "MissingVariableError",
    "ParseError",
    "Program",
    "ReentrancyError",
    "Template",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRegistry",
    "TemplateRuntimeError",
    "Token",
    "TokenType",
    "ValueKind",
    "VariableIndex",
    "__version__",
    "css_escape",
    "html_escape",
    "is_truthy",
    "js_escape",
    "kind_of",
    "to_text",
    "tokenize",
    "uri_escape",
]
