"""Template sources for Plume registries.

A registry source is anything supporting ``source[name]``; plain dicts work.
Loaders add file-backed sources:

- ``FileSystemLoader``: Load from filesystem directories
- ``ChoiceLoader``: Try multiple sources in order (theme fallback)

Loaders return template *text*. The TemplateRegistry compiles it with its own
escape mode, so partials loaded from disk escape the same way as the
template that includes them:

    ```python
    loader = FileSystemLoader("templates/", extension=".html")
    page = Template(loader["page"], escape="html")
    page.render(post, templates=loader, parents=loader["layout"])
    ```

A missing template raises TemplateNotFoundError, a LookupError, which a
registry treats as absent.

Thread-Safety:
Loaders hold no mutable state; concurrent lookups are safe.

"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any

from plume.exceptions import TemplateNotFoundError


class FileSystemLoader:
    """Load template text from filesystem directories.

    Searches one or more directories for templates by name. The first matching
    file is returned.

    Attributes:
        _paths: List of Path objects to search
        _encoding: File encoding (default: utf-8)
        _extension: Suffix appended to names (``"header"`` → ``header.html``)

    Search Order:
        Directories are searched in order. First match wins:
            ```python
            loader = FileSystemLoader(["themes/custom/", "themes/default/"])
            # Looks in themes/custom/ first, then themes/default/
            ```

    Example:
            >>> loader = FileSystemLoader("templates/", extension=".html")
            >>> source, filename = loader.get_source("pages/about")
            >>> print(filename)
            templates/pages/about.html

    """

    __slots__ = ("_encoding", "_extension", "_paths")

    def __init__(
        self,
        paths: str | Path | Sequence[str | Path],
        encoding: str = "utf-8",
        extension: str | None = None,
    ):
        if isinstance(paths, (str, Path)):
            paths = [paths]
        self._paths = [Path(p) for p in paths]
        self._encoding = encoding
        self._extension = extension or ""

    def get_source(self, name: str) -> tuple[str, str]:
        """Return ``(source, filename)`` for a template.

        Raises:
            TemplateNotFoundError: If no search path has the template, or the
                name is absolute or climbs out of the search path.
        """
        relative = Path(name + self._extension)
        if name and not relative.is_absolute() and ".." not in relative.parts:
            for base in self._paths:
                path = base / relative
                if path.is_file():
                    return path.read_text(self._encoding), str(path)

        raise TemplateNotFoundError(
            f"Template '{name}' not found in: {', '.join(str(p) for p in self._paths)}"
        )

    def __getitem__(self, name: str) -> str:
        return self.get_source(name)[0]

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        try:
            self.get_source(name)
        except TemplateNotFoundError:
            return False
        return True

    def list_templates(self) -> list[str]:
        """List template names in all search paths, extension stripped."""
        pattern = f"*{self._extension}" if self._extension else "*"
        templates = set()
        for base in self._paths:
            if base.is_dir():
                for path in base.rglob(pattern):
                    if path.is_file():
                        name = path.relative_to(base).as_posix()
                        if self._extension:
                            name = name[: -len(self._extension)]
                        templates.add(name)
        return sorted(templates)


class ChoiceLoader:
    """Try multiple sources in order, returning the first match.

    Sources may be loaders or plain mappings. Useful for theme fallback
    patterns where a custom theme overrides a subset of templates and the
    default theme provides the rest.

    Example:
            >>> custom = {"nav": "<nav>Custom</nav>"}
            >>> default = {"nav": "<nav>Default</nav>", "footer": "<footer/>"}
            >>> loader = ChoiceLoader([custom, default])
            >>> loader["nav"], loader["footer"]
            ('<nav>Custom</nav>', '<footer/>')

    Thread-Safety:
        Safe if all child sources are thread-safe.
    """

    __slots__ = ("_sources",)

    def __init__(self, sources: Sequence[Any]):
        self._sources = list(sources)

    def __getitem__(self, name: str) -> Any:
        for source in self._sources:
            try:
                return source[name]
            except LookupError:
                continue
        raise TemplateNotFoundError(
            f"Template '{name}' not found in any of {len(self._sources)} sources"
        )

    def __contains__(self, name: object) -> bool:
        return any(name in source for source in self._sources)

    def list_templates(self) -> list[str]:
        """Merge template names from all sources (deduplicated, sorted)."""
        templates: set[str] = set()
        for source in self._sources:
            if hasattr(source, "list_templates"):
                templates.update(source.list_templates())
            elif hasattr(source, "keys"):
                templates.update(source.keys())
        return sorted(templates)
