"""Pytest configuration and fixtures for Plume tests."""

import pytest

from plume import Template, TemplateRegistry


@pytest.fixture
def html_template():
    """Factory for templates with HTML escaping enabled."""

    def make(content: str, name: str | None = None) -> Template:
        return Template(content, escape="html", name=name)

    return make


@pytest.fixture
def partials():
    """Registry source with a few common partials."""
    return {
        "header": "<h1>{{title}}</h1>",
        "row": "<li>{{name}}</li>",
        "footer": "<footer>plain</footer>",
        "count": 3,
    }


@pytest.fixture
def registry(partials):
    """TemplateRegistry over the ``partials`` fixture."""
    return TemplateRegistry(partials)


@pytest.fixture
def layout():
    """Single layout wrapping child output in a body element."""
    return Template("<body>{{*}}</body>", name="layout.html")


def assert_contains(template_result: str, *expected_parts: str) -> None:
    """Assert template result contains all expected parts.

    Args:
        template_result: The actual template rendering result.
        expected_parts: Strings that should all be present in the result.
    """
    for part in expected_parts:
        assert part in template_result, (
            f"Template output missing expected content:\n"
            f"  Missing: {part!r}\n"
            f"  Actual: {template_result!r}"
        )
