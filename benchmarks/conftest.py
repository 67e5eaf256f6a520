"""Shared fixtures for plume benchmarks.

Each scenario is defined once as a pair of equivalent plume and Jinja2
sources so the two engines render the same output from the same context.
"""

from __future__ import annotations

import importlib.metadata as importlib_metadata
import json
import os
import platform
import sys
from pathlib import Path

import pytest
from jinja2 import DictLoader
from jinja2 import Environment as Jinja2Environment

BASE_DIR = Path(__file__).resolve().parent
BENCHMARK_OUTPUT_DIR = BASE_DIR.parent / ".benchmarks"

PLUME_SOURCES = {
    "minimal": "Hello {{name}}!",
    "loop": "<ul>{{#items}}<li>{{name}}: {{price}}</li>{{/items}}</ul>",
    "partials": "{{*header}}{{#items}}{{*row}}{{/items}}",
    "row": "<li>{{name}}</li>",
    "header": "<h1>{{title}}</h1>",
    "layout": "<html><body>{{*}}</body></html>",
}

JINJA2_SOURCES = {
    "minimal": "Hello {{ name }}!",
    "loop": "<ul>{% for item in items %}<li>{{ item.name }}: {{ item.price }}</li>{% endfor %}</ul>",
    "partials": (
        "{% include 'header' %}{% for item in items %}"
        "{% with name=item.name %}{% include 'row' %}{% endwith %}{% endfor %}"
    ),
    "row": "<li>{{ name }}</li>",
    "header": "<h1>{{ title }}</h1>",
    "layout": "<html><body>{% block content %}{% endblock %}</body></html>",
    "page": "{% extends 'layout' %}{% block content %}{% include 'loop' %}{% endblock %}",
}


def _version(dist: str) -> str:
    try:
        return importlib_metadata.version(dist)
    except importlib_metadata.PackageNotFoundError:
        return "unknown"


def collect_environment_metadata() -> dict[str, object]:
    """Capture reproducibility metadata for each benchmark run."""
    return {
        "python": {
            "version": platform.python_version(),
            "implementation": platform.python_implementation(),
        },
        "os": {"system": platform.system(), "machine": platform.machine()},
        "cpu": {"count": os.cpu_count()},
        "gil_enabled": getattr(sys, "_is_gil_enabled", lambda: True)(),
        "plume": _version("plume-templates"),
        "jinja2": _version("jinja2"),
    }


@pytest.fixture(scope="session", autouse=True)
def environment_metadata() -> dict[str, object]:
    """Write environment metadata to .benchmarks for ingestion."""
    metadata = collect_environment_metadata()
    BENCHMARK_OUTPUT_DIR.mkdir(exist_ok=True)
    (BENCHMARK_OUTPUT_DIR / "environment.json").write_text(json.dumps(metadata, indent=2))
    return metadata


@pytest.fixture(scope="session")
def jinja2_env() -> Jinja2Environment:
    return Jinja2Environment(loader=DictLoader(JINJA2_SOURCES), autoescape=False)


@pytest.fixture(scope="session")
def plume_sources() -> dict[str, str]:
    return dict(PLUME_SOURCES)


@pytest.fixture(scope="session")
def items_context() -> dict[str, object]:
    return {
        "title": "Catalog",
        "items": [{"name": f"item-{i}", "price": i * 3} for i in range(100)],
    }
