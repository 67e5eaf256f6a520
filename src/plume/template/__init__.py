"""Plume Template package — templates, renderers and registries."""

from plume.template.core import Template
from plume.template.registry import CONTENT_SLOT, TemplateRegistry
from plume.template.renderer import CompiledRenderer

__all__ = [
    "CONTENT_SLOT",
    "CompiledRenderer",
    "Template",
    "TemplateRegistry",
]
