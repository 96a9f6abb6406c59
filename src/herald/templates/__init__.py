"""Templates — registry of notification layouts and the renderer."""

from __future__ import annotations

from herald.templates.defaults import BUILTIN_TEMPLATES
from herald.templates.registry import Template, TemplateField, TemplateRegistry
from herald.templates.renderer import RenderedField, RenderedMessage, Renderer

__all__ = [
    "BUILTIN_TEMPLATES",
    "RenderedField",
    "RenderedMessage",
    "Renderer",
    "Template",
    "TemplateField",
    "TemplateRegistry",
]
