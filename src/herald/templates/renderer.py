"""Renderer — turn a template plus a data bag into a deliverable message.

Placeholder policy:
- ``{key}`` is replaced by ``data[key]`` when present and not ``None``;
- otherwise the token stays verbatim, so a missing value is visible;
- a field whose rendered value is empty, ``"undefined"`` or ``"null"`` is
  dropped from the message.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

    from herald.templates.registry import Template, TemplateRegistry

RenderValue = str | int | float | datetime

FIELD_VALUE_LIMIT = 1024
TRUNCATION_MARKER = "..."

_PLACEHOLDER = re.compile(r"\{(\w+)\}")
_OMITTED_VALUES = frozenset({"", "undefined", "null"})


@dataclass(frozen=True)
class RenderedField:
    """A field after substitution and truncation."""

    name: str
    value: str
    inline: bool = False


@dataclass(frozen=True)
class RenderedMessage:
    """Structured message ready for a channel or webhook sink."""

    type: str
    title: str
    color: int
    fields: tuple[RenderedField, ...] = ()
    footer: str | None = None
    thumbnail: str | None = None
    image: str | None = None
    rendered_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))

    def to_embed(self) -> dict[str, Any]:
        """Chat-platform embed payload for this message."""
        embed: dict[str, Any] = {
            "title": self.title,
            "color": self.color,
            "timestamp": self.rendered_at.isoformat(),
        }
        if self.fields:
            embed["fields"] = [
                {"name": f.name, "value": f.value, "inline": f.inline} for f in self.fields
            ]
        if self.footer is not None:
            embed["footer"] = {"text": self.footer}
        if self.thumbnail:
            embed["thumbnail"] = {"url": self.thumbnail}
        if self.image:
            embed["image"] = {"url": self.image}
        return embed


def parse_color(color: int | str) -> int:
    """Convert ``"#rrggbb"`` / ``"0xrrggbb"`` / int to an integer colour.

    Unparseable values map to 0 rather than failing the render.
    """
    if isinstance(color, int):
        return color
    text = color.strip().lower().removeprefix("#").removeprefix("0x")
    try:
        return int(text, 16)
    except ValueError:
        return 0


def format_value(value: RenderValue) -> str:
    """Stringify a data bag value for substitution."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.strftime("%Y-%m-%d %H:%M")
        return value.strftime("%Y-%m-%d %H:%M %Z").strip()
    return str(value)


def substitute(text: str, data: Mapping[str, RenderValue | None]) -> str:
    """Replace ``{key}`` tokens in *text*, leaving unknown keys verbatim."""

    def _replace(match: re.Match[str]) -> str:
        value = data.get(match.group(1))
        if value is None:
            return match.group(0)
        return format_value(value)

    return _PLACEHOLDER.sub(_replace, text)


def truncate(value: str, limit: int = FIELD_VALUE_LIMIT) -> str:
    """Clip *value* to *limit* characters, ending in the truncation marker."""
    if len(value) <= limit:
        return value
    return value[: limit - len(TRUNCATION_MARKER)] + TRUNCATION_MARKER


class Renderer:
    """Pure renderer bound to a :class:`TemplateRegistry`."""

    def __init__(self, registry: TemplateRegistry, *, field_limit: int = FIELD_VALUE_LIMIT) -> None:
        self._registry = registry
        self._field_limit = field_limit

    def render(self, template_type: str, data: Mapping[str, RenderValue | None]) -> RenderedMessage:
        """Render the template registered for *template_type*.

        Raises:
            TemplateNotFoundError: If *template_type* is not registered.
        """
        template = self._registry.get(template_type)
        return self.render_template(template, data)

    def render_template(
        self,
        template: Template,
        data: Mapping[str, RenderValue | None],
    ) -> RenderedMessage:
        """Render an explicit template object."""
        fields: list[RenderedField] = []
        for tf in template.fields:
            value = substitute(tf.value, data)
            if value in _OMITTED_VALUES:
                continue
            fields.append(
                RenderedField(
                    name=substitute(tf.name, data),
                    value=truncate(value, self._field_limit),
                    inline=tf.inline,
                )
            )

        footer = substitute(template.footer, data) if template.footer else None
        thumbnail = data.get("thumbnail")
        image = data.get("image")
        return RenderedMessage(
            type=template.name,
            title=substitute(template.title, data),
            color=parse_color(template.color),
            fields=tuple(fields),
            footer=footer,
            thumbnail=format_value(thumbnail) if thumbnail else None,
            image=format_value(image) if image else None,
        )
