"""Template registry — named notification layouts.

A template describes the shape of a notification: title, colour, an ordered
list of fields and an optional footer.  Any of these may contain ``{key}``
placeholders, filled in by :mod:`herald.templates.renderer`.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any

from herald.errors.delivery_errors import TemplateNotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TemplateField:
    """One field line of a template."""

    name: str
    value: str
    inline: bool = False


@dataclass(frozen=True)
class Template:
    """Immutable notification layout.

    Attributes:
        name: Notification type this template renders.
        title: Title text, may contain placeholders.
        color: Either an ``int`` (0xRRGGBB) or a ``"#rrggbb"`` string.
        fields: Ordered field definitions.
        footer: Optional footer text, may contain placeholders.
    """

    name: str
    title: str
    color: int | str = 0
    fields: tuple[TemplateField, ...] = field(default_factory=tuple)
    footer: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict."""
        data = asdict(self)
        data["fields"] = [asdict(f) for f in self.fields]
        return data

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> Template:
        """Build a template from a plain dict (API payloads, config files)."""
        fields = tuple(
            TemplateField(
                name=str(f.get("name", "")),
                value=str(f.get("value", "")),
                inline=bool(f.get("inline", False)),
            )
            for f in data.get("fields") or ()
        )
        return cls(
            name=name,
            title=str(data.get("title", "")),
            color=data.get("color", 0),
            fields=fields,
            footer=data.get("footer"),
        )


class TemplateRegistry:
    """In-memory map of notification type to :class:`Template`."""

    def __init__(self, templates: Iterable[Template] = ()) -> None:
        self._templates: dict[str, Template] = {}
        for template in templates:
            self.register(template)

    def register(self, template: Template) -> None:
        """Add or replace the template registered under ``template.name``."""
        if template.name in self._templates:
            logger.debug("Replacing template %r", template.name)
        self._templates[template.name] = template

    def get(self, name: str) -> Template:
        """Return the template for *name*.

        Raises:
            TemplateNotFoundError: If nothing is registered under *name*.
        """
        try:
            return self._templates[name]
        except KeyError:
            raise TemplateNotFoundError(name) from None

    def find(self, name: str) -> Template | None:
        """Return the template for *name*, or ``None``."""
        return self._templates.get(name)

    def list(self) -> list[Template]:
        """All registered templates, in registration order."""
        return list(self._templates.values())

    def __contains__(self, name: object) -> bool:
        return name in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self) -> Iterator[Template]:
        return iter(list(self._templates.values()))
