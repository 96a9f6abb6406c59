"""Job types for the delivery queue."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

    from herald.templates.renderer import RenderValue


@dataclass(frozen=True)
class DeliveryOptions:
    """Per-job channel message options.

    Attributes:
        mention: Plain text sent alongside the embed (e.g. ``@here``).
        components: Opaque interactive component descriptors, passed through.
    """

    mention: str | None = None
    components: tuple[Any, ...] | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> DeliveryOptions:
        """Build options from a loose mapping, ignoring unknown keys."""
        if not data:
            return cls()
        components = data.get("components")
        return cls(
            mention=data.get("mention"),
            components=tuple(components) if components else None,
        )


@dataclass
class NotificationJob:
    """One queued notification awaiting render and delivery."""

    id: str
    type: str
    data: dict[str, RenderValue | None] = field(default_factory=dict)
    channels: tuple[str, ...] = ()
    options: DeliveryOptions = field(default_factory=DeliveryOptions)
    enqueued_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    retry_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Summary used by introspection endpoints."""
        return {
            "id": self.id,
            "type": self.type,
            "channels": list(self.channels),
            "enqueued_at": self.enqueued_at.isoformat(),
            "retry_count": self.retry_count,
        }
