"""Webhook directory — outbound webhook registrations and usage counters."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any
from urllib.parse import urlparse

from herald.errors.definitions import ErrEmptyTypes, ErrInvalidWebhookURL
from herald.notifications.subscriptions import WILDCARD, matches, normalize_types

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


def _parse_ts(value: Any) -> datetime | None:
    if not value:
        return None
    if isinstance(value, int | float):
        return datetime.fromtimestamp(value / 1000 if value > 1e11 else value, tz=UTC)
    return datetime.fromisoformat(str(value))


@dataclass
class WebhookRegistration:
    """A webhook URL and the notification types it receives."""

    id: str
    url: str
    types: list[str] = field(default_factory=lambda: [WILDCARD])
    name: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))
    last_used_at: datetime | None = None
    messages_sent: int = 0

    def to_record(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "types": list(self.types),
            "name": self.name,
            "created_at": self.created_at.isoformat(),
            "last_used_at": self.last_used_at.isoformat() if self.last_used_at else None,
            "messages_sent": self.messages_sent,
        }

    @classmethod
    def from_record(cls, webhook_id: str, record: dict[str, Any]) -> WebhookRegistration:
        """Rebuild a registration; also accepts camelCase/epoch-ms legacy records."""
        return cls(
            id=webhook_id,
            url=str(record["url"]),
            types=normalize_types(record.get("types") or (WILDCARD,)),
            name=str(record.get("name") or f"Webhook {webhook_id}"),
            created_at=_parse_ts(record.get("created_at") or record.get("created"))
            or datetime.now(tz=UTC),
            last_used_at=_parse_ts(record.get("last_used_at") or record.get("lastUsed")),
            messages_sent=int(record.get("messages_sent", record.get("messagesSent", 0)) or 0),
        )


def validate_url(url: str) -> str:
    """Return *url* stripped, or raise if it is not an absolute http(s) URL."""
    url = url.strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ErrInvalidWebhookURL
    return url


class WebhookDirectory:
    """In-memory map of webhook id to :class:`WebhookRegistration`."""

    def __init__(self) -> None:
        self._webhooks: dict[str, WebhookRegistration] = {}

    def add(
        self,
        webhook_id: str,
        url: str,
        types: Iterable[str] = (WILDCARD,),
        name: str | None = None,
    ) -> WebhookRegistration:
        """Register a webhook under *webhook_id*.

        Raises:
            HeraldError: If the URL is not http(s) or *types* is empty.
        """
        url = validate_url(url)
        wanted = normalize_types(types)
        if not wanted:
            raise ErrEmptyTypes
        registration = WebhookRegistration(
            id=webhook_id,
            url=url,
            types=wanted,
            name=name or f"Webhook {webhook_id}",
        )
        self._webhooks[webhook_id] = registration
        return registration

    def remove(self, webhook_id: str, types: Iterable[str] | None = None) -> bool:
        """Remove the webhook, or only *types* from it.

        The registration is deleted when no types remain.  Returns ``False``
        for unknown ids.
        """
        registration = self._webhooks.get(webhook_id)
        if registration is None:
            return False
        if types is None:
            del self._webhooks[webhook_id]
            return True
        removed = set(normalize_types(types))
        registration.types = [t for t in registration.types if t not in removed]
        if not registration.types:
            del self._webhooks[webhook_id]
        return True

    def get(self, webhook_id: str) -> WebhookRegistration | None:
        return self._webhooks.get(webhook_id)

    def list(self) -> list[dict[str, Any]]:
        """All registrations with their id."""
        return [{"id": wid, **wh.to_record()} for wid, wh in self._webhooks.items()]

    def matching(self, notification_type: str) -> list[WebhookRegistration]:
        """Registrations that receive *notification_type*."""
        return [wh for wh in self._webhooks.values() if matches(wh.types, notification_type)]

    def destinations_for(self, notification_type: str) -> list[str]:
        """Ids of the webhooks that receive *notification_type*."""
        return [wh.id for wh in self.matching(notification_type)]

    def record_success(self, webhook_id: str, when: datetime | None = None) -> bool:
        """Bump usage counters after a successful post.

        Returns ``False`` if the webhook was removed in the meantime.
        """
        registration = self._webhooks.get(webhook_id)
        if registration is None:
            return False
        registration.messages_sent += 1
        registration.last_used_at = when or datetime.now(tz=UTC)
        return True

    def usage(self) -> dict[str, dict[str, Any]]:
        """Per-webhook usage summary for stats."""
        return {
            wid: {
                "name": wh.name,
                "messages_sent": wh.messages_sent,
                "last_used_at": wh.last_used_at.isoformat() if wh.last_used_at else None,
                "types": list(wh.types),
            }
            for wid, wh in self._webhooks.items()
        }

    # -- Persistence --

    def to_records(self) -> list[list[Any]]:
        """``[[webhook_id, record], ...]`` for the config store."""
        return [[wid, wh.to_record()] for wid, wh in self._webhooks.items()]

    def load_records(self, records: Iterable[Any]) -> None:
        """Replace the directory contents from persisted records."""
        self._webhooks.clear()
        for entry in records:
            try:
                wid, record = entry
                registration = WebhookRegistration.from_record(str(wid), record)
            except (TypeError, ValueError, KeyError, AttributeError, OverflowError, OSError):
                logger.warning("Skipping malformed webhook record: %r", entry)
                continue
            self._webhooks[registration.id] = registration

    def __len__(self) -> int:
        return len(self._webhooks)

    def __contains__(self, webhook_id: object) -> bool:
        return webhook_id in self._webhooks
