"""Subscription directory — which channels want which notification types."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from herald.errors.definitions import ErrEmptyTypes

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

WILDCARD = "all"


def matches(types: Iterable[str], notification_type: str) -> bool:
    """True when *types* contains *notification_type* or the wildcard."""
    return any(t == notification_type or t == WILDCARD for t in types)


def normalize_types(types: Iterable[str] | str) -> list[str]:
    """Strip, drop blanks and de-duplicate while keeping order.

    A bare string is one type, not a sequence of characters.
    """
    if isinstance(types, str):
        types = (types,)
    seen: list[str] = []
    for raw in types:
        t = str(raw).strip()
        if t and t not in seen:
            seen.append(t)
    return seen


@dataclass
class Subscription:
    """Types a single channel is subscribed to."""

    destination_id: str
    types: list[str] = field(default_factory=list)
    settings: dict[str, Any] = field(default_factory=dict)

    def to_record(self) -> dict[str, Any]:
        return {"types": list(self.types), "settings": dict(self.settings)}


class SubscriptionDirectory:
    """In-memory map of channel id to :class:`Subscription`.

    Entries with an empty type list are deleted, never kept.
    """

    def __init__(self) -> None:
        self._subscriptions: dict[str, Subscription] = {}

    def subscribe(self, destination_id: str, types: Iterable[str] = (WILDCARD,)) -> Subscription:
        """Add *types* to the channel's subscription, creating it if needed.

        Raises:
            HeraldError: If *types* is empty.
        """
        wanted = normalize_types(types)
        if not wanted:
            raise ErrEmptyTypes
        sub = self._subscriptions.get(destination_id)
        if sub is None:
            sub = Subscription(destination_id=destination_id)
            self._subscriptions[destination_id] = sub
        for t in wanted:
            if t not in sub.types:
                sub.types.append(t)
        return sub

    def unsubscribe(self, destination_id: str, types: Iterable[str] | None = None) -> bool:
        """Remove *types* (or everything when ``None``) from a channel.

        Returns ``False`` if the channel had no subscription.
        """
        sub = self._subscriptions.get(destination_id)
        if sub is None:
            return False
        if types is None:
            del self._subscriptions[destination_id]
            return True
        removed = set(normalize_types(types))
        sub.types = [t for t in sub.types if t not in removed]
        if not sub.types:
            del self._subscriptions[destination_id]
        return True

    def get(self, destination_id: str) -> Subscription | None:
        return self._subscriptions.get(destination_id)

    def list(self) -> list[dict[str, Any]]:
        """All subscriptions with their channel id."""
        return [
            {"channel_id": cid, **sub.to_record()} for cid, sub in self._subscriptions.items()
        ]

    def destinations_for(self, notification_type: str) -> list[str]:
        """Channel ids subscribed to *notification_type* or to everything."""
        return [
            cid for cid, sub in self._subscriptions.items() if matches(sub.types, notification_type)
        ]

    def type_breakdown(self) -> dict[str, int]:
        """Number of subscribed channels per type (the wildcard counted as ``all``)."""
        counts: dict[str, int] = {}
        for sub in self._subscriptions.values():
            for t in sub.types:
                counts[t] = counts.get(t, 0) + 1
        return counts

    # -- Persistence --

    def to_records(self) -> list[list[Any]]:
        """``[[channel_id, record], ...]`` for the config store."""
        return [[cid, sub.to_record()] for cid, sub in self._subscriptions.items()]

    def load_records(self, records: Iterable[Any]) -> None:
        """Replace the directory contents from persisted records."""
        self._subscriptions.clear()
        for entry in records:
            try:
                cid, record = entry
                types = normalize_types(record.get("types") or ())
                settings = dict(record.get("settings") or {})
            except (TypeError, ValueError, AttributeError):
                logger.warning("Skipping malformed subscription record: %r", entry)
                continue
            if not types:
                continue
            self._subscriptions[str(cid)] = Subscription(
                destination_id=str(cid), types=types, settings=settings
            )

    def __len__(self) -> int:
        return len(self._subscriptions)

    def __contains__(self, destination_id: object) -> bool:
        return destination_id in self._subscriptions
