"""Store — persistence of small JSON documents (subscriptions, webhooks)."""

from __future__ import annotations

from herald.store.client import ConfigStore, StoreBackend
from herald.store.memory import MemoryStore

__all__ = ["ConfigStore", "MemoryStore", "StoreBackend"]
