"""In-memory store backend for development and tests."""

from __future__ import annotations

import copy
from typing import Any


class MemoryStore:
    """Keeps deep copies of documents in a dict."""

    def __init__(self) -> None:
        self._documents: dict[str, dict[str, Any]] = {}

    async def connect(self) -> None:  # noqa: ASYNC910
        """Connect (no-op for in-memory)."""

    async def close(self) -> None:  # noqa: ASYNC910
        """Close (documents are kept so a reconnect sees them)."""

    async def load(self, key: str) -> dict[str, Any] | None:  # noqa: ASYNC910
        document = self._documents.get(key)
        return copy.deepcopy(document) if document is not None else None

    async def save(self, key: str, document: dict[str, Any]) -> None:  # noqa: ASYNC910
        self._documents[key] = copy.deepcopy(document)
