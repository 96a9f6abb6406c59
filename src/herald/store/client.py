"""Configuration store abstraction with memory, JSON-file and Redis backends.

The store holds small JSON documents addressed by key.  The notification
service persists its subscription and webhook maps through it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

from herald.errors.delivery_errors import StoreError

if TYPE_CHECKING:
    from herald.config.settings import StoreConfig

logger = logging.getLogger(__name__)


class StoreBackend(Protocol):
    """Protocol for store backend implementations."""

    async def connect(self) -> None: ...
    async def close(self) -> None: ...
    async def load(self, key: str) -> dict[str, Any] | None: ...
    async def save(self, key: str, document: dict[str, Any]) -> None: ...


class ConfigStore:
    """Key-value document store that delegates to the configured backend."""

    def __init__(self, config: StoreConfig) -> None:
        """Initialize the store client.

        Args:
            config: Store configuration with engine type and location.
        """
        self._config = config
        self._backend: StoreBackend | None = None

    @property
    def is_connected(self) -> bool:
        """Whether a backend is active."""
        return self._backend is not None

    async def connect(self) -> None:
        """Create and connect the backend.

        Raises:
            ValueError: If the store engine is not supported.
        """
        from herald.store.json_file import JsonFileStore
        from herald.store.memory import MemoryStore
        from herald.store.redis import RedisStore

        engine = self._config.engine.lower()
        if engine == "memory":
            backend: StoreBackend = MemoryStore()
        elif engine == "json":
            backend = JsonFileStore(self._config.path)
        elif engine == "redis":
            backend = RedisStore(self._config.redis_url)
        else:
            msg = f"Unsupported store engine: {engine}"
            raise ValueError(msg)

        await backend.connect()
        self._backend = backend
        logger.info("Config store connected (%s)", engine)

    async def close(self) -> None:
        """Close the backend (idempotent)."""
        if self._backend is not None:
            await self._backend.close()
            self._backend = None

    async def load(self, key: str) -> dict[str, Any] | None:
        """Load the document stored under *key*.

        Raises:
            StoreError: If not connected or the backend fails.
        """
        backend = self._ensure_connected()
        try:
            return await backend.load(key)
        except StoreError:
            raise
        except Exception as exc:
            raise StoreError(f"failed to load {key!r}: {exc}") from exc

    async def save(self, key: str, document: dict[str, Any]) -> None:
        """Replace the document stored under *key*.

        Raises:
            StoreError: If not connected or the backend fails.
        """
        backend = self._ensure_connected()
        try:
            await backend.save(key, document)
        except StoreError:
            raise
        except Exception as exc:
            raise StoreError(f"failed to save {key!r}: {exc}") from exc

    def _ensure_connected(self) -> StoreBackend:
        if self._backend is None:
            msg = "Config store not connected. Call connect() first."
            raise StoreError(msg)
        return self._backend
