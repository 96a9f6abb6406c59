"""Redis store backend — documents kept as JSON strings."""

from __future__ import annotations

import json
from typing import Any

from redis.asyncio import Redis

from herald.errors.delivery_errors import StoreError


class RedisStore:
    """Redis-based document store using redis-py's asyncio client."""

    def __init__(self, url: str, *, prefix: str = "herald:") -> None:
        self._url = url
        self._prefix = prefix
        self._redis: Redis | None = None

    async def connect(self) -> None:
        """Connect to Redis and verify with PING.

        Raises:
            StoreError: If Redis is unreachable.
        """
        self._redis = Redis.from_url(self._url, encoding="utf-8", decode_responses=True)
        try:
            await self._redis.ping()
        except Exception as exc:
            msg = f"Failed to connect to Redis at {self._url}"
            raise StoreError(msg) from exc

    async def close(self) -> None:
        """Close the Redis connection."""
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None

    async def load(self, key: str) -> dict[str, Any] | None:
        assert self._redis is not None
        raw = await self._redis.get(self._prefix + key)
        if raw is None:
            return None
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise StoreError(f"redis key {key!r} does not contain a JSON object")
        return data

    async def save(self, key: str, document: dict[str, Any]) -> None:
        assert self._redis is not None
        await self._redis.set(self._prefix + key, json.dumps(document))
