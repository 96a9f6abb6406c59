"""Tests for the ConfigStore abstraction and its backends."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from herald.config.settings import StoreConfig, StoreEngine
from herald.errors.delivery_errors import StoreError
from herald.store.client import ConfigStore
from herald.store.json_file import JsonFileStore
from herald.store.memory import MemoryStore
from herald.store.redis import RedisStore

if TYPE_CHECKING:
    from pathlib import Path

DOCUMENT = {
    "webhooks": [["ab12", {"url": "https://hooks.test/a", "types": ["all"]}]],
    "subscriptions": [["c1", {"types": ["security"], "settings": {}}]],
}


class _FakeRedis:
    """Dict-backed stand-in for ``redis.asyncio.Redis``."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value

    async def aclose(self) -> None:
        pass


class TestConfigStore:
    """ConfigStore with the in-memory backend."""

    async def test_not_connected_by_default(self) -> None:  # noqa: ASYNC910
        store = ConfigStore(StoreConfig(engine=StoreEngine.MEMORY))
        assert not store.is_connected

    async def test_connect_memory_backend(self) -> None:
        store = ConfigStore(StoreConfig(engine=StoreEngine.MEMORY))
        await store.connect()
        assert store.is_connected
        assert isinstance(store._backend, MemoryStore)
        await store.close()
        await store.close()
        assert not store.is_connected

    async def test_connect_json_backend(self, tmp_path: Path) -> None:
        store = ConfigStore(StoreConfig(engine=StoreEngine.JSON, path=str(tmp_path / "data")))
        await store.connect()
        assert isinstance(store._backend, JsonFileStore)
        assert (tmp_path / "data").is_dir()
        await store.close()

    async def test_unsupported_engine(self) -> None:
        store = ConfigStore(StoreConfig.model_construct(engine="ftp"))
        with pytest.raises(ValueError, match="Unsupported store engine"):
            await store.connect()

    async def test_save_and_load(self, memory_store: ConfigStore) -> None:
        assert await memory_store.load("notifications") is None
        await memory_store.save("notifications", DOCUMENT)
        assert await memory_store.load("notifications") == DOCUMENT

    async def test_save_replaces_document(self, memory_store: ConfigStore) -> None:
        await memory_store.save("k", {"a": 1})
        await memory_store.save("k", {"b": 2})
        assert await memory_store.load("k") == {"b": 2}

    async def test_loaded_document_is_a_copy(self, memory_store: ConfigStore) -> None:
        await memory_store.save("k", {"items": [1]})
        loaded = await memory_store.load("k")
        loaded["items"].append(2)
        assert await memory_store.load("k") == {"items": [1]}

    async def test_not_connected_raises_store_error(self) -> None:
        store = ConfigStore(StoreConfig(engine=StoreEngine.MEMORY))
        with pytest.raises(StoreError, match="not connected"):
            await store.load("k")
        with pytest.raises(StoreError):
            await store.save("k", {})

    async def test_backend_errors_wrapped(self, tmp_path: Path) -> None:
        store = ConfigStore(StoreConfig(engine=StoreEngine.JSON, path=str(tmp_path)))
        await store.connect()
        (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(StoreError) as exc_info:
            await store.load("broken")
        assert exc_info.value.code == "config-persistence-failure"


class TestJsonFileStore:
    async def test_round_trip_on_disk(self, tmp_path: Path) -> None:
        backend = JsonFileStore(tmp_path)
        await backend.connect()
        await backend.save("notifications", DOCUMENT)
        on_disk = json.loads((tmp_path / "notifications.json").read_text(encoding="utf-8"))
        assert on_disk == DOCUMENT
        assert await backend.load("notifications") == DOCUMENT

    async def test_missing_file(self, tmp_path: Path) -> None:
        assert await JsonFileStore(tmp_path).load("nothing") is None

    async def test_no_temp_files_left(self, tmp_path: Path) -> None:
        backend = JsonFileStore(tmp_path)
        await backend.save("k", {"a": 1})
        await backend.save("k", {"a": 2})
        assert [p.name for p in tmp_path.iterdir()] == ["k.json"]

    async def test_non_object_rejected(self, tmp_path: Path) -> None:
        (tmp_path / "list.json").write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(StoreError):
            await JsonFileStore(tmp_path).load("list")


class TestRedisStore:
    async def test_save_and_load_with_prefix(self) -> None:
        backend = RedisStore("redis://localhost:6379/0")
        fake = _FakeRedis()
        backend._redis = fake
        await backend.save("notifications", DOCUMENT)
        assert "herald:notifications" in fake.data
        assert await backend.load("notifications") == DOCUMENT
        assert await backend.load("other") is None
        await backend.close()
        assert backend._redis is None

    async def test_non_object_rejected(self) -> None:
        backend = RedisStore("redis://localhost:6379/0")
        fake = _FakeRedis()
        fake.data["herald:k"] = "42"
        backend._redis = fake
        with pytest.raises(StoreError):
            await backend.load("k")
