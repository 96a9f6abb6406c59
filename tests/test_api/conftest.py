"""Fixtures for the admin API tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from fastapi.testclient import TestClient

from herald.api.app import create_app
from herald.config.settings import AppConfig, NotificationConfig, StoreConfig, StoreEngine
from herald.metrics.collector import NotificationMetrics
from herald.notifications.service import NotificationService

if TYPE_CHECKING:
    from collections.abc import Iterator

API_KEY = "test-key"


@pytest.fixture
def api_config() -> AppConfig:
    # Slow ticks so the queue stays observable between requests.
    return AppConfig(
        api_key=API_KEY,
        notifications=NotificationConfig(tick_interval=60),
        store=StoreConfig(engine=StoreEngine.MEMORY),
    )


@pytest.fixture
def api_service(api_config, channel_sink, webhook_sink) -> NotificationService:
    return NotificationService(
        api_config,
        channel_sink=channel_sink,
        webhook_sink=webhook_sink,
        metrics=NotificationMetrics(),
    )


@pytest.fixture
def client(api_config, api_service) -> Iterator[TestClient]:
    app = create_app(config=api_config, service=api_service)
    with TestClient(app, headers={"X-API-Key": API_KEY}) as c:
        yield c
