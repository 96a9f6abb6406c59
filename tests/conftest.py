"""Shared test fixtures for the herald test suite."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import pytest

from herald.config.settings import StoreEngine
from herald.errors.delivery_errors import SinkError

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from herald.notifications.jobs import DeliveryOptions
    from herald.templates.renderer import RenderedMessage


@dataclass
class FakeChannelSink:
    """Records channel sends; channels in ``failing`` raise SinkError."""

    failing: set[str] = field(default_factory=set)
    sent: list[tuple[str, RenderedMessage, DeliveryOptions]] = field(default_factory=list)

    async def send(self, channel_id: str, message: RenderedMessage, options: DeliveryOptions) -> None:
        if channel_id in self.failing:
            raise SinkError(f"channel {channel_id} not found", destination=channel_id)
        self.sent.append((channel_id, message, options))


@dataclass
class FakeWebhookSink:
    """Records webhook posts; URLs in ``failing`` raise SinkError."""

    failing: set[str] = field(default_factory=set)
    posted: list[tuple[str, str, str, RenderedMessage]] = field(default_factory=list)

    async def post(self, url: str, display_name: str, avatar_url: str, message: RenderedMessage) -> None:
        if url in self.failing:
            raise SinkError(f"webhook {url} responded with 500", destination=url)
        self.posted.append((url, display_name, avatar_url, message))


@pytest.fixture
def app_config():
    """Provide a test AppConfig with an in-memory store and fast ticks."""
    from herald.config.settings import AppConfig, NotificationConfig, StoreConfig

    return AppConfig(
        debug=True,
        notifications=NotificationConfig(
            tick_interval=0.05,
            send_timeout=0.5,
            webhook_display_name="Test Notifications",
            webhook_avatar_url="https://example.com/logo.png",
        ),
        store=StoreConfig(engine=StoreEngine.MEMORY),
    )


@pytest.fixture
def channel_sink() -> FakeChannelSink:
    return FakeChannelSink()


@pytest.fixture
def webhook_sink() -> FakeWebhookSink:
    return FakeWebhookSink()


@pytest.fixture
async def memory_store(app_config) -> AsyncIterator:
    """A connected in-memory ConfigStore."""
    from herald.store.client import ConfigStore

    store = ConfigStore(app_config.store)
    await store.connect()
    yield store
    await store.close()


@pytest.fixture
def service(app_config, memory_store, channel_sink, webhook_sink):
    """A NotificationService wired to fakes; not started (tests drive ticks)."""
    from herald.notifications.service import NotificationService

    return NotificationService(
        app_config,
        store=memory_store,
        channel_sink=channel_sink,
        webhook_sink=webhook_sink,
    )
