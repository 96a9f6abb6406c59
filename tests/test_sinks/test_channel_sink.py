"""Tests for the Discord channel sink."""

from __future__ import annotations

import json

import httpx
import pytest

from herald.config.settings import DiscordConfig
from herald.errors.delivery_errors import SinkError
from herald.notifications.jobs import DeliveryOptions
from herald.sinks.channel import DiscordChannelSink, build_channel_payload
from herald.templates.renderer import RenderedField, RenderedMessage

API = "https://discord.test/api/v10"


def _message() -> RenderedMessage:
    return RenderedMessage(
        type="event",
        title="🎉 Special Event",
        color=0x9932CC,
        fields=(RenderedField("Event", "Hackathon"),),
        footer="Don't miss it!",
    )


def _sink(handler) -> DiscordChannelSink:
    sink = DiscordChannelSink(DiscordConfig(api_url=API, bot_token="tok"))
    sink._client = httpx.AsyncClient(
        base_url=API,
        headers={"Authorization": "Bot tok"},
        transport=httpx.MockTransport(handler),
    )
    return sink


class TestBuildChannelPayload:
    def test_embed_only(self) -> None:
        payload = build_channel_payload(_message(), DeliveryOptions())
        assert set(payload) == {"embeds"}
        embed = payload["embeds"][0]
        assert embed["title"] == "🎉 Special Event"
        assert embed["color"] == 0x9932CC
        assert embed["fields"] == [{"name": "Event", "value": "Hackathon", "inline": False}]
        assert embed["footer"] == {"text": "Don't miss it!"}

    def test_mention_and_components(self) -> None:
        options = DeliveryOptions(mention="@here", components=({"type": 1},))
        payload = build_channel_payload(_message(), options)
        assert payload["content"] == "@here"
        assert payload["components"] == [{"type": 1}]


class TestDiscordChannelSink:
    async def test_posts_to_channel_messages(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"id": "1"})

        sink = _sink(handler)
        await sink.send("1234", _message(), DeliveryOptions(mention="@everyone"))
        await sink.close()

        [request] = seen
        assert request.method == "POST"
        assert request.url.path == "/api/v10/channels/1234/messages"
        assert request.headers["Authorization"] == "Bot tok"
        body = json.loads(request.content)
        assert body["content"] == "@everyone"

    async def test_unknown_channel(self) -> None:
        sink = _sink(lambda request: httpx.Response(404, json={"message": "Unknown Channel"}))
        with pytest.raises(SinkError) as exc_info:
            await sink.send("999", _message(), DeliveryOptions())
        assert exc_info.value.destination == "999"
        assert "not found" in exc_info.value.message

    async def test_rejected_post(self) -> None:
        sink = _sink(lambda request: httpx.Response(403, text="Missing Permissions"))
        with pytest.raises(SinkError, match="403"):
            await sink.send("1", _message(), DeliveryOptions())

    async def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        sink = _sink(handler)
        with pytest.raises(SinkError):
            await sink.send("1", _message(), DeliveryOptions())

    async def test_not_connected(self) -> None:
        sink = DiscordChannelSink(DiscordConfig())
        assert not sink.is_connected
        with pytest.raises(SinkError):
            await sink.send("1", _message(), DeliveryOptions())

    async def test_connect_close(self) -> None:
        sink = DiscordChannelSink(DiscordConfig(bot_token="abc"))
        await sink.connect()
        assert sink.is_connected
        await sink.close()
        assert not sink.is_connected
