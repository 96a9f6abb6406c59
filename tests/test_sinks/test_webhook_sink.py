"""Tests for the incoming-webhook sink."""

from __future__ import annotations

import json

import httpx
import pytest

from herald.errors.delivery_errors import SinkError
from herald.sinks.webhook import HttpWebhookSink, build_webhook_payload
from herald.templates.renderer import RenderedMessage

URL = "https://hooks.test/abc"


def _message() -> RenderedMessage:
    return RenderedMessage(type="security", title="🚨 Security Alert", color=0xFF0000)


def _sink(handler) -> HttpWebhookSink:
    sink = HttpWebhookSink(timeout=1.0)
    sink._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return sink


class TestBuildWebhookPayload:
    def test_identity(self) -> None:
        payload = build_webhook_payload("Bot", "https://a/logo.png", _message())
        assert payload["username"] == "Bot"
        assert payload["avatar_url"] == "https://a/logo.png"
        assert payload["embeds"][0]["title"] == "🚨 Security Alert"
        assert "fields" not in payload["embeds"][0]

    def test_no_avatar(self) -> None:
        assert "avatar_url" not in build_webhook_payload("Bot", "", _message())


class TestHttpWebhookSink:
    async def test_posts_json(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(204)

        sink = _sink(handler)
        await sink.post(URL, "Bot", "", _message())
        [request] = seen
        assert str(request.url) == URL
        assert json.loads(request.content)["username"] == "Bot"

    async def test_error_status(self) -> None:
        sink = _sink(lambda request: httpx.Response(500, text="oops"))
        with pytest.raises(SinkError) as exc_info:
            await sink.post(URL, "Bot", "", _message())
        assert exc_info.value.destination == URL
        assert exc_info.value.status_code == 502

    async def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        sink = _sink(handler)
        with pytest.raises(SinkError):
            await sink.post(URL, "Bot", "", _message())

    async def test_not_connected(self) -> None:
        with pytest.raises(SinkError):
            await HttpWebhookSink().post(URL, "Bot", "", _message())
