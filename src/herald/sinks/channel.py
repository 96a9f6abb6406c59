"""Channel sink — post rendered messages into chat channels.

``DiscordChannelSink`` talks to the Discord REST API:
- POST /channels/{channel_id}/messages — create a message with one embed
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

import httpx

from herald.errors.delivery_errors import SinkError

if TYPE_CHECKING:
    from herald.config.settings import DiscordConfig
    from herald.notifications.jobs import DeliveryOptions
    from herald.templates.renderer import RenderedMessage

logger = logging.getLogger(__name__)


class ChannelSink(Protocol):
    """Anything that can deliver a rendered message to a channel id."""

    async def send(
        self,
        channel_id: str,
        message: RenderedMessage,
        options: DeliveryOptions,
    ) -> None: ...


def build_channel_payload(message: RenderedMessage, options: DeliveryOptions) -> dict[str, Any]:
    """Message body: one embed plus optional mention text and components."""
    payload: dict[str, Any] = {"embeds": [message.to_embed()]}
    if options.mention:
        payload["content"] = options.mention
    if options.components:
        payload["components"] = list(options.components)
    return payload


class DiscordChannelSink:
    """Async HTTP client posting channel messages with a bot token.

    Usage::

        sink = DiscordChannelSink(config)
        await sink.connect()
        try:
            await sink.send("123", message, DeliveryOptions())
        finally:
            await sink.close()
    """

    def __init__(self, config: DiscordConfig) -> None:
        self._config = config
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        """Create the underlying HTTP client."""
        headers = {"Content-Type": "application/json"}
        if self._config.bot_token:
            headers["Authorization"] = f"Bot {self._config.bot_token}"
        self._client = httpx.AsyncClient(
            base_url=self._config.api_url.rstrip("/"),
            headers=headers,
            timeout=15.0,
        )

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def is_connected(self) -> bool:
        """Check if the HTTP client is active."""
        return self._client is not None

    async def send(
        self,
        channel_id: str,
        message: RenderedMessage,
        options: DeliveryOptions,
    ) -> None:
        """Post *message* to *channel_id*.

        Raises:
            SinkError: On transport errors, unknown channels or rejected posts.
        """
        if self._client is None:
            raise SinkError("channel sink not connected", destination=channel_id)

        try:
            response = await self._client.post(
                f"/channels/{channel_id}/messages",
                json=build_channel_payload(message, options),
            )
        except httpx.HTTPError as exc:
            raise SinkError(f"channel {channel_id}: {exc}", destination=channel_id) from exc

        if response.status_code == 404:
            raise SinkError(f"channel {channel_id} not found", destination=channel_id)
        if response.status_code >= 400:
            raise SinkError(
                f"channel {channel_id} responded with {response.status_code}: "
                f"{response.text[:120]}",
                destination=channel_id,
            )
        logger.debug("Posted %s notification to channel %s", message.type, channel_id)
