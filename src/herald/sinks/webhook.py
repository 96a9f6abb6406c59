"""Webhook sink — post rendered messages to incoming-webhook URLs."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol

import httpx

from herald.errors.delivery_errors import SinkError

if TYPE_CHECKING:
    from herald.templates.renderer import RenderedMessage

logger = logging.getLogger(__name__)


class WebhookSink(Protocol):
    """Anything that can post a rendered message to a webhook URL."""

    async def post(
        self,
        url: str,
        display_name: str,
        avatar_url: str,
        message: RenderedMessage,
    ) -> None: ...


def build_webhook_payload(
    display_name: str,
    avatar_url: str,
    message: RenderedMessage,
) -> dict[str, Any]:
    """Incoming-webhook body with a fixed display identity."""
    payload: dict[str, Any] = {"username": display_name, "embeds": [message.to_embed()]}
    if avatar_url:
        payload["avatar_url"] = avatar_url
    return payload


class HttpWebhookSink:
    """Delivers messages to webhook URLs with a shared ``httpx.AsyncClient``."""

    def __init__(self, *, timeout: float = 10.0) -> None:
        self._timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def connect(self) -> None:
        """Create the underlying HTTP client."""
        self._client = httpx.AsyncClient(timeout=self._timeout)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def is_connected(self) -> bool:
        """Check if the HTTP client is active."""
        return self._client is not None

    async def post(
        self,
        url: str,
        display_name: str,
        avatar_url: str,
        message: RenderedMessage,
    ) -> None:
        """POST *message* to *url*.

        Raises:
            SinkError: On transport errors or a 4xx/5xx response.
        """
        if self._client is None:
            raise SinkError("webhook sink not connected", destination=url)

        try:
            response = await self._client.post(
                url,
                json=build_webhook_payload(display_name, avatar_url, message),
            )
        except httpx.HTTPError as exc:
            raise SinkError(f"webhook {url}: {exc}", destination=url) from exc

        if response.status_code >= 400:
            raise SinkError(
                f"webhook {url} responded with {response.status_code}: {response.text[:120]}",
                destination=url,
            )
        logger.debug("Posted %s notification to webhook %s", message.type, url)
