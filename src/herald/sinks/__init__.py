"""Sinks — channel and webhook delivery transports."""

from __future__ import annotations

from herald.sinks.channel import ChannelSink, DiscordChannelSink
from herald.sinks.webhook import HttpWebhookSink, WebhookSink

__all__ = [
    "ChannelSink",
    "DiscordChannelSink",
    "HttpWebhookSink",
    "WebhookSink",
]
