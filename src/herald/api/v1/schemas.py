"""V1 API request/response Pydantic schemas.

These define the HTTP contract only; endpoints map them to and from the
notification service's dataclasses.
"""

from __future__ import annotations

from datetime import datetime  # noqa: TC003 - Pydantic needs this at runtime
from typing import Any

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Generic
# ---------------------------------------------------------------------------


class ErrorResponse(BaseModel):
    """Standard error body."""

    code: str
    message: str


class RemovedResponse(BaseModel):
    removed: bool


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------

RenderInput = str | int | float | datetime | None


class DeliveryOptionsModel(BaseModel):
    mention: str | None = None
    components: list[Any] | None = None


class NotificationRequest(BaseModel):
    """Queue a notification."""

    type: str = Field(min_length=1)
    data: dict[str, RenderInput] = Field(default_factory=dict)
    channels: list[str] = Field(default_factory=list)
    options: DeliveryOptionsModel = Field(default_factory=DeliveryOptionsModel)
    use_subscriptions: bool = Field(
        default=False,
        description="Also send to every channel subscribed to this type",
    )


class ScheduledNotificationRequest(NotificationRequest):
    send_at: datetime


class TestNotificationRequest(BaseModel):
    type: str = Field(min_length=1)
    channel_id: str = Field(min_length=1)


class QueuedResponse(BaseModel):
    """``id`` is a job id, or a ``scheduled_*`` token for future deliveries."""

    id: str
    scheduled: bool = False


# ---------------------------------------------------------------------------
# Subscriptions
# ---------------------------------------------------------------------------


class SubscriptionRequest(BaseModel):
    channel_id: str = Field(min_length=1)
    types: list[str] = Field(default_factory=lambda: ["all"])


class SubscriptionResponse(BaseModel):
    channel_id: str
    types: list[str]
    settings: dict[str, Any] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Webhooks
# ---------------------------------------------------------------------------


class WebhookCreateRequest(BaseModel):
    url: str = Field(min_length=1)
    types: list[str] = Field(default_factory=lambda: ["all"])
    name: str | None = None


class WebhookResponse(BaseModel):
    id: str
    url: str
    types: list[str]
    name: str
    created_at: datetime
    last_used_at: datetime | None = None
    messages_sent: int = 0


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------


class TemplateFieldModel(BaseModel):
    name: str
    value: str
    inline: bool = False


class TemplateModel(BaseModel):
    name: str
    title: str
    color: int | str = 0
    fields: list[TemplateFieldModel] = Field(default_factory=list)
    footer: str | None = None


class TemplateUpsertRequest(BaseModel):
    title: str
    color: int | str = 0
    fields: list[TemplateFieldModel] = Field(default_factory=list)
    footer: str | None = None


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------


class StatsResponse(BaseModel):
    queue_size: int
    scheduled_pending: int
    total_webhooks: int
    total_subscriptions: int
    type_breakdown: dict[str, int]
    webhook_stats: dict[str, dict[str, Any]]
    delivery: dict[str, int]
    ticks: int = 0
