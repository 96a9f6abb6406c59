"""Predefined notifications for well-known business events.

Each helper builds the data bag for a built-in template, targets the channels
subscribed to that type, and queues the job.  All return the job id.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from herald.notifications.jobs import DeliveryOptions

if TYPE_CHECKING:
    from herald.notifications.service import NotificationService
    from herald.templates.renderer import RenderValue

TEST_MENTION = "🧪 **TEST** - "


def _queue_for_subscribers(
    service: NotificationService,
    notification_type: str,
    data: dict[str, RenderValue | None],
    options: DeliveryOptions | None = None,
) -> str:
    channels = service.channels_for_type(notification_type)
    return service.enqueue(notification_type, data, channels, options)


def notify_maintenance(
    service: NotificationService,
    start: datetime,
    end: datetime,
    reason: str,
    impact: str = "Limited functionality",
) -> str:
    data: dict[str, RenderValue | None] = {
        "startTime": start,
        "endTime": end,
        "reason": reason,
        "impact": impact,
    }
    return _queue_for_subscribers(
        service, "maintenance", data, DeliveryOptions(mention="@everyone")
    )


def notify_new_feature(
    service: NotificationService,
    feature: str,
    description: str,
    usage: str,
    plans: str = "All plans",
) -> str:
    data: dict[str, RenderValue | None] = {
        "feature": feature,
        "description": description,
        "usage": usage,
        "plans": plans,
    }
    return _queue_for_subscribers(service, "feature", data)


def notify_security_alert(
    service: NotificationService,
    kind: str,
    severity: str,
    actions: str,
    details: str,
) -> str:
    # The security template's placeholder for the incident kind is ``{type}``.
    data: dict[str, RenderValue | None] = {
        "type": kind,
        "severity": severity,
        "actions": actions,
        "details": details,
    }
    return _queue_for_subscribers(service, "security", data, DeliveryOptions(mention="@here"))


def notify_update(
    service: NotificationService,
    version: str,
    size: str,
    changelog: str,
    bugfixes: str,
    instructions: str,
) -> str:
    data: dict[str, RenderValue | None] = {
        "version": version,
        "size": size,
        "changelog": changelog,
        "bugfixes": bugfixes,
        "instructions": instructions,
    }
    return _queue_for_subscribers(service, "update", data)


def notify_event(
    service: NotificationService,
    event: str,
    date: str | datetime,
    duration: str,
    rewards: str,
    participation: str,
) -> str:
    data: dict[str, RenderValue | None] = {
        "event": event,
        "date": date,
        "duration": duration,
        "rewards": rewards,
        "participation": participation,
    }
    return _queue_for_subscribers(service, "event", data)


def notify_promotion(
    service: NotificationService,
    offer: str,
    discount: str,
    expires: str | datetime,
    code: str,
    terms: str,
) -> str:
    data: dict[str, RenderValue | None] = {
        "offer": offer,
        "discount": discount,
        "expires": expires,
        "code": code,
        "terms": terms,
    }
    return _queue_for_subscribers(service, "promotion", data)


def send_test_notification(
    service: NotificationService,
    notification_type: str,
    channel_id: str,
) -> str:
    """Queue a sample *notification_type* message to a single channel."""
    now = datetime.now(tz=UTC)
    data: dict[str, RenderValue | None] = {
        "feature": "Test Feature",
        "description": "This is a test notification",
        "usage": "To check the notification pipeline",
        "plans": "Test",
        "startTime": now,
        "endTime": now + timedelta(hours=1),
        "reason": "Notification test",
        "impact": "No impact",
    }
    return service.enqueue(
        notification_type, data, [channel_id], DeliveryOptions(mention=TEST_MENTION)
    )
