"""Notifications — queue, processor, scheduler and destination directories.

Provides:
- ``NotificationService`` — owns all state and exposes the public operations
- ``QueueProcessor`` — the periodic drain/render/fan-out step
- ``SubscriptionDirectory`` / ``WebhookDirectory`` — who receives which types
"""

from __future__ import annotations

from herald.notifications.jobs import DeliveryOptions, NotificationJob
from herald.notifications.processor import DeliveryCounters, QueueProcessor
from herald.notifications.queue import DeliveryQueue
from herald.notifications.scheduler import Scheduler
from herald.notifications.service import NotificationService
from herald.notifications.subscriptions import WILDCARD, SubscriptionDirectory
from herald.notifications.webhooks import WebhookDirectory, WebhookRegistration

__all__ = [
    "WILDCARD",
    "DeliveryCounters",
    "DeliveryOptions",
    "DeliveryQueue",
    "NotificationJob",
    "NotificationService",
    "QueueProcessor",
    "Scheduler",
    "SubscriptionDirectory",
    "WebhookDirectory",
    "WebhookRegistration",
]
