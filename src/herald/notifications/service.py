"""Notification service — owns the queue, directories, templates and sinks.

All state (templates, subscriptions, webhooks, queue) lives on one service
instance with an explicit ``start()`` / ``stop()`` lifecycle.  Every mutation
of the subscription or webhook directories goes through this class so each
one is followed by a full save of both maps.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import TYPE_CHECKING, Any, cast

from herald.errors.delivery_errors import StoreError
from herald.notifications.jobs import DeliveryOptions, NotificationJob
from herald.notifications.processor import QueueProcessor
from herald.notifications.queue import DeliveryQueue
from herald.notifications.scheduler import Scheduler
from herald.notifications.subscriptions import WILDCARD, SubscriptionDirectory
from herald.notifications.webhooks import WebhookDirectory
from herald.sinks.channel import DiscordChannelSink
from herald.sinks.webhook import HttpWebhookSink
from herald.store.client import ConfigStore
from herald.taskmanager.manager import CronJob, TaskManager
from herald.templates.defaults import BUILTIN_TEMPLATES
from herald.templates.registry import TemplateRegistry
from herald.templates.renderer import Renderer
from herald.utils.ids import new_id

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping
    from datetime import datetime

    from herald.config.settings import AppConfig
    from herald.metrics.collector import NotificationMetrics
    from herald.notifications.subscriptions import Subscription
    from herald.sinks.channel import ChannelSink
    from herald.sinks.webhook import WebhookSink
    from herald.templates.registry import Template
    from herald.templates.renderer import RenderValue

logger = logging.getLogger(__name__)

QUEUE_JOB_NAME = "notification-queue"


def _as_options(options: DeliveryOptions | Mapping[str, Any] | None) -> DeliveryOptions:
    if isinstance(options, DeliveryOptions):
        return options
    return DeliveryOptions.from_dict(options)


def _unique(channels: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(str(c) for c in channels))


def _section(document: Mapping[str, Any], name: str) -> list[Any]:
    records = document.get(name) or []
    if not isinstance(records, list):
        logger.warning(
            "Ignoring persisted %s: expected a list, got %s", name, type(records).__name__
        )
        return []
    return records


class NotificationService:
    """Queue-backed notification fan-out to channels and webhooks.

    Usage::

        svc = NotificationService(config)
        await svc.start()
        await svc.subscribe("1234", ["maintenance"])
        job_id = svc.enqueue("maintenance", {"reason": "upgrade"}, ["1234"])
        ...
        await svc.stop()
    """

    def __init__(
        self,
        config: AppConfig,
        *,
        store: ConfigStore | None = None,
        channel_sink: ChannelSink | None = None,
        webhook_sink: WebhookSink | None = None,
        metrics: NotificationMetrics | None = None,
        templates: TemplateRegistry | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._config = config
        settings = config.notifications

        self._owns_store = store is None
        self._store = store or ConfigStore(config.store)

        self._owned_sinks: list[DiscordChannelSink | HttpWebhookSink] = []
        if channel_sink is None:
            channel_sink = DiscordChannelSink(config.discord)
            self._owned_sinks.append(channel_sink)
        if webhook_sink is None:
            webhook_sink = HttpWebhookSink(timeout=settings.send_timeout)
            self._owned_sinks.append(webhook_sink)

        self._templates = templates or TemplateRegistry(BUILTIN_TEMPLATES)
        self._renderer = Renderer(self._templates, field_limit=settings.field_value_limit)
        self._subscriptions = SubscriptionDirectory()
        self._webhooks = WebhookDirectory()
        self._queue = DeliveryQueue()
        self._scheduler = Scheduler(clock=clock) if clock else Scheduler()
        self._metrics = metrics
        self._processor = QueueProcessor(
            queue=self._queue,
            renderer=self._renderer,
            webhooks=self._webhooks,
            channel_sink=channel_sink,
            webhook_sink=webhook_sink,
            config=settings,
            metrics=metrics,
            on_usage_changed=self._persist,
        )
        self._tasks = TaskManager(metrics=metrics)
        self._tasks.register(
            QUEUE_JOB_NAME,
            CronJob(handler=self._processor.tick, period=settings.tick_interval),
        )
        self._running = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        """Whether the queue tick is running."""
        return self._running

    @property
    def renderer(self) -> Renderer:
        return self._renderer

    @property
    def processor(self) -> QueueProcessor:
        return self._processor

    async def start(self) -> None:
        """Connect owned resources, load persisted directories, start the tick."""
        if self._running:
            return
        if self._owns_store:
            await self._store.connect()
        await self.load()
        for sink in self._owned_sinks:
            await sink.connect()
        await self._tasks.start()
        self._running = True
        logger.info(
            "Notification service started (%d subscriptions, %d webhooks)",
            len(self._subscriptions),
            len(self._webhooks),
        )

    async def stop(self) -> None:
        """Stop the tick, disarm scheduled deliveries, close owned resources.

        Jobs still queued are discarded; the queue is in-memory only.
        Scheduled deliveries are disarmed even if the service never started.
        """
        self._scheduler.close()
        if self._metrics:
            self._metrics.set_scheduled_pending(0)
        if not self._running:
            return
        self._running = False
        await self._tasks.stop()
        dropped = self._queue.clear()
        if dropped:
            logger.warning("Discarded %d undelivered jobs on shutdown", dropped)
        for sink in self._owned_sinks:
            await sink.close()
        if self._owns_store:
            await self._store.close()
        logger.info("Notification service stopped")

    async def process_queue(self) -> int:
        """Run one queue tick now.  Returns the number of jobs handled.

        Waits for a scheduled tick that is already running.
        """
        return cast("int", await self._tasks.run_once(QUEUE_JOB_NAME))

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    async def load(self) -> bool:
        """Replace the directories with the persisted document, if any.

        Store failures are logged and leave the current state untouched.
        """
        key = self._config.store.key
        try:
            document = await self._store.load(key)
        except StoreError as exc:
            logger.error("Could not load notification config: %s", exc.message)
            return False
        if not document:
            return False
        self._webhooks.load_records(_section(document, "webhooks"))
        self._subscriptions.load_records(_section(document, "subscriptions"))
        return True

    async def _persist(self) -> bool:
        document = {
            "webhooks": self._webhooks.to_records(),
            "subscriptions": self._subscriptions.to_records(),
        }
        try:
            await self._store.save(self._config.store.key, document)
        except StoreError as exc:
            logger.error("Could not save notification config: %s", exc.message)
            return False
        return True

    # ------------------------------------------------------------------
    # Queueing
    # ------------------------------------------------------------------

    def enqueue(
        self,
        notification_type: str,
        data: Mapping[str, RenderValue | None] | None = None,
        channels: Iterable[str] = (),
        options: DeliveryOptions | Mapping[str, Any] | None = None,
    ) -> str:
        """Queue a notification for the next ticks.  Returns the job id.

        The type is not checked here; an unknown type is reported and
        dropped when the job is rendered.
        """
        job = NotificationJob(
            id=new_id(self._config.notifications.job_id_bytes),
            type=notification_type,
            data=dict(data or {}),
            channels=_unique(channels),
            options=_as_options(options),
        )
        self._queue.push(job)
        if self._metrics:
            self._metrics.set_queue_size(len(self._queue))
        logger.debug("Queued %s job %s for %d channels", job.type, job.id, len(job.channels))
        return job.id

    def schedule_delivery(
        self,
        notification_type: str,
        data: Mapping[str, RenderValue | None] | None,
        channels: Iterable[str],
        send_at: datetime,
        options: DeliveryOptions | Mapping[str, Any] | None = None,
    ) -> str:
        """Queue the notification at *send_at*.

        Returns the job id when *send_at* is not in the future (the job is
        queued immediately), otherwise a ``scheduled_<hex>`` token.
        """
        job_ids: list[str] = []
        action = partial(
            self._enqueue_into,
            job_ids,
            notification_type,
            dict(data or {}),
            _unique(channels),
            _as_options(options),
        )
        token = self._scheduler.schedule(send_at, action)
        if self._metrics:
            self._metrics.set_scheduled_pending(self._scheduler.pending)
        return token if token is not None else job_ids[0]

    def _enqueue_into(self, sink: list[str], *args: Any) -> None:
        sink.append(self.enqueue(*args))
        if self._metrics:
            self._metrics.set_scheduled_pending(self._scheduler.pending)

    def cancel_scheduled(self, token: str) -> bool:
        """Disarm a scheduled delivery that has not been queued yet."""
        cancelled = self._scheduler.cancel(token)
        if self._metrics:
            self._metrics.set_scheduled_pending(self._scheduler.pending)
        return cancelled

    def pending_jobs(self) -> list[NotificationJob]:
        """Snapshot of the queued jobs, head first."""
        return self._queue.snapshot()

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    async def subscribe(
        self,
        channel_id: str,
        types: Iterable[str] = (WILDCARD,),
    ) -> Subscription:
        """Subscribe *channel_id* to *types* (merged with existing ones)."""
        subscription = self._subscriptions.subscribe(channel_id, types)
        await self._persist()
        return subscription

    async def unsubscribe(self, channel_id: str, types: Iterable[str] | None = None) -> bool:
        """Remove *types*, or the whole subscription when ``None``."""
        removed = self._subscriptions.unsubscribe(channel_id, types)
        if removed:
            await self._persist()
        return removed

    def list_subscriptions(self) -> list[dict[str, Any]]:
        return self._subscriptions.list()

    def channels_for_type(self, notification_type: str) -> list[str]:
        """Channels subscribed to *notification_type* or to everything."""
        return self._subscriptions.destinations_for(notification_type)

    # ------------------------------------------------------------------
    # Webhooks
    # ------------------------------------------------------------------

    async def add_webhook(
        self,
        url: str,
        types: Iterable[str] = (WILDCARD,),
        name: str | None = None,
    ) -> str:
        """Register a webhook and return its id."""
        webhook_id = new_id(self._config.notifications.webhook_id_bytes)
        self._webhooks.add(webhook_id, url, types, name)
        await self._persist()
        logger.info("Webhook %s added for %s", webhook_id, url)
        return webhook_id

    async def remove_webhook(self, webhook_id: str, types: Iterable[str] | None = None) -> bool:
        """Remove a webhook, or only some of its types."""
        removed = self._webhooks.remove(webhook_id, types)
        if removed:
            await self._persist()
        return removed

    def list_webhooks(self) -> list[dict[str, Any]]:
        return self._webhooks.list()

    def webhooks_for_type(self, notification_type: str) -> list[str]:
        return self._webhooks.destinations_for(notification_type)

    # ------------------------------------------------------------------
    # Templates
    # ------------------------------------------------------------------

    def register_template(self, template: Template) -> None:
        self._templates.register(template)

    def get_template(self, name: str) -> Template | None:
        return self._templates.find(name)

    def list_templates(self) -> list[Template]:
        return self._templates.list()

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def stats(self) -> dict[str, Any]:
        """Queue size, directory sizes, per-type subscribers, webhook usage."""
        return {
            "queue_size": len(self._queue),
            "scheduled_pending": self._scheduler.pending,
            "total_webhooks": len(self._webhooks),
            "total_subscriptions": len(self._subscriptions),
            "type_breakdown": self._subscriptions.type_breakdown(),
            "webhook_stats": self._webhooks.usage(),
            "delivery": self._processor.counters.to_dict(),
            "ticks": self._tasks.status(QUEUE_JOB_NAME).runs,
        }
