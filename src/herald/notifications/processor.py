"""Queue processor — drain, render and fan out queued notifications.

One call to :meth:`QueueProcessor.tick` handles at most ``batch_size`` jobs,
one after another.  Within a job, channel and webhook sends run concurrently,
each under its own timeout.  Send failures are logged per destination and do
not requeue the job; any other failure retries the whole job at the tail of
the queue until ``max_retries`` is reached.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict, dataclass
from typing import TYPE_CHECKING

from herald.errors.delivery_errors import DeliveryError, TemplateNotFoundError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from herald.config.settings import NotificationConfig
    from herald.metrics.collector import NotificationMetrics
    from herald.notifications.jobs import NotificationJob
    from herald.notifications.queue import DeliveryQueue
    from herald.notifications.webhooks import WebhookDirectory, WebhookRegistration
    from herald.sinks.channel import ChannelSink
    from herald.sinks.webhook import WebhookSink
    from herald.templates.renderer import RenderedMessage, Renderer

logger = logging.getLogger(__name__)


@dataclass
class DeliveryCounters:
    """Basic counters since process start."""

    processed: int = 0
    delivered: int = 0
    retried: int = 0
    dropped: int = 0
    sends_ok: int = 0
    sends_failed: int = 0

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


class QueueProcessor:
    """Delivers jobs from a :class:`DeliveryQueue` to channel and webhook sinks."""

    def __init__(
        self,
        *,
        queue: DeliveryQueue,
        renderer: Renderer,
        webhooks: WebhookDirectory,
        channel_sink: ChannelSink,
        webhook_sink: WebhookSink,
        config: NotificationConfig,
        metrics: NotificationMetrics | None = None,
        on_usage_changed: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        self._queue = queue
        self._renderer = renderer
        self._webhooks = webhooks
        self._channel_sink = channel_sink
        self._webhook_sink = webhook_sink
        self._config = config
        self._metrics = metrics
        self._on_usage_changed = on_usage_changed
        self.counters = DeliveryCounters()

    async def tick(self) -> int:
        """Process one batch.  Returns the number of jobs taken from the queue."""
        if not self._queue:
            return 0

        batch = self._queue.pop_batch(self._config.batch_size)
        usage_changed = False
        for index, job in enumerate(batch):
            try:
                usage_changed |= await self._process(job)
            except asyncio.CancelledError:
                self._queue.restore(batch[index:])
                raise

        if usage_changed and self._on_usage_changed is not None:
            await self._on_usage_changed()
        if self._metrics:
            self._metrics.set_queue_size(len(self._queue))
        return len(batch)

    async def _process(self, job: NotificationJob) -> bool:
        self.counters.processed += 1
        try:
            usage_changed = await self.deliver(job)
        except TemplateNotFoundError as exc:
            self._drop(job, "invalid")
            logger.error("Dropping job %s: %s", job.id, exc.message)
            return False
        except Exception:
            if job.retry_count < self._config.max_retries:
                job.retry_count += 1
                self._queue.push(job)
                self.counters.retried += 1
                if self._metrics:
                    self._metrics.job_outcome("retried")
                logger.exception(
                    "Delivery of job %s (%s) failed, retry %d/%d",
                    job.id,
                    job.type,
                    job.retry_count,
                    self._config.max_retries,
                )
            else:
                self._drop(job, "dropped")
                logger.exception(
                    "Delivery of job %s (%s) failed after %d retries, dropping",
                    job.id,
                    job.type,
                    job.retry_count,
                )
            return False

        self.counters.delivered += 1
        if self._metrics:
            self._metrics.job_outcome("delivered")
        return usage_changed

    def _drop(self, job: NotificationJob, outcome: str) -> None:
        self.counters.dropped += 1
        if self._metrics:
            self._metrics.job_outcome(outcome)

    async def deliver(self, job: NotificationJob) -> bool:
        """Render *job* and send it to its channels and matching webhooks.

        Returns ``True`` when at least one webhook usage counter changed.

        Raises:
            TemplateNotFoundError: If the job type has no template.
            DeliveryError: If rendering fails for any other reason.
        """
        try:
            message = self._renderer.render(job.type, job.data)
        except TemplateNotFoundError:
            raise
        except Exception as exc:
            msg = f"rendering {job.type} failed: {exc}"
            raise DeliveryError(msg, job_id=job.id) from exc
        hooks = self._webhooks.matching(job.type)

        sends = [self._send_to_channel(cid, message, job) for cid in job.channels]
        sends += [self._send_to_webhook(hook, message) for hook in hooks]
        results = await asyncio.gather(*sends)

        webhook_results = results[len(job.channels) :]
        return any(webhook_results)

    async def _send_to_channel(
        self,
        channel_id: str,
        message: RenderedMessage,
        job: NotificationJob,
    ) -> bool:
        try:
            await asyncio.wait_for(
                self._channel_sink.send(channel_id, message, job.options),
                timeout=self._config.send_timeout,
            )
        except TimeoutError:
            logger.error("Send of job %s to channel %s timed out", job.id, channel_id)
            self._count_send("channel", ok=False)
            return False
        except Exception as exc:
            logger.error("Send of job %s to channel %s failed: %s", job.id, channel_id, exc)
            self._count_send("channel", ok=False)
            return False
        self._count_send("channel", ok=True)
        return True

    async def _send_to_webhook(self, hook: WebhookRegistration, message: RenderedMessage) -> bool:
        try:
            await asyncio.wait_for(
                self._webhook_sink.post(
                    hook.url,
                    self._config.webhook_display_name,
                    self._config.webhook_avatar_url,
                    message,
                ),
                timeout=self._config.send_timeout,
            )
        except TimeoutError:
            logger.error("Webhook %s (%s) timed out", hook.id, hook.name)
            self._count_send("webhook", ok=False)
            return False
        except Exception as exc:
            logger.error("Webhook %s (%s) failed: %s", hook.id, hook.name, exc)
            self._count_send("webhook", ok=False)
            return False
        self._count_send("webhook", ok=True)
        return self._webhooks.record_success(hook.id)

    def _count_send(self, sink: str, *, ok: bool) -> None:
        if ok:
            self.counters.sends_ok += 1
        else:
            self.counters.sends_failed += 1
        if self._metrics:
            self._metrics.send_outcome(sink, ok=ok)
