"""Metrics collector — Prometheus counters, gauges, histograms.

Exposed series:
- ``herald_jobs_total`` counter-vec (outcome: delivered, retried, dropped, invalid)
- ``herald_sends_total`` counter-vec (sink: channel/webhook, outcome: ok/failed)
- ``herald_queue_size`` gauge
- ``herald_scheduled_pending`` gauge
- ``herald_tick_histogram`` / ``herald_tick_last_execution_gauge`` per cron job
"""

from __future__ import annotations

import time
from contextlib import contextmanager
from typing import TYPE_CHECKING

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

if TYPE_CHECKING:
    from collections.abc import Iterator

_PREFIX = "herald"


class MetricsCollector:
    """Low-level Prometheus collector that owns the registry.

    Use :class:`NotificationMetrics` for the high-level tracking interface.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self._registry = registry or CollectorRegistry()

    @property
    def registry(self) -> CollectorRegistry:
        """Return the underlying Prometheus registry."""
        return self._registry

    def gauge(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Gauge:
        """Register and return a Gauge."""
        return Gauge(name, doc, labels, registry=self._registry)

    def histogram(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Histogram:
        """Register and return a Histogram."""
        return Histogram(name, doc, labels, registry=self._registry)

    def counter(self, name: str, doc: str, labels: tuple[str, ...] = ()) -> Counter:
        """Register and return a Counter."""
        return Counter(name, doc, labels, registry=self._registry)


class NotificationMetrics:
    """High-level delivery metrics used by the queue processor."""

    def __init__(self, collector: MetricsCollector | None = None) -> None:
        self._collector = collector or MetricsCollector()

        self._jobs = self._collector.counter(
            f"{_PREFIX}_jobs",
            "Notification jobs by processing outcome",
            ("outcome",),
        )
        self._sends = self._collector.counter(
            f"{_PREFIX}_sends",
            "Individual sink sends by sink and outcome",
            ("sink", "outcome"),
        )
        self._queue_size = self._collector.gauge(
            f"{_PREFIX}_queue_size",
            "Jobs waiting in the delivery queue",
        )
        self._scheduled = self._collector.gauge(
            f"{_PREFIX}_scheduled_pending",
            "Scheduled deliveries not yet enqueued",
        )
        self._tick_histogram = self._collector.histogram(
            f"{_PREFIX}_tick_histogram",
            "Duration of periodic job executions",
            ("job_name",),
        )
        self._tick_last = self._collector.gauge(
            f"{_PREFIX}_tick_last_execution_gauge",
            "Timestamp of last periodic job execution",
            ("job_name",),
        )

    @property
    def registry(self) -> CollectorRegistry:
        """Return the underlying Prometheus registry."""
        return self._collector.registry

    def job_outcome(self, outcome: str) -> None:
        """Count one job reaching *outcome*."""
        self._jobs.labels(outcome=outcome).inc()

    def send_outcome(self, sink: str, *, ok: bool) -> None:
        """Count one channel or webhook send."""
        self._sends.labels(sink=sink, outcome="ok" if ok else "failed").inc()

    def set_queue_size(self, size: int) -> None:
        self._queue_size.set(size)

    def set_scheduled_pending(self, count: int) -> None:
        self._scheduled.set(count)

    @contextmanager
    def track_cron(self, job_name: str) -> Iterator[None]:
        """Track the duration of a periodic job and record last execution time."""
        start = time.monotonic()
        try:
            yield
        finally:
            self._tick_histogram.labels(job_name=job_name).observe(time.monotonic() - start)
            self._tick_last.labels(job_name=job_name).set(time.time())
