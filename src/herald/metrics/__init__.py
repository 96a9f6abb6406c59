"""Metrics — Prometheus metrics collection and exposure."""

from __future__ import annotations

from herald.metrics.collector import MetricsCollector, NotificationMetrics

__all__ = ["MetricsCollector", "NotificationMetrics"]
