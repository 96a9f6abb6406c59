"""Prometheus HTTP request metrics middleware for the admin API.

Tracks ``herald_http_requests_total`` and ``herald_http_request_duration_seconds``.
Paths are labelled by route template (``/api/v1/webhooks/{webhook_id}``) so
generated ids do not explode label cardinality.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware

if TYPE_CHECKING:
    from collections.abc import Callable

    from prometheus_client import CollectorRegistry
    from starlette.requests import Request
    from starlette.responses import Response


def _route_path(request: Request) -> str:
    route = request.scope.get("route")
    template = getattr(route, "path", None)
    return template or request.url.path


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Starlette middleware that records request count and duration."""

    def __init__(self, app: object, *, registry: CollectorRegistry) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self._requests = Counter(
            "herald_http_requests",
            "Admin API requests",
            ("method", "path", "status_code"),
            registry=registry,
        )
        self._duration = Histogram(
            "herald_http_request_duration_seconds",
            "Admin API request duration in seconds",
            ("method", "path"),
            registry=registry,
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:  # type: ignore[type-arg]
        start = time.monotonic()
        response: Response = await call_next(request)
        elapsed = time.monotonic() - start

        path = _route_path(request)
        self._requests.labels(
            method=request.method, path=path, status_code=str(response.status_code)
        ).inc()
        self._duration.labels(method=request.method, path=path).observe(elapsed)
        return response
