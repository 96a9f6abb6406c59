"""FastAPI application factory for the notification admin API."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest
from starlette.responses import Response

from herald import __version__
from herald.api.middleware.cors import setup_cors
from herald.api.v1 import v1_router
from herald.config.settings import AppConfig
from herald.errors.herald_errors import HeraldError
from herald.metrics.collector import NotificationMetrics
from herald.metrics.middleware import PrometheusMiddleware
from herald.notifications.service import NotificationService

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start the notification service on startup, stop it on shutdown."""
    service: NotificationService | None = getattr(app.state, "service", None)
    if service is None:
        service = NotificationService(app.state.config, metrics=app.state.metrics)
        app.state.service = service

    try:
        await service.start()
        yield
    finally:
        await service.stop()


def create_app(
    *,
    config: AppConfig | None = None,
    service: NotificationService | None = None,
    metrics: NotificationMetrics | None = None,
) -> FastAPI:
    """Build and return the FastAPI application.

    Args:
        config: Optional AppConfig.  If *None*, it is read from the environment.
        service: Pre-built service (tests inject one with fake sinks).
        metrics: Metrics shared with *service*; created when omitted.
    """
    if config is None:
        config = AppConfig()

    app = FastAPI(
        title="herald",
        version=__version__,
        description="Notification delivery engine",
        lifespan=_lifespan,
    )

    app.state.config = config
    app.state.metrics = metrics or NotificationMetrics()
    if service is not None:
        app.state.service = service

    setup_cors(app)

    @app.exception_handler(HeraldError)
    async def _herald_error_handler(request: Request, exc: HeraldError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"code": exc.code, "message": exc.message},
        )

    @app.get("/health", tags=["base"])
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/metrics", tags=["base"], include_in_schema=False)
    async def metrics_endpoint() -> Response:
        """Prometheus metrics endpoint."""
        return Response(
            content=generate_latest(app.state.metrics.registry),
            media_type="text/plain; version=0.0.4; charset=utf-8",
        )

    if config.metrics.enabled:
        app.add_middleware(PrometheusMiddleware, registry=app.state.metrics.registry)

    app.include_router(v1_router)

    return app
