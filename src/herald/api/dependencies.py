"""FastAPI dependency injection helpers.

Usage in a route::

    @router.get("/stats")
    async def stats(
        service: Annotated[NotificationService, Depends(get_service)],
    ) -> ...:
        ...
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Header, Request

from herald.api.middleware.auth import api_key_valid
from herald.errors.definitions import ErrServiceNotStarted, ErrUnauthorized
from herald.notifications.service import NotificationService  # noqa: TC001


def get_service(request: Request) -> NotificationService:
    """Retrieve the notification service from ``app.state``.

    Raises:
        HeraldError: If the service was not started by the lifespan hook.
    """
    service: NotificationService | None = getattr(request.app.state, "service", None)
    if service is None:
        raise ErrServiceNotStarted
    return service


def require_api_key(
    request: Request,
    x_api_key: Annotated[str | None, Header()] = None,
) -> None:
    """Reject the request unless it carries the configured API key."""
    if not api_key_valid(request.app.state.config.api_key, x_api_key):
        raise ErrUnauthorized
