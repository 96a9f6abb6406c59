"""V1 REST API routes.

Combines all sub-routers under the ``/api/v1`` prefix, behind the API key
check.
"""

from fastapi import APIRouter, Depends

from herald.api.dependencies import require_api_key
from herald.api.v1.notifications import router as notifications_router
from herald.api.v1.schemas import ErrorResponse
from herald.api.v1.subscriptions import router as subscriptions_router
from herald.api.v1.templates import router as templates_router
from herald.api.v1.webhooks import router as webhooks_router

v1_router = APIRouter(
    prefix="/api/v1",
    dependencies=[Depends(require_api_key)],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)

v1_router.include_router(notifications_router)
v1_router.include_router(subscriptions_router)
v1_router.include_router(webhooks_router)
v1_router.include_router(templates_router)

__all__ = ["v1_router"]
