"""V1 webhook endpoints."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query, status

from herald.api.dependencies import get_service
from herald.api.v1.schemas import RemovedResponse, WebhookCreateRequest, WebhookResponse
from herald.errors.definitions import ErrWebhookNotFound
from herald.notifications.service import NotificationService  # noqa: TC001

router = APIRouter(prefix="/webhooks", tags=["webhooks"])

ServiceDep = Annotated[NotificationService, Depends(get_service)]


@router.get("")
async def list_webhooks(service: ServiceDep) -> list[dict[str, Any]]:
    return [WebhookResponse(**w).model_dump(mode="json") for w in service.list_webhooks()]


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_webhook(body: WebhookCreateRequest, service: ServiceDep) -> dict[str, Any]:
    webhook_id = await service.add_webhook(body.url, body.types, body.name)
    created = next(w for w in service.list_webhooks() if w["id"] == webhook_id)
    return WebhookResponse(**created).model_dump(mode="json")


@router.delete("/{webhook_id}")
async def remove_webhook(
    webhook_id: str,
    service: ServiceDep,
    types: Annotated[list[str] | None, Query()] = None,
) -> dict[str, Any]:
    removed = await service.remove_webhook(webhook_id, types)
    if not removed:
        raise ErrWebhookNotFound
    return RemovedResponse(removed=True).model_dump()
