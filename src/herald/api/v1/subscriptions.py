"""V1 subscription endpoints."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, Query

from herald.api.dependencies import get_service
from herald.api.v1.schemas import RemovedResponse, SubscriptionRequest, SubscriptionResponse
from herald.errors.definitions import ErrSubscriptionNotFound
from herald.notifications.service import NotificationService  # noqa: TC001

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])

ServiceDep = Annotated[NotificationService, Depends(get_service)]


@router.get("")
async def list_subscriptions(
    service: ServiceDep,
    type: Annotated[str | None, Query()] = None,  # noqa: A002
) -> list[dict[str, Any]]:
    entries = service.list_subscriptions()
    if type is not None:
        wanted = set(service.channels_for_type(type))
        entries = [e for e in entries if e["channel_id"] in wanted]
    return [SubscriptionResponse(**e).model_dump() for e in entries]


@router.post("")
async def subscribe(body: SubscriptionRequest, service: ServiceDep) -> dict[str, Any]:
    sub = await service.subscribe(body.channel_id, body.types)
    return SubscriptionResponse(
        channel_id=sub.destination_id, types=sub.types, settings=sub.settings
    ).model_dump()


@router.delete("/{channel_id}")
async def unsubscribe(
    channel_id: str,
    service: ServiceDep,
    types: Annotated[list[str] | None, Query()] = None,
) -> dict[str, Any]:
    removed = await service.unsubscribe(channel_id, types)
    if not removed:
        raise ErrSubscriptionNotFound
    return RemovedResponse(removed=True).model_dump()
