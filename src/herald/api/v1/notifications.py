"""V1 notification endpoints — queue, schedule, cancel, pending, test, stats."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, status

from herald.api.dependencies import get_service
from herald.api.v1.schemas import (
    NotificationRequest,
    QueuedResponse,
    RemovedResponse,
    ScheduledNotificationRequest,
    StatsResponse,
    TestNotificationRequest,
)
from herald.errors.definitions import ErrScheduleNotFound
from herald.notifications.helpers import send_test_notification
from herald.notifications.service import NotificationService  # noqa: TC001

router = APIRouter(tags=["notifications"])

ServiceDep = Annotated[NotificationService, Depends(get_service)]


def _channels(service: NotificationService, body: NotificationRequest) -> list[str]:
    channels = list(body.channels)
    if body.use_subscriptions:
        channels += service.channels_for_type(body.type)
    return channels


@router.post("/notifications", status_code=status.HTTP_202_ACCEPTED)
async def queue_notification(body: NotificationRequest, service: ServiceDep) -> dict[str, Any]:
    job_id = service.enqueue(
        body.type,
        body.data,
        _channels(service, body),
        body.options.model_dump(),
    )
    return QueuedResponse(id=job_id).model_dump()


@router.post("/notifications/schedule", status_code=status.HTTP_202_ACCEPTED)
async def schedule_notification(
    body: ScheduledNotificationRequest,
    service: ServiceDep,
) -> dict[str, Any]:
    token = service.schedule_delivery(
        body.type,
        body.data,
        _channels(service, body),
        body.send_at,
        body.options.model_dump(),
    )
    return QueuedResponse(id=token, scheduled=token.startswith("scheduled_")).model_dump()


@router.post("/notifications/test", status_code=status.HTTP_202_ACCEPTED)
async def test_notification(body: TestNotificationRequest, service: ServiceDep) -> dict[str, Any]:
    job_id = send_test_notification(service, body.type, body.channel_id)
    return QueuedResponse(id=job_id).model_dump()


@router.get("/stats")
async def get_stats(service: ServiceDep) -> dict[str, Any]:
    return StatsResponse(**service.stats()).model_dump(mode="json")


@router.delete("/notifications/schedule/{token}")
async def cancel_scheduled_notification(token: str, service: ServiceDep) -> dict[str, Any]:
    if not service.cancel_scheduled(token):
        raise ErrScheduleNotFound
    return RemovedResponse(removed=True).model_dump()


@router.get("/notifications/pending")
async def list_pending(service: ServiceDep) -> list[dict[str, Any]]:
    """Jobs waiting in the delivery queue, head first."""
    return [job.to_dict() for job in service.pending_jobs()]
