"""V1 template endpoints."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends

from herald.api.dependencies import get_service
from herald.api.v1.schemas import TemplateModel, TemplateUpsertRequest
from herald.errors.delivery_errors import TemplateNotFoundError
from herald.notifications.service import NotificationService  # noqa: TC001
from herald.templates.registry import Template

router = APIRouter(prefix="/templates", tags=["templates"])

ServiceDep = Annotated[NotificationService, Depends(get_service)]


@router.get("")
async def list_templates(service: ServiceDep) -> list[dict[str, Any]]:
    return [TemplateModel(**t.to_dict()).model_dump() for t in service.list_templates()]


@router.get("/{name}")
async def get_template(name: str, service: ServiceDep) -> dict[str, Any]:
    template = service.get_template(name)
    if template is None:
        raise TemplateNotFoundError(name)
    return TemplateModel(**template.to_dict()).model_dump()


@router.put("/{name}")
async def put_template(
    name: str,
    body: TemplateUpsertRequest,
    service: ServiceDep,
) -> dict[str, Any]:
    template = Template.from_dict(name, body.model_dump())
    service.register_template(template)
    return TemplateModel(**template.to_dict()).model_dump()
