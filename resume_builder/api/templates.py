from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query, status

from resume_builder.core.errors import ServiceError, raise_http_error
from resume_builder.core.security import get_current_user, get_optional_user
from resume_builder.schemas.template import TemplateCreateRequest, TemplateResponse, TemplateUsageResponse
from resume_builder.services import template_service

router = APIRouter()


@router.get("/templates", response_model=list[TemplateResponse])
async def list_templates(category: str | None = Query(default=None)):
    return [template_service.template_view(t) for t in template_service.list_templates(category)]


@router.get("/templates/{template_id}", response_model=TemplateResponse)
async def get_template(template_id: str, user: dict[str, Any] | None = Depends(get_optional_user)):
    try:
        template = template_service.get_template(template_id, user)
    except ServiceError as exc:
        raise_http_error(exc)
    return template_service.template_view(template)


@router.post("/templates", response_model=TemplateResponse, status_code=status.HTTP_201_CREATED)
async def create_template(payload: TemplateCreateRequest, user: dict[str, Any] = Depends(get_current_user)):
    try:
        template = template_service.create_template(user, payload)
    except ServiceError as exc:
        raise_http_error(exc)
    return template_service.template_view(template)


@router.put("/templates/{template_id}/usage", response_model=TemplateUsageResponse)
async def increment_usage(template_id: str, user: dict[str, Any] = Depends(get_current_user)):
    try:
        count = template_service.increment_usage(template_id)
    except ServiceError as exc:
        raise_http_error(exc)
    return {"success": True, "usage_count": count}
