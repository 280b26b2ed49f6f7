from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, status

from resume_builder.core.errors import ServiceError, raise_http_error
from resume_builder.core.security import get_current_user
from resume_builder.schemas.resume import RestoreVersionResponse, VersionCreateRequest, VersionResponse
from resume_builder.services import version_service

router = APIRouter(prefix="/resumes/{resume_id}/versions")


@router.post("", response_model=VersionResponse, status_code=status.HTTP_201_CREATED)
async def create_version(
    resume_id: str,
    payload: VersionCreateRequest,
    user: dict[str, Any] = Depends(get_current_user),
):
    try:
        version = version_service.create_version(resume_id, user, payload)
    except ServiceError as exc:
        raise_http_error(exc)
    return version_service.version_view(version)


@router.get("", response_model=list[VersionResponse])
async def list_versions(resume_id: str, user: dict[str, Any] = Depends(get_current_user)):
    try:
        versions = version_service.list_versions(resume_id, user)
    except ServiceError as exc:
        raise_http_error(exc)
    return [version_service.version_view(version) for version in versions]


@router.get("/{version_number}", response_model=VersionResponse)
async def get_version(resume_id: str, version_number: int, user: dict[str, Any] = Depends(get_current_user)):
    try:
        version = version_service.get_version(resume_id, user, version_number)
    except ServiceError as exc:
        raise_http_error(exc)
    return version_service.version_view(version)


@router.post("/{version_number}/restore", response_model=RestoreVersionResponse)
async def restore_version(resume_id: str, version_number: int, user: dict[str, Any] = Depends(get_current_user)):
    try:
        version = version_service.restore_version(resume_id, user, version_number)
    except ServiceError as exc:
        raise_http_error(exc)
    return {"message": "Version restored successfully", "version": version_service.version_view(version)}
