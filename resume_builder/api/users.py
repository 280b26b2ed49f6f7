from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, File, Query, UploadFile

from resume_builder.core.config import settings
from resume_builder.core.errors import ServiceError, raise_http_error
from resume_builder.core.security import get_current_user
from resume_builder.schemas.auth import ProfilePictureResponse, ProfileUpdateRequest, UserPublic, UserSearchResult
from resume_builder.services import user_service
from resume_builder.services.upload_security import IMAGE_EXTENSIONS, read_upload

router = APIRouter()


@router.put("/users/profile", response_model=UserPublic)
async def update_profile(payload: ProfileUpdateRequest, user: dict[str, Any] = Depends(get_current_user)):
    try:
        updated = user_service.update_profile(user, payload)
    except ServiceError as exc:
        raise_http_error(exc)
    return user_service.public_user(updated)


@router.post("/users/profile/picture", response_model=ProfilePictureResponse)
async def upload_profile_picture(
    profile_picture: UploadFile = File(..., alias="profilePicture"),
    user: dict[str, Any] = Depends(get_current_user),
):
    try:
        filename, content = await read_upload(
            profile_picture, allowed=IMAGE_EXTENSIONS, max_bytes=settings.max_upload_bytes
        )
        updated = user_service.save_profile_picture(user, filename, content)
    except ServiceError as exc:
        raise_http_error(exc)
    return {
        "id": updated["id"],
        "profile_picture": updated["profile_picture"],
        "message": "Profile picture uploaded successfully",
    }


@router.get("/users/search", response_model=list[UserSearchResult])
async def search_users(query: str | None = Query(default=None), user: dict[str, Any] = Depends(get_current_user)):
    try:
        return user_service.search_users(user, query)
    except ServiceError as exc:
        raise_http_error(exc)
