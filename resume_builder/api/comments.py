from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Query, status

from resume_builder.core.errors import ServiceError, raise_http_error
from resume_builder.core.security import get_current_user
from resume_builder.realtime import notify_resume_update
from resume_builder.schemas.common import MessageResponse
from resume_builder.schemas.resume import CommentCreateRequest, CommentResponse, CommentUpdateRequest
from resume_builder.services import comment_service

router = APIRouter(prefix="/resumes/{resume_id}/comments")


async def _broadcast(resume_id: str, event_type: str, data: Any) -> None:
    await notify_resume_update(resume_id, {"type": event_type, "data": data})


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(
    resume_id: str,
    payload: CommentCreateRequest,
    user: dict[str, Any] = Depends(get_current_user),
):
    try:
        comment = comment_service.create_comment(resume_id, user, payload)
    except ServiceError as exc:
        raise_http_error(exc)
    view = comment_service.comment_view(comment)
    await _broadcast(resume_id, "comment_added", CommentResponse.model_validate(view).model_dump(mode="json", by_alias=True))
    return view


@router.get("", response_model=list[CommentResponse])
async def list_comments(
    resume_id: str,
    section: str | None = Query(default=None),
    user: dict[str, Any] = Depends(get_current_user),
):
    try:
        comments = comment_service.list_comments(resume_id, user, section)
    except ServiceError as exc:
        raise_http_error(exc)
    return [comment_service.comment_view(comment) for comment in comments]


@router.put("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    resume_id: str,
    comment_id: str,
    payload: CommentUpdateRequest,
    user: dict[str, Any] = Depends(get_current_user),
):
    try:
        comment = comment_service.update_comment(resume_id, comment_id, user, payload)
    except ServiceError as exc:
        raise_http_error(exc)
    view = comment_service.comment_view(comment)
    await _broadcast(resume_id, "comment_updated", CommentResponse.model_validate(view).model_dump(mode="json", by_alias=True))
    return view


@router.delete("/{comment_id}", response_model=MessageResponse)
async def delete_comment(resume_id: str, comment_id: str, user: dict[str, Any] = Depends(get_current_user)):
    try:
        comment_service.delete_comment(resume_id, comment_id, user)
    except ServiceError as exc:
        raise_http_error(exc)
    await _broadcast(resume_id, "comment_deleted", {"commentId": comment_id})
    return {"message": "Comment deleted successfully"}


@router.put("/{comment_id}/resolve", response_model=CommentResponse)
async def toggle_resolution(resume_id: str, comment_id: str, user: dict[str, Any] = Depends(get_current_user)):
    try:
        comment = comment_service.toggle_resolution(resume_id, comment_id, user)
    except ServiceError as exc:
        raise_http_error(exc)
    view = comment_service.comment_view(comment)
    await _broadcast(
        resume_id,
        "comment_resolution_toggled",
        CommentResponse.model_validate(view).model_dump(mode="json", by_alias=True),
    )
    return view
