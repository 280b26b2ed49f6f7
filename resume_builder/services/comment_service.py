from __future__ import annotations

import logging
from typing import Any

from resume_builder.core.errors import BadRequestError, ForbiddenError, NotFoundError
from resume_builder.db import store
from resume_builder.schemas.resume import CommentCreateRequest, CommentUpdateRequest
from resume_builder.services.resume_service import COMMENTS, get_accessible_resume, get_resume, is_owner
from resume_builder.services.user_service import summary_for

logger = logging.getLogger(__name__)


def comment_view(comment: dict[str, Any]) -> dict[str, Any]:
    view = {key: value for key, value in comment.items() if key != "user_id"}
    view["user"] = summary_for(comment.get("user_id"))
    view["resolved_by"] = summary_for(comment.get("resolved_by"))
    return view


def _get_comment(resume_id: str, comment_id: str) -> dict[str, Any]:
    comment = store.get_document(COMMENTS, comment_id)
    if comment is None or comment.get("resume_id") != resume_id:
        raise NotFoundError("Comment not found")
    return comment


def create_comment(resume_id: str, user: dict[str, Any], payload: CommentCreateRequest) -> dict[str, Any]:
    get_accessible_resume(resume_id, user, action="comment on")
    if payload.parent_comment:
        parent = store.get_document(COMMENTS, payload.parent_comment)
        if parent is None or parent.get("resume_id") != resume_id:
            raise BadRequestError("Parent comment not found")

    comment = store.insert_document(
        COMMENTS,
        {
            "resume_id": resume_id,
            "user_id": user["id"],
            "content": payload.content,
            "section": payload.section,
            "position": payload.position.model_dump() if payload.position else None,
            "parent_comment": payload.parent_comment,
            "is_resolved": False,
            "resolved_by": None,
            "resolved_at": None,
        },
    )
    logger.info("comment_created resume_id=%s comment_id=%s", resume_id, comment["id"])
    return comment


def list_comments(resume_id: str, user: dict[str, Any], section: str | None = None) -> list[dict[str, Any]]:
    get_accessible_resume(resume_id, user, action="view comments on")
    filters: dict[str, Any] = {"resume_id": resume_id}
    if section:
        filters["section"] = section
    return store.find_documents(COMMENTS, filters, sort_by="created_at", descending=True)


def update_comment(
    resume_id: str, comment_id: str, user: dict[str, Any], payload: CommentUpdateRequest
) -> dict[str, Any]:
    get_resume(resume_id)
    comment = _get_comment(resume_id, comment_id)
    if comment.get("user_id") != user["id"]:
        raise ForbiddenError("Not authorized to update this comment")
    updated = store.update_document(COMMENTS, comment_id, {"content": payload.content})
    if updated is None:
        raise NotFoundError("Comment not found")
    return updated


def delete_comment(resume_id: str, comment_id: str, user: dict[str, Any]) -> int:
    resume = get_resume(resume_id)
    comment = _get_comment(resume_id, comment_id)
    if comment.get("user_id") != user["id"] and not is_owner(resume, user["id"]):
        raise ForbiddenError("Not authorized to delete this comment")
    with store.transaction():
        replies = store.delete_documents(COMMENTS, {"resume_id": resume_id, "parent_comment": comment_id})
        store.delete_document(COMMENTS, comment_id)
    logger.info("comment_deleted resume_id=%s comment_id=%s replies=%s", resume_id, comment_id, replies)
    return replies


def toggle_resolution(resume_id: str, comment_id: str, user: dict[str, Any]) -> dict[str, Any]:
    get_accessible_resume(resume_id, user, action="resolve comments on")
    comment = _get_comment(resume_id, comment_id)
    resolved = not comment.get("is_resolved")
    updated = store.update_document(
        COMMENTS,
        comment_id,
        {
            "is_resolved": resolved,
            "resolved_by": user["id"] if resolved else None,
            "resolved_at": store.utc_now_iso() if resolved else None,
        },
    )
    if updated is None:
        raise NotFoundError("Comment not found")
    return updated
