from __future__ import annotations

import logging
from typing import Any, Iterable

from resume_builder.core.errors import BadRequestError, ForbiddenError, NotFoundError
from resume_builder.core.security import USERS
from resume_builder.db import store
from resume_builder.schemas.resume import ResumeCreateRequest, ResumeUpdateRequest, Section
from resume_builder.services.user_service import summary_for

logger = logging.getLogger(__name__)

RESUMES = "resumes"
VERSIONS = "versions"
COMMENTS = "comments"


def is_owner(resume: dict[str, Any], user_id: str) -> bool:
    return resume.get("owner_id") == user_id


def can_access(resume: dict[str, Any], user_id: str) -> bool:
    return is_owner(resume, user_id) or user_id in (resume.get("collaborators") or [])


def get_resume(resume_id: str) -> dict[str, Any]:
    resume = store.get_document(RESUMES, resume_id)
    if resume is None:
        raise NotFoundError("Resume not found")
    return resume


def get_accessible_resume(resume_id: str, user: dict[str, Any], *, action: str = "access") -> dict[str, Any]:
    resume = get_resume(resume_id)
    if not can_access(resume, user["id"]):
        raise ForbiddenError(f"Not authorized to {action} this resume")
    return resume


def get_owned_resume(resume_id: str, user: dict[str, Any], message: str) -> dict[str, Any]:
    resume = get_resume(resume_id)
    if not is_owner(resume, user["id"]):
        raise ForbiddenError(message)
    return resume


def normalize_sections(sections: Iterable[Section]) -> list[dict[str, Any]]:
    out: list[dict[str, Any]] = []
    for section in sections:
        data = section.model_dump()
        data["id"] = data.get("id") or store.new_id()
        out.append(data)
    return out


def resume_view(resume: dict[str, Any]) -> dict[str, Any]:
    view = {key: value for key, value in resume.items() if key not in {"owner_id", "collaborators"}}
    view["owner"] = summary_for(resume.get("owner_id"))
    view["collaborators"] = [summary_for(user_id) for user_id in resume.get("collaborators") or []]
    return view


def create_resume(user: dict[str, Any], payload: ResumeCreateRequest) -> dict[str, Any]:
    resume = store.insert_document(
        RESUMES,
        {
            "name": payload.name,
            "owner_id": user["id"],
            "template": payload.template or "custom",
            "sections": normalize_sections(payload.sections),
            "canvas_size": payload.canvas_size.model_dump(),
            "page_settings": payload.page_settings.model_dump(),
            "collaborators": [],
            "last_modified": store.utc_now_iso(),
        },
    )
    logger.info("resume_created resume_id=%s owner_id=%s", resume["id"], user["id"])
    return resume


def list_resumes(user: dict[str, Any]) -> list[dict[str, Any]]:
    return store.find_documents(
        RESUMES,
        predicate=lambda doc: can_access(doc, user["id"]),
        sort_by="updated_at",
        descending=True,
    )


def update_resume(resume_id: str, user: dict[str, Any], payload: ResumeUpdateRequest) -> dict[str, Any]:
    get_accessible_resume(resume_id, user, action="update")
    changes: dict[str, Any] = {"last_modified": store.utc_now_iso()}
    if payload.name:
        changes["name"] = payload.name
    if payload.template:
        changes["template"] = payload.template
    if payload.sections is not None:
        changes["sections"] = normalize_sections(payload.sections)
    if payload.canvas_size is not None:
        changes["canvas_size"] = payload.canvas_size.model_dump()
    if payload.page_settings is not None:
        changes["page_settings"] = payload.page_settings.model_dump()

    updated = store.update_document(RESUMES, resume_id, changes)
    if updated is None:
        raise NotFoundError("Resume not found")
    return updated


def delete_resume(resume_id: str, user: dict[str, Any]) -> None:
    get_owned_resume(resume_id, user, "Not authorized to delete this resume")
    with store.transaction():
        versions = store.delete_documents(VERSIONS, {"resume_id": resume_id})
        comments = store.delete_documents(COMMENTS, {"resume_id": resume_id})
        store.delete_document(RESUMES, resume_id)
    logger.info("resume_deleted resume_id=%s versions=%s comments=%s", resume_id, versions, comments)


def add_collaborator(resume_id: str, user: dict[str, Any], collaborator_id: str) -> dict[str, Any]:
    with store.transaction():
        resume = get_owned_resume(resume_id, user, "Only the owner can add collaborators")
        collaborators = list(resume.get("collaborators") or [])
        if collaborator_id in collaborators:
            raise BadRequestError("User is already a collaborator")
        if collaborator_id == resume["owner_id"]:
            raise BadRequestError("The owner cannot be added as a collaborator")
        if store.get_document(USERS, collaborator_id) is None:
            raise NotFoundError("User not found")
        collaborators.append(collaborator_id)
        updated = store.update_document(RESUMES, resume_id, {"collaborators": collaborators})
    return updated or resume


def remove_collaborator(resume_id: str, user: dict[str, Any], collaborator_id: str) -> dict[str, Any]:
    with store.transaction():
        resume = get_owned_resume(resume_id, user, "Only the owner can remove collaborators")
        collaborators = [c for c in resume.get("collaborators") or [] if c != collaborator_id]
        updated = store.update_document(RESUMES, resume_id, {"collaborators": collaborators})
    return updated or resume
