from __future__ import annotations

import re
from typing import Any

from fastapi import APIRouter, Depends, Response, status
from fastapi.responses import HTMLResponse

from resume_builder.core.errors import ServiceError, raise_http_error
from resume_builder.core.security import get_current_user
from resume_builder.export import render_resume_html, render_resume_latex, render_resume_pdf
from resume_builder.realtime import notify_resume_update
from resume_builder.schemas.common import MessageResponse
from resume_builder.schemas.resume import (
    CollaboratorRequest,
    ResumeCreateRequest,
    ResumeResponse,
    ResumeUpdateRequest,
)
from resume_builder.services import resume_service

router = APIRouter()

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def _filename(resume: dict[str, Any], ext: str) -> str:
    slug = _SLUG_RE.sub("-", str(resume.get("name") or "").lower()).strip("-") or "resume"
    return f"{slug}.{ext}"


@router.post("/resumes", response_model=ResumeResponse, status_code=status.HTTP_201_CREATED)
async def create_resume(payload: ResumeCreateRequest, user: dict[str, Any] = Depends(get_current_user)):
    resume = resume_service.create_resume(user, payload)
    return resume_service.resume_view(resume)


@router.get("/resumes", response_model=list[ResumeResponse])
async def list_resumes(user: dict[str, Any] = Depends(get_current_user)):
    return [resume_service.resume_view(resume) for resume in resume_service.list_resumes(user)]


@router.get("/resumes/{resume_id}", response_model=ResumeResponse)
async def get_resume(resume_id: str, user: dict[str, Any] = Depends(get_current_user)):
    try:
        resume = resume_service.get_accessible_resume(resume_id, user)
    except ServiceError as exc:
        raise_http_error(exc)
    return resume_service.resume_view(resume)


@router.put("/resumes/{resume_id}", response_model=ResumeResponse)
async def update_resume(
    resume_id: str,
    payload: ResumeUpdateRequest,
    user: dict[str, Any] = Depends(get_current_user),
):
    try:
        resume = resume_service.update_resume(resume_id, user, payload)
    except ServiceError as exc:
        raise_http_error(exc)
    view = resume_service.resume_view(resume)
    await notify_resume_update(
        resume_id,
        {"type": "resume_saved", "userId": user["id"], "lastModified": resume.get("last_modified")},
    )
    return view


@router.delete("/resumes/{resume_id}", response_model=MessageResponse)
async def delete_resume(resume_id: str, user: dict[str, Any] = Depends(get_current_user)):
    try:
        resume_service.delete_resume(resume_id, user)
    except ServiceError as exc:
        raise_http_error(exc)
    return {"message": "Resume removed"}


@router.post("/resumes/{resume_id}/collaborators", response_model=ResumeResponse)
async def add_collaborator(
    resume_id: str,
    payload: CollaboratorRequest,
    user: dict[str, Any] = Depends(get_current_user),
):
    try:
        resume = resume_service.add_collaborator(resume_id, user, payload.collaborator_id)
    except ServiceError as exc:
        raise_http_error(exc)
    return resume_service.resume_view(resume)


@router.delete("/resumes/{resume_id}/collaborators/{collaborator_id}", response_model=ResumeResponse)
async def remove_collaborator(
    resume_id: str,
    collaborator_id: str,
    user: dict[str, Any] = Depends(get_current_user),
):
    try:
        resume = resume_service.remove_collaborator(resume_id, user, collaborator_id)
    except ServiceError as exc:
        raise_http_error(exc)
    return resume_service.resume_view(resume)


def _viewable(resume_id: str, user: dict[str, Any]) -> dict[str, Any]:
    try:
        return resume_service.get_accessible_resume(resume_id, user)
    except ServiceError as exc:
        raise_http_error(exc)


def _pdf_response(resume: dict[str, Any], disposition: str) -> Response:
    return Response(
        content=render_resume_pdf(resume),
        media_type="application/pdf",
        headers={"Content-Disposition": f'{disposition}; filename="{_filename(resume, "pdf")}"'},
    )


@router.get("/resumes/{resume_id}/pdf", response_class=Response)
async def download_pdf(resume_id: str, user: dict[str, Any] = Depends(get_current_user)):
    return _pdf_response(_viewable(resume_id, user), "attachment")


@router.get("/resumes/{resume_id}/preview", response_class=Response)
async def preview_pdf(resume_id: str, user: dict[str, Any] = Depends(get_current_user)):
    return _pdf_response(_viewable(resume_id, user), "inline")


@router.get("/resumes/{resume_id}/html", response_class=HTMLResponse)
async def resume_html(resume_id: str, user: dict[str, Any] = Depends(get_current_user)):
    return HTMLResponse(render_resume_html(_viewable(resume_id, user)))


@router.get("/resumes/{resume_id}/latex", response_class=Response)
async def resume_latex(resume_id: str, user: dict[str, Any] = Depends(get_current_user)):
    resume = _viewable(resume_id, user)
    return Response(
        content=render_resume_latex(resume),
        media_type="application/x-tex",
        headers={"Content-Disposition": f'attachment; filename="{_filename(resume, "tex")}"'},
    )
