from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from resume_builder.core.errors import ServiceError, raise_http_error
from resume_builder.core.security import get_current_user
from resume_builder.schemas.latex import LatexDocumentResponse, LatexSaveRequest
from resume_builder.services import latex_service

router = APIRouter()


@router.post("/latex/save", response_model=LatexDocumentResponse)
async def save_document(payload: LatexSaveRequest, user: dict[str, Any] = Depends(get_current_user)):
    try:
        return latex_service.save_document(user, payload)
    except ServiceError as exc:
        raise_http_error(exc)


@router.get("/latex/document/{document_id}", response_model=LatexDocumentResponse)
async def get_document(document_id: str, user: dict[str, Any] = Depends(get_current_user)):
    try:
        return latex_service.get_document(document_id, user)
    except ServiceError as exc:
        raise_http_error(exc)
