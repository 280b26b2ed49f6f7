from __future__ import annotations

import logging
from typing import Any

from resume_builder.core.errors import NotFoundError
from resume_builder.db import store
from resume_builder.schemas.latex import LatexSaveRequest

logger = logging.getLogger(__name__)

LATEX_DOCUMENTS = "latex_documents"
DEFAULT_TITLE = "Untitled Document"


def get_document(document_id: str, user: dict[str, Any]) -> dict[str, Any]:
    document = store.get_document(LATEX_DOCUMENTS, document_id)
    if document is None or document.get("user_id") != user["id"]:
        raise NotFoundError("Document not found")
    return document


def save_document(user: dict[str, Any], payload: LatexSaveRequest) -> dict[str, Any]:
    now = store.utc_now_iso()
    if payload.document_id:
        existing = get_document(payload.document_id, user)
        changes: dict[str, Any] = {"code": payload.code, "last_modified": now}
        if payload.title:
            changes["title"] = payload.title
        if payload.template is not None:
            changes["template"] = payload.template
        updated = store.update_document(LATEX_DOCUMENTS, existing["id"], changes)
        if updated is None:
            raise NotFoundError("Document not found")
        return updated

    document = store.insert_document(
        LATEX_DOCUMENTS,
        {
            "user_id": user["id"],
            "code": payload.code,
            "title": payload.title or DEFAULT_TITLE,
            "template": payload.template,
            "last_modified": now,
        },
    )
    logger.info("latex_document_created document_id=%s user_id=%s", document["id"], user["id"])
    return document
