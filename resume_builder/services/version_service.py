from __future__ import annotations

import logging
from typing import Any

from resume_builder.core.errors import NotFoundError
from resume_builder.db import store
from resume_builder.schemas.resume import VersionCreateRequest
from resume_builder.services.resume_service import (
    RESUMES,
    VERSIONS,
    get_accessible_resume,
    normalize_sections,
)
from resume_builder.services.user_service import summary_for

logger = logging.getLogger(__name__)


def version_view(version: dict[str, Any]) -> dict[str, Any]:
    view = {key: value for key, value in version.items() if key != "user_id"}
    view["user"] = summary_for(version.get("user_id"))
    return view


def _next_version_number(resume_id: str) -> int:
    versions = store.find_documents(VERSIONS, {"resume_id": resume_id})
    return max((int(v.get("version_number") or 0) for v in versions), default=0) + 1


def _append_version(resume_id: str, user_id: str, sections: list[dict[str, Any]], description: str) -> dict[str, Any]:
    with store.transaction():
        number = _next_version_number(resume_id)
        version = store.insert_document(
            VERSIONS,
            {
                "resume_id": resume_id,
                "user_id": user_id,
                "version_number": number,
                "sections": sections,
                "description": description,
            },
        )
    logger.info("version_created resume_id=%s version=%s", resume_id, number)
    return version


def create_version(resume_id: str, user: dict[str, Any], payload: VersionCreateRequest) -> dict[str, Any]:
    get_accessible_resume(resume_id, user, action="create versions for")
    return _append_version(resume_id, user["id"], normalize_sections(payload.sections), payload.description)


def list_versions(resume_id: str, user: dict[str, Any]) -> list[dict[str, Any]]:
    get_accessible_resume(resume_id, user, action="view versions of")
    return store.find_documents(VERSIONS, {"resume_id": resume_id}, sort_by="version_number", descending=True)


def get_version(resume_id: str, user: dict[str, Any], version_number: int) -> dict[str, Any]:
    get_accessible_resume(resume_id, user, action="view versions of")
    version = store.find_one(VERSIONS, {"resume_id": resume_id, "version_number": version_number})
    if version is None:
        raise NotFoundError("Version not found")
    return version


def restore_version(resume_id: str, user: dict[str, Any], version_number: int) -> dict[str, Any]:
    get_accessible_resume(resume_id, user, action="restore versions of")
    with store.transaction():
        version = store.find_one(VERSIONS, {"resume_id": resume_id, "version_number": version_number})
        if version is None:
            raise NotFoundError("Version not found")
        store.update_document(
            RESUMES,
            resume_id,
            {"sections": version["sections"], "last_modified": store.utc_now_iso()},
        )
        restored = _append_version(
            resume_id,
            user["id"],
            version["sections"],
            f"Restored from version {version_number}",
        )
    return restored
