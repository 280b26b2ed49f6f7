from __future__ import annotations

import copy
import logging
from typing import Any

from resume_builder.core.errors import ConflictError, ForbiddenError, NotFoundError
from resume_builder.data.default_templates import DEFAULT_TEMPLATES
from resume_builder.db import store
from resume_builder.schemas.template import TemplateCreateRequest

logger = logging.getLogger(__name__)

TEMPLATES = "templates"


def template_view(template: dict[str, Any]) -> dict[str, Any]:
    view = {key: value for key, value in template.items() if key != "creator_id"}
    view["creator"] = template.get("creator_id")
    return view


def list_templates(category: str | None = None) -> list[dict[str, Any]]:
    filters: dict[str, Any] = {"is_public": True}
    if category:
        filters["category"] = category.strip().lower()
    return store.find_documents(TEMPLATES, filters, sort_by="usage_count", descending=True)


def get_template(template_id: str, user: dict[str, Any] | None) -> dict[str, Any]:
    template = store.get_document(TEMPLATES, template_id)
    if template is None:
        raise NotFoundError("Template not found")
    if not template.get("is_public"):
        if user is None or template.get("creator_id") != user["id"]:
            raise ForbiddenError("Not authorized to access this template")
    return template


def create_template(user: dict[str, Any], payload: TemplateCreateRequest) -> dict[str, Any]:
    with store.transaction():
        if store.find_one(TEMPLATES, {"name": payload.name}):
            raise ConflictError("Template name already exists")
        template = store.insert_document(
            TEMPLATES,
            {
                "name": payload.name,
                "preview_image": payload.preview_image,
                "sections": payload.sections,
                "style": payload.style.model_dump(),
                "category": payload.category,
                "is_public": payload.is_public,
                "creator_id": user["id"],
                "usage_count": 0,
            },
        )
    logger.info("template_created template_id=%s creator_id=%s", template["id"], user["id"])
    return template


def increment_usage(template_id: str) -> int:
    with store.transaction():
        template = store.get_document(TEMPLATES, template_id)
        if template is None:
            raise NotFoundError("Template not found")
        count = int(template.get("usage_count") or 0) + 1
        store.update_document(TEMPLATES, template_id, {"usage_count": count})
    return count


def seed_default_templates(*, force: bool = False) -> int:
    """Insert the built-in catalogue when no templates exist (or always, replacing it, with ``force``)."""
    with store.transaction():
        if force:
            store.delete_documents(TEMPLATES, {"creator_id": None})
        elif store.count_documents(TEMPLATES):
            return 0
        for entry in DEFAULT_TEMPLATES:
            store.insert_document(
                TEMPLATES,
                {
                    **copy.deepcopy(entry),
                    "is_public": True,
                    "creator_id": None,
                    "usage_count": 0,
                },
            )
    logger.info("templates_seeded count=%s", len(DEFAULT_TEMPLATES))
    return len(DEFAULT_TEMPLATES)
