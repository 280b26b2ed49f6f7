from __future__ import annotations

import logging
import re
from typing import Any

from resume_builder.analysis.heuristics import resume_plain_text, top_terms
from resume_builder.core.errors import NotFoundError
from resume_builder.db import store
from resume_builder.schemas.job import JobCreateRequest
from resume_builder.services.ai_service import analyze_with_ai
from resume_builder.services.resume_service import RESUMES

logger = logging.getLogger(__name__)

JOBS = "jobs"
SEARCH_LIMIT = 20
RECOMMENDATION_LIMIT = 10
KEYWORD_LIMIT = 10

_TERM_RE = re.compile(r"[\w+#.]+")
_NUMBERING_RE = re.compile(r"\d+\.\s*")


def _search_terms(text: str) -> list[str]:
    terms = [term.strip(".").lower() for term in _TERM_RE.findall(text)]
    return [term for term in terms if len(term) > 1]


def _searchable_text(job: dict[str, Any]) -> str:
    parts = [job.get("title"), job.get("company"), job.get("description"), " ".join(job.get("skills") or [])]
    return " ".join(str(part) for part in parts if part).lower()


def _find_jobs(terms: list[str], *, location: str | None = None, limit: int) -> list[dict[str, Any]]:
    needle_location = (location or "").strip().lower()
    if not terms:
        return []

    def matches(job: dict[str, Any]) -> bool:
        if needle_location and needle_location not in str(job.get("location") or "").lower():
            return False
        text = _searchable_text(job)
        return any(term in text for term in terms)

    return store.find_documents(
        JOBS,
        {"is_active": True},
        predicate=matches,
        sort_by="date_posted",
        descending=True,
        limit=limit,
    )


def create_job(payload: JobCreateRequest) -> dict[str, Any]:
    data = payload.model_dump()
    data["date_posted"] = (payload.date_posted or store.utc_now()).isoformat()
    job = store.insert_document(JOBS, data)
    logger.info("job_created job_id=%s", job["id"])
    return job


def search_jobs(query: str, location: str | None = None) -> list[dict[str, Any]]:
    return _find_jobs(_search_terms(query), location=location, limit=SEARCH_LIMIT)


def _ai_keywords(resume_text: str) -> list[str]:
    raw = analyze_with_ai(resume_text, "extract-keywords")
    if not raw:
        return []
    cleaned = _NUMBERING_RE.sub("", raw).replace("\n", ", ")
    return [item.strip(" -*•") for item in cleaned.split(",") if item.strip(" -*•")][:KEYWORD_LIMIT]


def recommend_jobs(resume_id: str, user: dict[str, Any]) -> dict[str, Any]:
    resume = store.find_one(RESUMES, {"id": resume_id, "owner_id": user["id"]})
    if resume is None:
        raise NotFoundError("Resume not found")

    resume_text = resume_plain_text(resume)
    keywords = _ai_keywords(resume_text) or top_terms(resume_text, KEYWORD_LIMIT)
    terms = [term for keyword in keywords for term in _search_terms(keyword)]
    jobs = _find_jobs(terms, limit=RECOMMENDATION_LIMIT)
    return {"jobs": jobs, "keywords": keywords}
