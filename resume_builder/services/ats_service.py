from __future__ import annotations

import logging
from typing import Any

from resume_builder.analysis.heuristics import (
    extract_keywords,
    generate_recommendations,
    top_terms,
)
from resume_builder.db import store
from resume_builder.schemas.analysis import AtsAnalyzeRequest, AtsSaveRequest
from resume_builder.services.ai_service import json_completion

logger = logging.getLogger(__name__)

ANALYSES = "analyses"
JOB_KEYWORD_LIMIT = 20

_SYSTEM_PROMPT = (
    "You are an expert ATS (Applicant Tracking System) analyzer. Analyze the resume against the job "
    'description and respond with a JSON object with keys "score" (integer 0-100), '
    '"missingKeywords" (array of strings) and "recommendations" (array of strings).'
)


def _clamp_score(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(min(max(round(value), 0), 100))


def _strings(value: Any) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return []
    return [str(item).strip() for item in value if str(item).strip()]


def _ai_analysis(resume_content: str, job_description: str) -> dict[str, Any] | None:
    payload = json_completion(
        system_prompt=_SYSTEM_PROMPT,
        user_prompt=f"Resume: {resume_content}\n\nJob Description: {job_description}",
    )
    if payload is None:
        return None
    score = _clamp_score(payload.get("score"))
    if score is None:
        return None
    return {
        "score": score,
        "missing_keywords": _strings(payload.get("missingKeywords")),
        "recommendations": _strings(payload.get("recommendations")),
    }


def _heuristic_analysis(resume_content: str, job_keywords: list[str]) -> dict[str, Any]:
    resume_words = set(extract_keywords(resume_content))
    missing = [word for word in job_keywords if word not in resume_words]
    matched = len(job_keywords) - len(missing)
    score = round(matched / len(job_keywords) * 100) if job_keywords else 0
    return {
        "score": int(min(max(score, 0), 100)),
        "missing_keywords": missing,
        "recommendations": generate_recommendations(resume_content),
    }


def analyze(user: dict[str, Any], payload: AtsAnalyzeRequest) -> dict[str, Any]:
    job_keywords = top_terms(payload.job_description, JOB_KEYWORD_LIMIT)
    result = _ai_analysis(payload.resume_content, payload.job_description)
    if result is None:
        result = _heuristic_analysis(payload.resume_content, job_keywords)

    record = store.insert_document(
        ANALYSES,
        {
            "user_id": user["id"],
            "resume_content": payload.resume_content,
            "job_description": payload.job_description,
            "job_title": payload.job_title,
            "company": payload.company,
            "job_keywords": job_keywords,
            **result,
        },
    )
    logger.info("ats_analysis_saved analysis_id=%s score=%s", record["id"], record["score"])
    return record


def save(user: dict[str, Any], payload: AtsSaveRequest) -> dict[str, Any]:
    return store.insert_document(ANALYSES, {"user_id": user["id"], **payload.model_dump()})


def history(user: dict[str, Any]) -> list[dict[str, Any]]:
    records = store.find_documents(ANALYSES, {"user_id": user["id"]}, sort_by="created_at", descending=True)
    return [
        {key: value for key, value in record.items() if key not in {"resume_content", "job_description"}}
        for record in records
    ]

