from __future__ import annotations

import logging
import re
from typing import Any

from resume_builder.analysis.heuristics import (
    analyze_resume_text,
    calculate_ats_compatibility,
    calculate_ats_score,
    generate_recommendations,
    resume_plain_text,
)
from resume_builder.core.config import settings
from resume_builder.core.errors import BadRequestError, NotFoundError, ServiceError
from resume_builder.db import store
from resume_builder.parsing.extract import ExtractionError, extract_text
from resume_builder.schemas.analysis import SaveAnalysisRequest
from resume_builder.services.ai_service import analyze_with_ai, json_completion
from resume_builder.services.ats_service import ANALYSES
from resume_builder.services.resume_service import RESUMES, get_accessible_resume

logger = logging.getLogger(__name__)

ANALYSIS_RESULTS = "analysis_results"

MIN_JOB_DESCRIPTION_CHARS = 10
MIN_RESUME_TEXT_CHARS = 50

_MATCH_SYSTEM_PROMPT = (
    "You compare resumes with job descriptions. Respond with a JSON object containing "
    '"matchScore" (integer 0-100), "matchedSkills" (array of strings), '
    '"missingSkills" (array of strings) and "recommendations" (array of short strings).'
)
_SENTENCE_RE = re.compile(r"(?<=[.!?])\s+|\n+")


def _own_resume(resume_id: str, user: dict[str, Any]) -> dict[str, Any]:
    resume = store.find_one(RESUMES, {"id": resume_id, "owner_id": user["id"]})
    if resume is None:
        raise NotFoundError("Resume not found")
    return resume


def analyze_resume(resume_id: str, user: dict[str, Any]) -> dict[str, Any]:
    resume = _own_resume(resume_id, user)
    text = resume_plain_text(resume)
    return {
        "resume_id": resume["id"],
        "user_id": user["id"],
        "resume_title": resume.get("name") or "",
        "general_feedback": generate_recommendations(text),
        "ats_score": calculate_ats_score(text),
        "timestamp": store.utc_now_iso(),
    }


def analyze_resume_with_job(resume_id: str, user: dict[str, Any], job_description: str) -> dict[str, Any]:
    resume = _own_resume(resume_id, user)
    text = resume_plain_text(resume)
    result = analyze_resume_text(text, job_description)
    result["ai_analysis"] = {
        "resume": analyze_with_ai(text, "resume"),
        "job_match": analyze_with_ai(f"Resume:\n{text}\n\nJob Description:\n{job_description}", "job-match"),
    }
    result.update(
        {
            "resume_id": resume["id"],
            "user_id": user["id"],
            "resume_title": resume.get("name") or "",
            "timestamp": store.utc_now_iso(),
        }
    )
    return result


def analysis_history(user: dict[str, Any]) -> list[dict[str, Any]]:
    records = store.find_documents(ANALYSIS_RESULTS, {"user_id": user["id"]}, sort_by="created_at", descending=True)
    return [
        {
            "id": record["id"],
            "resume_id": record.get("resume_id"),
            "resume_title": record.get("resume_title"),
            "timestamp": record.get("created_at"),
            "match_score": record.get("match_score"),
            "ats_score": record.get("ats_score"),
        }
        for record in records
    ]


def _score_from(payload: dict[str, Any], *keys: str) -> int | None:
    for key in keys:
        value = payload.get(key)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return int(min(max(round(value), 0), 100))
    return None


def save_analysis(user: dict[str, Any], payload: SaveAnalysisRequest) -> dict[str, Any]:
    resume = get_accessible_resume(payload.resume_id, user)
    record = store.insert_document(
        ANALYSIS_RESULTS,
        {
            "resume_id": resume["id"],
            "resume_title": resume.get("name"),
            "user_id": user["id"],
            "analysis_data": payload.analysis_result,
            "job_description": payload.job_description or "",
            "match_score": _score_from(payload.analysis_result, "matchScore", "match_score"),
            "ats_score": _score_from(payload.analysis_result, "atsScore", "ats_score"),
        },
    )
    logger.info("analysis_saved analysis_id=%s resume_id=%s", record["id"], resume["id"])
    return record


def purge_old_analyses() -> dict[str, int]:
    days = settings.analysis_retention_days
    return {
        ANALYSIS_RESULTS: store.purge_documents_older_than(ANALYSIS_RESULTS, days),
        ANALYSES: store.purge_documents_older_than(ANALYSES, days),
    }


def _string_list(value: Any) -> list[str]:
    if isinstance(value, str):
        return [part.strip() for part in _SENTENCE_RE.split(value) if part.strip()]
    if isinstance(value, list):
        return [str(item).strip() for item in value if str(item).strip()]
    return []


def _ai_match(resume_text: str, job_description: str) -> dict[str, Any] | None:
    payload = json_completion(
        system_prompt=_MATCH_SYSTEM_PROMPT,
        user_prompt=f"Resume:\n{resume_text}\n\nJob Description:\n{job_description}",
    )
    if payload is None:
        return None
    score = _score_from(payload, "matchScore")
    if score is None:
        logger.warning("ai_match_invalid_score keys=%s", sorted(payload))
        return None
    return {
        "match_score": score,
        "matched_skills": _string_list(payload.get("matchedSkills")),
        "missing_skills": _string_list(payload.get("missingSkills")),
        "recommendations": _string_list(payload.get("recommendations"))
        or ["No specific recommendations available."],
        "source": "ai",
    }


def _heuristic_match(resume_text: str, job_description: str) -> dict[str, Any]:
    result = analyze_resume_text(resume_text, job_description)
    return {
        "match_score": result["match_score"],
        "matched_skills": [item["text"] for item in result["matched_keywords"]],
        "missing_skills": [item["text"] for item in result["missing_keywords"]],
        "recommendations": generate_recommendations(resume_text) + result["overall_suggestions"],
        "source": "heuristic",
    }


def match_resume_file(filename: str, content: bytes, job_description: str) -> dict[str, Any]:
    job_description = (job_description or "").strip()
    if len(job_description) < MIN_JOB_DESCRIPTION_CHARS:
        raise BadRequestError(
            f"A valid job description is required (minimum {MIN_JOB_DESCRIPTION_CHARS} characters)"
        )

    try:
        resume_text = extract_text(filename, content).text
    except ExtractionError as exc:
        logger.warning("resume_extraction_failed file=%s: %s", filename, exc)
        raise ServiceError("Could not process the resume file. Please try a different file format.", 422) from exc

    if len(resume_text.strip()) < MIN_RESUME_TEXT_CHARS:
        raise BadRequestError(
            "Could not extract sufficient text from the resume. Please ensure the file is not corrupted or empty."
        )

    analysis = _ai_match(resume_text, job_description) or _heuristic_match(resume_text, job_description)
    ats = calculate_ats_compatibility(resume_text, analysis["match_score"])
    analysis["ats_score"] = ats["score"]
    analysis["ats_details"] = ats["details"]
    return analysis
