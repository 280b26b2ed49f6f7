from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, status

from resume_builder.core.errors import ServiceError, raise_http_error
from resume_builder.core.security import get_current_user, require_admin
from resume_builder.schemas.job import (
    JobCreateRequest,
    JobRecommendationRequest,
    JobRecommendationResponse,
    JobResponse,
    JobSearchRequest,
)
from resume_builder.services import job_service

router = APIRouter()


@router.post("/jobs", response_model=JobResponse, status_code=status.HTTP_201_CREATED)
async def create_job(payload: JobCreateRequest, _: dict[str, Any] = Depends(require_admin)):
    return job_service.create_job(payload)


@router.post("/jobs/search", response_model=list[JobResponse])
async def search_jobs(payload: JobSearchRequest, _: dict[str, Any] = Depends(get_current_user)):
    return job_service.search_jobs(payload.query, payload.location)


@router.post("/jobs/recommendations", response_model=JobRecommendationResponse)
async def recommendations(payload: JobRecommendationRequest, user: dict[str, Any] = Depends(get_current_user)):
    try:
        return job_service.recommend_jobs(payload.resume_id, user)
    except ServiceError as exc:
        raise_http_error(exc)
