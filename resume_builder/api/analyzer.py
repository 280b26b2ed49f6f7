from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, File, Form, UploadFile, status

from resume_builder.core.config import settings
from resume_builder.core.errors import ServiceError, raise_http_error
from resume_builder.core.security import get_current_user
from resume_builder.schemas.analysis import (
    AnalysisHistoryItem,
    AnalyzeRequest,
    AnalyzeResponse,
    AnalyzeWithJobRequest,
    KeywordAnalysisResponse,
    MatchResponse,
    SaveAnalysisRequest,
    SaveAnalysisResponse,
)
from resume_builder.services import analyzer_service
from resume_builder.services.upload_security import RESUME_EXTENSIONS, read_upload

router = APIRouter()


@router.post("/analyzer/analyze", response_model=AnalyzeResponse)
async def analyze(payload: AnalyzeRequest, user: dict[str, Any] = Depends(get_current_user)):
    try:
        return analyzer_service.analyze_resume(payload.resume_id, user)
    except ServiceError as exc:
        raise_http_error(exc)


@router.post("/analyzer/analyze-with-job", response_model=KeywordAnalysisResponse)
async def analyze_with_job(payload: AnalyzeWithJobRequest, user: dict[str, Any] = Depends(get_current_user)):
    try:
        return analyzer_service.analyze_resume_with_job(payload.resume_id, user, payload.job_description)
    except ServiceError as exc:
        raise_http_error(exc)


@router.get("/analyzer/history", response_model=list[AnalysisHistoryItem])
async def history(user: dict[str, Any] = Depends(get_current_user)):
    return analyzer_service.analysis_history(user)


@router.post("/analyzer/save", response_model=SaveAnalysisResponse, status_code=status.HTTP_201_CREATED)
async def save(payload: SaveAnalysisRequest, user: dict[str, Any] = Depends(get_current_user)):
    try:
        record = analyzer_service.save_analysis(user, payload)
    except ServiceError as exc:
        raise_http_error(exc)
    return {"message": "Analysis saved successfully", "analysis_id": record["id"]}


@router.post("/analyzer/match", response_model=MatchResponse)
async def match(
    resume: UploadFile = File(...),
    job_description: str = Form(default="", alias="jobDescription"),
    user: dict[str, Any] = Depends(get_current_user),
):
    try:
        filename, content = await read_upload(resume, allowed=RESUME_EXTENSIONS, max_bytes=settings.max_upload_bytes)
        return analyzer_service.match_resume_file(filename, content, job_description)
    except ServiceError as exc:
        raise_http_error(exc)
