from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, status

from resume_builder.core.security import get_current_user
from resume_builder.schemas.analysis import AtsAnalysisResponse, AtsAnalyzeRequest, AtsSaveRequest
from resume_builder.services import ats_service

router = APIRouter()


@router.post("/ats/analyze", response_model=AtsAnalysisResponse)
async def analyze(payload: AtsAnalyzeRequest, user: dict[str, Any] = Depends(get_current_user)):
    return ats_service.analyze(user, payload)


@router.post("/ats/save-analysis", response_model=AtsAnalysisResponse, status_code=status.HTTP_201_CREATED)
async def save_analysis(payload: AtsSaveRequest, user: dict[str, Any] = Depends(get_current_user)):
    return ats_service.save(user, payload)


@router.get("/ats/analysis-history", response_model=list[AtsAnalysisResponse])
async def analysis_history(user: dict[str, Any] = Depends(get_current_user)):
    return ats_service.history(user)
