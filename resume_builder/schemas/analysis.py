from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from resume_builder.schemas.common import ApiModel

Importance = Literal["high", "medium", "low"]


class KeywordInfo(ApiModel):
    text: str
    importance: Importance
    category: str


class Metric(ApiModel):
    name: str
    value: str
    description: str


class AtsDetails(ApiModel):
    formatting: int = 0
    keywords: int = 0
    readability: int = 0
    structure: int = 0


class AnalyzeRequest(ApiModel):
    resume_id: str = Field(min_length=1)


class AnalyzeResponse(ApiModel):
    resume_id: str
    user_id: str
    resume_title: str
    general_feedback: list[str]
    ats_score: int = Field(ge=0, le=100)
    timestamp: datetime


class AnalyzeWithJobRequest(ApiModel):
    resume_id: str = Field(min_length=1)
    job_description: str = Field(min_length=1, max_length=60000)


class AiAnalysis(ApiModel):
    resume: str | None = None
    job_match: str | None = None


class KeywordAnalysisResponse(ApiModel):
    resume_id: str
    user_id: str
    resume_title: str
    timestamp: datetime
    match_score: int = Field(ge=0, le=100)
    ats_score: int = Field(ge=0, le=100)
    matched_keywords: list[KeywordInfo] = Field(default_factory=list)
    missing_keywords: list[KeywordInfo] = Field(default_factory=list)
    section_recommendations: dict[str, str] = Field(default_factory=dict)
    overall_suggestions: list[str] = Field(default_factory=list)
    metrics: list[Metric] = Field(default_factory=list)
    ai_analysis: AiAnalysis = Field(default_factory=AiAnalysis)


class MatchResponse(ApiModel):
    match_score: int = Field(ge=0, le=100)
    matched_skills: list[str] = Field(default_factory=list)
    missing_skills: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    ats_score: int = Field(ge=0, le=100)
    ats_details: AtsDetails
    source: Literal["ai", "heuristic"] = "heuristic"


class SaveAnalysisRequest(ApiModel):
    resume_id: str = Field(min_length=1)
    analysis_result: dict[str, Any]
    job_description: str | None = None


class SaveAnalysisResponse(ApiModel):
    message: str
    analysis_id: str


class AnalysisHistoryItem(ApiModel):
    id: str
    resume_id: str
    resume_title: str | None = None
    timestamp: datetime
    match_score: int | None = None
    ats_score: int | None = None


class AtsAnalyzeRequest(ApiModel):
    resume_content: str = Field(min_length=1, max_length=120000)
    job_description: str = Field(min_length=1, max_length=60000)
    job_title: str | None = None
    company: str | None = None


class AtsAnalysisResponse(ApiModel):
    id: str
    score: int = Field(ge=0, le=100)
    job_keywords: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    job_title: str | None = None
    company: str | None = None
    created_at: datetime | None = None


class AtsSaveRequest(ApiModel):
    resume_content: str = Field(default="", max_length=120000)
    job_description: str = Field(default="", max_length=60000)
    score: int = Field(ge=0, le=100)
    job_keywords: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    job_title: str | None = None
    company: str | None = None
