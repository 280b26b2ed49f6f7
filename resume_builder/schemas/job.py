from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from resume_builder.schemas.common import ApiModel

JobType = Literal["Full-time", "Part-time", "Contract", "Temporary", "Internship", "Remote"]


class JobCreateRequest(ApiModel):
    title: str = Field(min_length=1, max_length=200)
    company: str = Field(min_length=1, max_length=200)
    location: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=60000)
    salary: str = "Not specified"
    job_type: JobType = "Full-time"
    application_url: str = Field(min_length=1, max_length=2000)
    source: str = "Unknown"
    date_posted: datetime | None = None
    skills: list[str] = Field(default_factory=list)
    is_active: bool = True


class JobResponse(ApiModel):
    id: str
    title: str
    company: str
    location: str
    description: str
    salary: str = "Not specified"
    job_type: JobType = "Full-time"
    application_url: str
    source: str = "Unknown"
    date_posted: datetime | None = None
    skills: list[str] = Field(default_factory=list)
    is_active: bool = True


class JobSearchRequest(ApiModel):
    query: str
    location: str | None = None

    @field_validator("query")
    @classmethod
    def _query(cls, value: str) -> str:
        value = (value or "").strip()
        if not value:
            raise ValueError("Search query is required")
        return value


class JobRecommendationRequest(ApiModel):
    resume_id: str = Field(min_length=1)


class JobRecommendationResponse(ApiModel):
    jobs: list[JobResponse] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
