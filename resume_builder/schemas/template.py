from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import Field

from resume_builder.schemas.common import ApiModel

TemplateCategory = Literal["professional", "creative", "simple", "modern", "academic"]


class TemplateStyle(ApiModel):
    font_family: str = "Arial"
    colors: list[str] = Field(default_factory=list)
    layout: str = "single-column"


class TemplateCreateRequest(ApiModel):
    name: str = Field(min_length=1, max_length=120)
    preview_image: str | None = None
    sections: list[Any] = Field(default_factory=list)
    style: TemplateStyle = Field(default_factory=TemplateStyle)
    category: TemplateCategory = "professional"
    is_public: bool = True


class TemplateResponse(ApiModel):
    id: str
    name: str
    preview_image: str | None = None
    sections: list[Any] = Field(default_factory=list)
    style: TemplateStyle = Field(default_factory=TemplateStyle)
    category: TemplateCategory = "professional"
    is_public: bool = True
    creator: str | None = None
    usage_count: int = 0
    created_at: datetime | None = None


class TemplateUsageResponse(ApiModel):
    success: bool
    usage_count: int
