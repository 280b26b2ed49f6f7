from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import Field, field_validator

from resume_builder.schemas.common import ApiModel, UserSummary

SectionType = Literal["header", "experience", "education", "skills", "projects", "certifications", "custom"]
Orientation = Literal["portrait", "landscape"]


class Position(ApiModel):
    x: float = 0
    y: float = 0


class Size(ApiModel):
    width: float = 100
    height: float = 100


class SectionStyle(ApiModel):
    font_family: str | None = None
    font_size: str | float | None = None
    font_weight: str | float | None = None
    color: str | None = None
    background_color: str | None = None
    border_color: str | None = None
    border_width: str | float | None = None
    border_radius: str | float | None = None
    padding: str | float | None = None


class Section(ApiModel):
    id: str | None = None
    type: SectionType
    title: str = Field(min_length=1, max_length=200)
    position: Position = Field(default_factory=Position)
    size: Size = Field(default_factory=Size)
    content: Any = None
    style: SectionStyle = Field(default_factory=SectionStyle)


class CanvasSize(ApiModel):
    width: float = 800
    height: float = 1100


class Margins(ApiModel):
    top: float = 20
    right: float = 20
    bottom: float = 20
    left: float = 20


class PageSettings(ApiModel):
    page_size: str = "A4"
    orientation: Orientation = "portrait"
    margins: Margins = Field(default_factory=Margins)


class ResumeCreateRequest(ApiModel):
    name: str = Field(min_length=1, max_length=200)
    template: str = "custom"
    sections: list[Section] = Field(default_factory=list)
    canvas_size: CanvasSize = Field(default_factory=CanvasSize)
    page_settings: PageSettings = Field(default_factory=PageSettings)


class ResumeUpdateRequest(ApiModel):
    name: str | None = Field(default=None, min_length=1, max_length=200)
    template: str | None = None
    sections: list[Section] | None = None
    canvas_size: CanvasSize | None = None
    page_settings: PageSettings | None = None


class ResumeResponse(ApiModel):
    id: str
    name: str
    owner: UserSummary
    template: str = "custom"
    sections: list[Section] = Field(default_factory=list)
    canvas_size: CanvasSize = Field(default_factory=CanvasSize)
    page_settings: PageSettings = Field(default_factory=PageSettings)
    collaborators: list[UserSummary] = Field(default_factory=list)
    last_modified: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CollaboratorRequest(ApiModel):
    collaborator_id: str = Field(min_length=1)


class VersionCreateRequest(ApiModel):
    sections: list[Section]
    description: str

    @field_validator("description")
    @classmethod
    def _description(cls, value: str) -> str:
        value = (value or "").strip()
        if not value:
            raise ValueError("Description is required")
        return value


class VersionResponse(ApiModel):
    id: str
    resume_id: str
    version_number: int
    sections: list[Section] = Field(default_factory=list)
    description: str
    user: UserSummary | None = None
    created_at: datetime | None = None


class RestoreVersionResponse(ApiModel):
    message: str
    version: VersionResponse


class CommentCreateRequest(ApiModel):
    content: str = Field(min_length=1, max_length=5000)
    section: str = Field(min_length=1, max_length=200)
    position: Position | None = None
    parent_comment: str | None = None


class CommentUpdateRequest(ApiModel):
    content: str = Field(min_length=1, max_length=5000)


class CommentResponse(ApiModel):
    id: str
    resume_id: str
    content: str
    section: str
    position: Position | None = None
    parent_comment: str | None = None
    is_resolved: bool = False
    user: UserSummary | None = None
    resolved_by: UserSummary | None = None
    resolved_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
