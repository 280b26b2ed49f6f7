from __future__ import annotations

from datetime import datetime

from pydantic import Field

from resume_builder.schemas.common import ApiModel


class LatexSaveRequest(ApiModel):
    document_id: str | None = None
    code: str = Field(max_length=500000)
    title: str | None = Field(default=None, max_length=200)
    template: str | None = None


class LatexDocumentResponse(ApiModel):
    id: str
    code: str
    title: str = "Untitled Document"
    template: str | None = None
    last_modified: datetime | None = None
    created_at: datetime | None = None
