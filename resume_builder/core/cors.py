from __future__ import annotations

from resume_builder.core.config import settings


def cors_allowed_origins() -> list[str]:
    origins: list[str] = []
    for origin in settings.cors_allowed_origins:
        if origin not in origins:
            origins.append(origin)
    return origins
