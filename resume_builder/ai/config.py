import os
from dataclasses import dataclass

from resume_builder.core.config import _get_env_bool

_DEFAULT_MODELS = {
    "openai": "gpt-4o-mini",
    "gemini": "gemini-1.5-flash",
}


@dataclass(frozen=True)
class AIConfig:
    enabled: bool
    provider: str
    model: str
    timeout_s: float
    max_retries: int


def load_ai_config() -> AIConfig:
    provider = (os.getenv("AI_PROVIDER") or "openai").strip().lower()
    model = (os.getenv("AI_MODEL") or _DEFAULT_MODELS.get(provider, "gpt-4o-mini")).strip()
    return AIConfig(
        enabled=_get_env_bool("AI_ENABLED", True),
        provider=provider,
        model=model,
        timeout_s=float(os.getenv("OPENAI_TIMEOUT_S", "30")),
        max_retries=int(os.getenv("OPENAI_MAX_RETRIES", "2")),
    )


def provider_api_key(provider: str) -> str:
    if provider == "gemini":
        return (os.getenv("GEMINI_API_KEY") or "").strip()
    return (os.getenv("OPENAI_API_KEY") or "").strip()
