from resume_builder.ai.config import load_ai_config
from resume_builder.ai.types import AIClient

from resume_builder.ai.providers.openai_provider import OpenAIProvider
from resume_builder.ai.providers.gemini_provider import GeminiProvider


def get_ai_client() -> AIClient:
    cfg = load_ai_config()

    if cfg.provider == "openai":
        return OpenAIProvider(model=cfg.model, timeout_s=cfg.timeout_s, max_retries=cfg.max_retries)

    if cfg.provider == "gemini":
        return GeminiProvider(model=cfg.model, timeout_s=cfg.timeout_s)

    raise ValueError(f"Unsupported AI_PROVIDER='{cfg.provider}'")
