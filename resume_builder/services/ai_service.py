from __future__ import annotations

import json
import logging
import re
from functools import lru_cache
from typing import Any, Literal

from resume_builder.ai.config import load_ai_config, provider_api_key
from resume_builder.ai.factory import get_ai_client
from resume_builder.ai.types import AIClient, ChatMessage

logger = logging.getLogger(__name__)

AnalysisKind = Literal["resume", "job-match", "extract-keywords"]

SYSTEM_PROMPT = "You are an expert resume analyzer and career coach. Provide detailed, actionable feedback."

_PROMPTS: dict[str, str] = {
    "resume": (
        "Analyze this resume and provide detailed feedback:\n"
        "1. Overall Structure and Format\n"
        "2. Content Quality\n"
        "3. Skills Assessment\n"
        "4. Experience Description Quality\n"
        "5. Areas for Improvement\n"
        "6. ATS Optimization Suggestions\n\n"
        "Resume Text:\n{text}"
    ),
    "job-match": (
        "Analyze how well this resume matches the job description and provide detailed feedback:\n"
        "1. Overall Match Score (0-100)\n"
        "2. Key Skills Match\n"
        "3. Experience Relevance\n"
        "4. Missing Keywords/Skills\n"
        "5. Suggested Improvements\n"
        "6. Competitive Advantages\n\n"
        "{text}"
    ),
    "extract-keywords": (
        "Extract the 10 most important professional skills and job-title keywords from this resume. "
        "Return them as a comma-separated list only.\n\n{text}"
    ),
}

_JSON_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def _looks_like_placeholder(value: str) -> bool:
    lower = value.strip().lower()
    return lower.startswith("your_") or lower.startswith("replace_") or lower in {"changeme", "todo"}


def ai_enabled() -> bool:
    cfg = load_ai_config()
    if not cfg.enabled:
        return False
    if cfg.provider not in {"openai", "gemini"}:
        return False
    api_key = provider_api_key(cfg.provider)
    if not api_key or _looks_like_placeholder(api_key):
        return False
    return True


@lru_cache(maxsize=1)
def _client() -> AIClient:
    return get_ai_client()


def _model() -> str:
    return load_ai_config().model


def text_completion(
    *,
    user_prompt: str,
    system_prompt: str = SYSTEM_PROMPT,
    temperature: float = 0.7,
    max_output_tokens: int = 1000,
) -> str | None:
    if not ai_enabled():
        return None
    try:
        content = _client().complete(
            [ChatMessage("system", system_prompt), ChatMessage("user", user_prompt)],
            temperature=temperature,
            max_tokens=max_output_tokens,
        )
    except Exception as exc:  # noqa: BLE001 - callers fall back to heuristics
        logger.warning("ai_text_failed model=%s prompt_len=%s: %s", _model(), len(user_prompt), exc)
        return None
    content = (content or "").strip()
    return content or None


def _parse_json_object(content: str) -> dict[str, Any] | None:
    cleaned = _JSON_FENCE_RE.sub("", content.strip())
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError:
        start, end = cleaned.find("{"), cleaned.rfind("}")
        if start < 0 or end <= start:
            return None
        try:
            parsed = json.loads(cleaned[start : end + 1])
        except json.JSONDecodeError:
            return None
    return parsed if isinstance(parsed, dict) else None


def json_completion(
    *,
    system_prompt: str,
    user_prompt: str,
    temperature: float = 0.2,
    max_output_tokens: int = 900,
) -> dict[str, Any] | None:
    if not ai_enabled():
        return None
    try:
        content = _client().complete(
            [ChatMessage("system", system_prompt), ChatMessage("user", user_prompt)],
            json_mode=True,
            temperature=temperature,
            max_tokens=max_output_tokens,
        )
    except Exception as exc:  # noqa: BLE001 - callers fall back to heuristics
        logger.warning("ai_json_failed model=%s prompt_len=%s: %s", _model(), len(user_prompt), exc)
        return None

    if not content:
        logger.warning("ai_json_empty model=%s", _model())
        return None
    parsed = _parse_json_object(content)
    if parsed is None:
        logger.warning("ai_json_invalid model=%s content_len=%s", _model(), len(content))
    return parsed


def analyze_with_ai(text: str, kind: AnalysisKind = "resume") -> str | None:
    template = _PROMPTS.get(kind, "{text}")
    return text_completion(user_prompt=template.format(text=text))
