from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

def _get_env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value


def _get_env_bool(name: str, default: bool) -> bool:
    raw = _get_env(name, None)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _get_env_int(name: str, default: int) -> int:
    raw = _get_env(name, None)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str]) -> tuple[str, ...]:
    raw = _get_env(name, None)
    if raw is None:
        return tuple(default)
    values = [item.strip() for item in raw.split(",")]
    clean = [item for item in values if item]
    return tuple(clean) if clean else tuple(default)


@dataclass(frozen=True)
class Settings:
    jwt_secret: str
    jwt_algorithm: str
    jwt_expire_days: int
    database_path: str
    upload_dir: str
    max_upload_bytes: int
    client_url: str
    server_url: str
    cors_allowed_origins: tuple[str, ...]
    rate_limit: str
    rate_limit_enabled: bool
    log_level: str
    sentry_dsn: str | None
    otp_ttl_minutes: int
    analysis_retention_days: int
    seed_templates: bool
    google_client_id: str | None
    google_client_secret: str | None
    github_client_id: str | None
    github_client_secret: str | None
    smtp_host: str | None
    smtp_port: int
    smtp_user: str | None
    smtp_password: str | None
    smtp_from: str | None
    smtp_use_tls: bool
    smtp_fallback_ssl: bool


_client_url = (_get_env("CLIENT_URL", "http://localhost:3000") or "http://localhost:3000").rstrip("/")

settings = Settings(
    jwt_secret=_get_env("JWT_SECRET", "dev-secret-change-me") or "dev-secret-change-me",
    jwt_algorithm=_get_env("JWT_ALGORITHM", "HS256") or "HS256",
    jwt_expire_days=_get_env_int("JWT_EXPIRE_DAYS", 30),
    database_path=_get_env("DATABASE_PATH", "data/resume_builder.db") or "data/resume_builder.db",
    upload_dir=_get_env("UPLOAD_DIR", "uploads") or "uploads",
    max_upload_bytes=_get_env_int("MAX_UPLOAD_BYTES", 5 * 1024 * 1024),
    client_url=_client_url,
    server_url=(_get_env("SERVER_URL", "http://localhost:8000") or "http://localhost:8000").rstrip("/"),
    cors_allowed_origins=_get_env_list(
        "CORS_ALLOWED_ORIGINS",
        [
            _client_url,
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
        ],
    ),
    rate_limit=_get_env("RATE_LIMIT", "100/15minutes") or "100/15minutes",
    rate_limit_enabled=_get_env_bool("RATE_LIMIT_ENABLED", True),
    log_level=_get_env("LOG_LEVEL", "INFO") or "INFO",
    sentry_dsn=_get_env("SENTRY_DSN"),
    otp_ttl_minutes=_get_env_int("OTP_TTL_MINUTES", 10),
    analysis_retention_days=_get_env_int("ANALYSIS_RETENTION_DAYS", 365),
    seed_templates=_get_env_bool("SEED_TEMPLATES", True),
    google_client_id=_get_env("GOOGLE_CLIENT_ID"),
    google_client_secret=_get_env("GOOGLE_CLIENT_SECRET"),
    github_client_id=_get_env("GITHUB_CLIENT_ID"),
    github_client_secret=_get_env("GITHUB_CLIENT_SECRET"),
    smtp_host=_get_env("SMTP_HOST"),
    smtp_port=_get_env_int("SMTP_PORT", 587),
    smtp_user=_get_env("SMTP_USER"),
    smtp_password=_get_env("SMTP_PASSWORD"),
    smtp_from=_get_env("SMTP_FROM"),
    smtp_use_tls=_get_env_bool("SMTP_USE_TLS", True),
    smtp_fallback_ssl=_get_env_bool("SMTP_FALLBACK_SSL", True),
)

if settings.jwt_expire_days <= 0:
    raise RuntimeError("JWT_EXPIRE_DAYS must be a positive number of days.")

if settings.otp_ttl_minutes <= 0:
    raise RuntimeError("OTP_TTL_MINUTES must be a positive number of minutes.")

if settings.max_upload_bytes <= 0:
    raise RuntimeError("MAX_UPLOAD_BYTES must be positive.")
