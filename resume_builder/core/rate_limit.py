from __future__ import annotations

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from resume_builder.core.config import settings

TOO_MANY_ATTEMPTS = "Too many requests, please try again later"


def client_address(request: Request) -> str:
    # first hop of X-Forwarded-For when running behind a proxy
    forwarded = request.headers.get("x-forwarded-for", "")
    if forwarded.strip():
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


limiter = Limiter(key_func=client_address, enabled=settings.rate_limit_enabled)


def rate_limit():
    """Limit applied to the credential endpoints (register, verify, resend, login)."""
    if not settings.rate_limit_enabled:
        def passthrough(func):
            return func

        return passthrough
    return limiter.limit(settings.rate_limit, error_message=TOO_MANY_ATTEMPTS)
