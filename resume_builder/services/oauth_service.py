from __future__ import annotations

import logging
from typing import Any
from urllib.parse import urlencode

import httpx
import jwt

from resume_builder.core.config import settings
from resume_builder.core.errors import ServiceError, UpstreamError
from resume_builder.services.auth_service import OAuthProvider, link_oauth_account

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GITHUB_AUTH_URL = "https://github.com/login/oauth/authorize"
GITHUB_TOKEN_URL = "https://github.com/login/oauth/access_token"
GITHUB_API_URL = "https://api.github.com"

_TIMEOUT_S = 15.0


def _callback_url(provider: OAuthProvider) -> str:
    return f"{settings.server_url}/api/auth/{provider}/callback"


def provider_configured(provider: OAuthProvider) -> bool:
    if provider == "google":
        return bool(settings.google_client_id and settings.google_client_secret)
    return bool(settings.github_client_id and settings.github_client_secret)


def authorize_url(provider: OAuthProvider) -> str:
    if not provider_configured(provider):
        raise ServiceError(f"{provider.capitalize()} OAuth is not configured", 500)

    if provider == "google":
        params = {
            "client_id": settings.google_client_id,
            "redirect_uri": _callback_url("google"),
            "response_type": "code",
            "scope": "openid email profile",
            "prompt": "select_account",
        }
        return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"

    params = {
        "client_id": settings.github_client_id,
        "redirect_uri": _callback_url("github"),
        "scope": "user:email",
    }
    return f"{GITHUB_AUTH_URL}?{urlencode(params)}"


def _google_identity(code: str) -> dict[str, Any]:
    token_resp = httpx.post(
        GOOGLE_TOKEN_URL,
        data={
            "code": code,
            "client_id": settings.google_client_id,
            "client_secret": settings.google_client_secret,
            "redirect_uri": _callback_url("google"),
            "grant_type": "authorization_code",
        },
        timeout=_TIMEOUT_S,
    )
    token_resp.raise_for_status()
    id_token = token_resp.json().get("id_token")
    if not id_token:
        raise UpstreamError("Google did not return an id_token", 502)

    # signature not re-verified; id_token is read directly from the token endpoint response
    info = jwt.decode(id_token, options={"verify_signature": False})
    if not info.get("sub") or not info.get("email"):
        raise UpstreamError("Google profile is missing an email address", 502)
    return {
        "provider_id": str(info["sub"]),
        "email": info["email"],
        "username": info.get("email", "").split("@")[0],
        "first_name": info.get("given_name"),
        "last_name": info.get("family_name"),
        "avatar_url": info.get("picture"),
    }


def _github_identity(code: str) -> dict[str, Any]:
    token_resp = httpx.post(
        GITHUB_TOKEN_URL,
        data={
            "code": code,
            "client_id": settings.github_client_id,
            "client_secret": settings.github_client_secret,
            "redirect_uri": _callback_url("github"),
        },
        headers={"Accept": "application/json"},
        timeout=_TIMEOUT_S,
    )
    token_resp.raise_for_status()
    access_token = token_resp.json().get("access_token")
    if not access_token:
        raise UpstreamError("GitHub did not return an access token", 502)

    headers = {"Authorization": f"Bearer {access_token}", "Accept": "application/vnd.github+json"}
    with httpx.Client(base_url=GITHUB_API_URL, headers=headers, timeout=_TIMEOUT_S) as client:
        profile_resp = client.get("/user")
        profile_resp.raise_for_status()
        profile = profile_resp.json()

        email = profile.get("email")
        if not email:
            emails_resp = client.get("/user/emails")
            if emails_resp.status_code == 200:
                emails = emails_resp.json() or []
                primary = next((item for item in emails if item.get("primary") and item.get("verified")), None)
                email = primary.get("email") if primary else None

    login = str(profile.get("login") or "")
    name = str(profile.get("name") or "").strip()
    first_name, _, last_name = name.partition(" ")
    return {
        "provider_id": str(profile["id"]),
        "email": email or f"{login}@github.com",
        "username": login or None,
        "first_name": first_name or None,
        "last_name": last_name or None,
        "avatar_url": profile.get("avatar_url"),
    }


def complete_oauth(provider: OAuthProvider, code: str) -> dict[str, Any]:
    """Exchange an authorization code and return the linked local user."""
    if not provider_configured(provider):
        raise ServiceError(f"{provider.capitalize()} OAuth is not configured", 500)
    try:
        identity = _google_identity(code) if provider == "google" else _github_identity(code)
    except (httpx.HTTPError, jwt.PyJWTError, ValueError, KeyError, TypeError, AttributeError) as exc:
        logger.warning("oauth_exchange_failed provider=%s: %s", provider, exc)
        raise UpstreamError(f"{provider.capitalize()} OAuth failed", 502) from exc
    return link_oauth_account(provider, **identity)


def success_redirect(provider: OAuthProvider, token: str) -> str:
    return f"{settings.client_url}/oauth/callback?{urlencode({'provider': provider, 'token': token})}"


def failure_redirect(provider: OAuthProvider) -> str:
    return f"{settings.client_url}/login?{urlencode({'error': f'{provider.capitalize()} OAuth failed'})}"
