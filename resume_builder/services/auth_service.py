"""Password registration, OTP email verification and OAuth account linking."""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta
from typing import Any, Literal

from resume_builder.core.config import settings
from resume_builder.core.errors import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
    UpstreamError,
)
from resume_builder.core.security import USERS, create_access_token, hash_password, verify_password
from resume_builder.db import store
from resume_builder.integrations.email import send_otp_email
from resume_builder.schemas.auth import LoginRequest, RegisterRequest
from resume_builder.services.user_service import find_user_by_email, find_user_by_username, get_user

logger = logging.getLogger(__name__)

OAuthProvider = Literal["google", "github"]


def generate_otp() -> str:
    return f"{secrets.randbelow(1_000_000):06d}"


def _otp_fields() -> dict[str, Any]:
    expiry = store.utc_now() + timedelta(minutes=settings.otp_ttl_minutes)
    return {"otp": generate_otp(), "otp_expiry": expiry.isoformat()}


def auth_payload(user: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": user["id"],
        "username": user.get("username"),
        "email": user["email"],
        "first_name": user.get("first_name"),
        "last_name": user.get("last_name"),
        "profile_picture": user.get("profile_picture"),
        "role": user.get("role", "user"),
        "token": create_access_token(user["id"]),
    }


def register_user(payload: RegisterRequest) -> dict[str, Any]:
    with store.transaction():
        if find_user_by_email(payload.email) or find_user_by_username(payload.username):
            raise ConflictError("User already exists")
        user = store.insert_document(
            USERS,
            {
                "username": payload.username,
                "email": payload.email,
                "first_name": payload.first_name,
                "last_name": payload.last_name,
                "password_hash": hash_password(payload.password),
                "role": "user",
                "is_email_verified": False,
                "profile_picture": None,
                "google_id": None,
                "github_id": None,
                **_otp_fields(),
            },
        )

    if not send_otp_email(user["email"], user["otp"]):
        store.delete_document(USERS, user["id"])
        logger.warning("registration_rolled_back user_id=%s reason=otp_email_failed", user["id"])
        raise UpstreamError("Failed to send verification email. Please try again.")

    logger.info("user_registered user_id=%s", user["id"])
    return user


def _otp_is_valid(user: dict[str, Any], otp: str) -> bool:
    stored = user.get("otp")
    expiry = user.get("otp_expiry")
    if not stored or not expiry:
        return False
    if not secrets.compare_digest(str(stored), otp.strip()):
        return False
    return datetime.fromisoformat(expiry) > store.utc_now()


def verify_email(user_id: str, otp: str) -> dict[str, Any]:
    user = get_user(user_id)
    if user.get("is_email_verified"):
        raise BadRequestError("Email already verified")
    if not _otp_is_valid(user, otp):
        raise BadRequestError("Invalid or expired OTP")

    updated = store.update_document(
        USERS,
        user_id,
        {"is_email_verified": True, "otp": None, "otp_expiry": None},
    )
    if updated is None:
        raise NotFoundError("User not found")
    logger.info("email_verified user_id=%s", user_id)
    return updated


def resend_otp(user_id: str) -> None:
    user = get_user(user_id)
    if user.get("is_email_verified"):
        raise BadRequestError("Email already verified")
    updated = store.update_document(USERS, user_id, _otp_fields())
    if updated is None:
        raise NotFoundError("User not found")
    if not send_otp_email(updated["email"], updated["otp"]):
        raise UpstreamError("Failed to send OTP")


def login(payload: LoginRequest) -> dict[str, Any]:
    user = find_user_by_email(payload.email)
    if user is None or not verify_password(payload.password, user.get("password_hash")):
        raise UnauthorizedError("Invalid email or password")

    if not user.get("is_email_verified"):
        updated = store.update_document(USERS, user["id"], _otp_fields()) or user
        if not send_otp_email(updated["email"], updated["otp"]):
            logger.warning("login_otp_email_failed user_id=%s", user["id"])
        raise ForbiddenError(
            "Email not verified",
            detail={"message": "Email not verified", "userId": user["id"]},
        )
    return user


def _unique_username(base: str) -> str:
    candidate = "".join(ch for ch in base.lower() if ch.isalnum() or ch in "._-") or "user"
    username = candidate
    while find_user_by_username(username):
        username = f"{candidate}{secrets.randbelow(10_000)}"
    return username


def link_oauth_account(
    provider: OAuthProvider,
    *,
    provider_id: str,
    email: str,
    username: str | None = None,
    first_name: str | None = None,
    last_name: str | None = None,
    avatar_url: str | None = None,
) -> dict[str, Any]:
    """Find the account for an OAuth identity, linking by email or creating it."""
    id_field = f"{provider}_id"
    email = email.strip().lower()

    with store.transaction():
        user = store.find_one(USERS, {id_field: provider_id})
        if user is not None:
            return user

        user = find_user_by_email(email)
        if user is not None:
            changes: dict[str, Any] = {id_field: provider_id, "is_email_verified": True}
            if avatar_url and not user.get("profile_picture"):
                changes["profile_picture"] = avatar_url
            logger.info("oauth_account_linked provider=%s user_id=%s", provider, user["id"])
            return store.update_document(USERS, user["id"], changes) or user

        user = store.insert_document(
            USERS,
            {
                "username": _unique_username(username or email.split("@")[0]),
                "email": email,
                "first_name": first_name,
                "last_name": last_name,
                "password_hash": hash_password(secrets.token_urlsafe(24)),
                "role": "user",
                "is_email_verified": True,
                "profile_picture": avatar_url,
                "otp": None,
                "otp_expiry": None,
                "google_id": provider_id if provider == "google" else None,
                "github_id": provider_id if provider == "github" else None,
            },
        )
    logger.info("oauth_user_created provider=%s user_id=%s", provider, user["id"])
    return user
