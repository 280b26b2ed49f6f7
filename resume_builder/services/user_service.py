from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from resume_builder.core.config import settings
from resume_builder.core.errors import BadRequestError, ConflictError, NotFoundError
from resume_builder.core.security import USERS, hash_password
from resume_builder.db import store
from resume_builder.schemas.auth import ProfileUpdateRequest

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 10


def user_summary(user: dict[str, Any] | None) -> dict[str, Any] | None:
    if user is None:
        return None
    return {
        "id": user["id"],
        "username": user.get("username"),
        "email": user.get("email"),
        "first_name": user.get("first_name"),
        "last_name": user.get("last_name"),
        "profile_picture": user.get("profile_picture"),
    }


def summary_for(user_id: str | None) -> dict[str, Any] | None:
    if not user_id:
        return None
    user = store.get_document(USERS, user_id)
    if user is None:
        return {"id": user_id}
    return user_summary(user)


def public_user(user: dict[str, Any]) -> dict[str, Any]:
    return {
        **user_summary(user),
        "role": user.get("role", "user"),
        "is_email_verified": bool(user.get("is_email_verified")),
        "has_google": bool(user.get("google_id")),
        "has_github": bool(user.get("github_id")),
        "created_at": user.get("created_at"),
    }


def get_user(user_id: str) -> dict[str, Any]:
    user = store.get_document(USERS, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def find_user_by_email(email: str) -> dict[str, Any] | None:
    return store.find_one(USERS, {"email": email.strip().lower()})


def find_user_by_username(username: str) -> dict[str, Any] | None:
    return store.find_one(USERS, {"username": username})


def update_profile(user: dict[str, Any], payload: ProfileUpdateRequest) -> dict[str, Any]:
    changes: dict[str, Any] = {}
    with store.transaction():
        if payload.email and payload.email != user.get("email"):
            if find_user_by_email(payload.email):
                raise ConflictError("Email is already in use")
            changes["email"] = payload.email
        if payload.username and payload.username != user.get("username"):
            if find_user_by_username(payload.username):
                raise ConflictError("Username is already taken")
            changes["username"] = payload.username
        if payload.first_name is not None:
            changes["first_name"] = payload.first_name
        if payload.last_name is not None:
            changes["last_name"] = payload.last_name
        if payload.password:
            changes["password_hash"] = hash_password(payload.password)

        if not changes:
            return user
        updated = store.update_document(USERS, user["id"], changes)
    if updated is None:
        raise NotFoundError("User not found")
    logger.info("profile_updated user_id=%s fields=%s", user["id"], sorted(changes))
    return updated


def save_profile_picture(user: dict[str, Any], filename: str, content: bytes) -> dict[str, Any]:
    ext = filename.rsplit(".", 1)[-1].lower()
    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    stored_name = f"{store.new_id()}.{ext}"
    (upload_dir / stored_name).write_bytes(content)

    previous = user.get("profile_picture") or ""
    updated = store.update_document(USERS, user["id"], {"profile_picture": f"/uploads/{stored_name}"})
    if updated is None:
        raise NotFoundError("User not found")

    if previous.startswith("/uploads/"):
        old_path = upload_dir / previous.removeprefix("/uploads/")
        if old_path.is_file() and old_path.name != stored_name:
            old_path.unlink()
    return updated


def search_users(current_user: dict[str, Any], query: str | None) -> list[dict[str, Any]]:
    needle = (query or "").strip().lower()
    if not needle:
        raise BadRequestError("Search query is required")

    def matches(doc: dict[str, Any]) -> bool:
        if doc["id"] == current_user["id"]:
            return False
        username = str(doc.get("username") or "").lower()
        email = str(doc.get("email") or "").lower()
        return needle in username or needle in email

    users = store.find_documents(USERS, predicate=matches, sort_by="username", limit=SEARCH_LIMIT)
    return [
        {
            "id": doc["id"],
            "username": doc.get("username"),
            "email": doc.get("email"),
            "profile_picture": doc.get("profile_picture"),
        }
        for doc in users
    ]
