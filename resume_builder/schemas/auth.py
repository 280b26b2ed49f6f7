from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from resume_builder.schemas.common import ApiModel

Role = Literal["user", "admin"]


def _normalize_email(value: str) -> str:
    email = (value or "").strip().lower()
    if "@" not in email or email.startswith("@") or email.endswith("@"):
        raise ValueError("Please provide a valid email")
    return email


class RegisterRequest(ApiModel):
    username: str = Field(min_length=1, max_length=80)
    email: str = Field(max_length=254)
    password: str = Field(min_length=6, max_length=200)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator("username")
    @classmethod
    def _username(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Username is required")
        return value


class RegisterResponse(ApiModel):
    message: str
    user_id: str


class VerifyEmailRequest(ApiModel):
    user_id: str
    otp: str = Field(min_length=1, max_length=12)


class ResendOtpRequest(ApiModel):
    user_id: str


class LoginRequest(ApiModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def _email(cls, value: str) -> str:
        return (value or "").strip().lower()


class AuthResponse(ApiModel):
    id: str
    username: str | None = None
    email: str
    first_name: str | None = None
    last_name: str | None = None
    profile_picture: str | None = None
    role: Role = "user"
    token: str


class UserPublic(ApiModel):
    id: str
    username: str | None = None
    email: str
    first_name: str | None = None
    last_name: str | None = None
    profile_picture: str | None = None
    role: Role = "user"
    is_email_verified: bool = False
    has_google: bool = False
    has_github: bool = False
    created_at: datetime | None = None


class ProfileUpdateRequest(ApiModel):
    username: str | None = Field(default=None, min_length=1, max_length=80)
    email: str | None = Field(default=None, max_length=254)
    password: str | None = Field(default=None, min_length=6, max_length=200)
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)

    @field_validator("email")
    @classmethod
    def _email(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _normalize_email(value)

    @field_validator("username")
    @classmethod
    def _username(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = value.strip()
        if not value:
            raise ValueError("Username cannot be blank")
        return value


class ProfilePictureResponse(ApiModel):
    id: str
    profile_picture: str
    message: str


class UserSearchResult(ApiModel):
    id: str
    username: str | None = None
    email: str
    profile_picture: str | None = None
