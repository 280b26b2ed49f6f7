from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import RedirectResponse

from resume_builder.core.errors import ServiceError, raise_http_error
from resume_builder.core.rate_limit import rate_limit
from resume_builder.core.security import get_current_user
from resume_builder.schemas.auth import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    RegisterResponse,
    ResendOtpRequest,
    UserPublic,
    VerifyEmailRequest,
)
from resume_builder.schemas.common import MessageResponse
from resume_builder.services import auth_service, oauth_service
from resume_builder.services.auth_service import OAuthProvider
from resume_builder.services.user_service import public_user

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/auth/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
@rate_limit()
async def register(request: Request, payload: RegisterRequest):
    try:
        user = auth_service.register_user(payload)
    except ServiceError as exc:
        raise_http_error(exc)
    return {
        "message": "Registration successful. Please check your email for the verification code.",
        "user_id": user["id"],
    }


@router.post("/auth/verify-email", response_model=AuthResponse)
@rate_limit()
async def verify_email(request: Request, payload: VerifyEmailRequest):
    try:
        user = auth_service.verify_email(payload.user_id, payload.otp)
    except ServiceError as exc:
        raise_http_error(exc)
    return auth_service.auth_payload(user)


@router.post("/auth/resend-otp", response_model=MessageResponse)
@rate_limit()
async def resend_otp(request: Request, payload: ResendOtpRequest):
    try:
        auth_service.resend_otp(payload.user_id)
    except ServiceError as exc:
        raise_http_error(exc)
    return {"message": "OTP sent successfully"}


@router.post("/auth/login", response_model=AuthResponse)
@rate_limit()
async def login(request: Request, payload: LoginRequest):
    try:
        user = auth_service.login(payload)
    except ServiceError as exc:
        raise_http_error(exc)
    return auth_service.auth_payload(user)


@router.get("/auth/me", response_model=UserPublic)
async def me(user: dict[str, Any] = Depends(get_current_user)):
    return public_user(user)


@router.get("/auth/{provider}")
async def oauth_start(provider: OAuthProvider):
    try:
        return RedirectResponse(oauth_service.authorize_url(provider), status_code=status.HTTP_302_FOUND)
    except ServiceError as exc:
        raise_http_error(exc)


@router.get("/auth/{provider}/callback")
async def oauth_callback(provider: OAuthProvider, code: str | None = Query(default=None)):
    if not code:
        return RedirectResponse(oauth_service.failure_redirect(provider), status_code=status.HTTP_302_FOUND)
    try:
        user = oauth_service.complete_oauth(provider, code)
    except ServiceError as exc:
        logger.warning("oauth_callback_failed provider=%s: %s", provider, exc)
        return RedirectResponse(oauth_service.failure_redirect(provider), status_code=status.HTTP_302_FOUND)
    token = auth_service.auth_payload(user)["token"]
    return RedirectResponse(oauth_service.success_redirect(provider, token), status_code=status.HTTP_302_FOUND)
