from __future__ import annotations

from typing import Any

from fastapi import HTTPException


class ServiceError(RuntimeError):
    status_code = 500

    def __init__(self, message: str, status_code: int | None = None, *, detail: Any = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
        self.detail = detail if detail is not None else message


class BadRequestError(ServiceError):
    status_code = 400


class ConflictError(ServiceError):
    # duplicates surface as 400 on this API
    status_code = 400


class UnauthorizedError(ServiceError):
    status_code = 401


class ForbiddenError(ServiceError):
    status_code = 403


class NotFoundError(ServiceError):
    status_code = 404


class UpstreamError(ServiceError):
    status_code = 500


def raise_http_error(exc: ServiceError) -> None:
    raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc
