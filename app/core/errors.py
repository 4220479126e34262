"""
Custom exception hierarchy for ClearDay.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

from app.core.auth_errors import ParsedAuthError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class ClearDayException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    @property
    def headers(self) -> dict[str, str]:
        return {}

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class NotFoundError(ClearDayException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"

    def __init__(self, resource: str, resource_id: Any):
        super().__init__(
            message=f"{resource.capitalize()} {resource_id} not found.",
            details={"resource": resource, "id": str(resource_id)},
        )


class AlreadyDeletedError(ClearDayException):
    http_status = status.HTTP_409_CONFLICT
    code = "ALREADY_DELETED"

    def __init__(self, resource: str, resource_id: Any):
        super().__init__(
            message=f"{resource.capitalize()} {resource_id} is already deleted.",
            details={"resource": resource, "id": str(resource_id)},
        )


class DomainValidationError(ClearDayException):
    """A row-level rule was violated (the checks the schema triggers enforce)."""
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "DOMAIN_VALIDATION_ERROR"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message=message,
            details={"field": field} if field else {},
        )
        self.field = field


class AuthenticationRequiredError(ClearDayException):
    http_status = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHENTICATED"

    def __init__(self, message: str = "User not authenticated"):
        super().__init__(message=message)

    @property
    def headers(self) -> dict[str, str]:
        return {"WWW-Authenticate": "Bearer"}


class AuthError(ClearDayException):
    """
    Signup / login failure, already mapped to a user-facing message.

    Credential failures are 401; every other auth code is a 400.

    `message` is the user message; the raw provider text is kept in
    details so logs and clients can still see it.
    """
    _UNAUTHORIZED_CODES = {"INVALID_CREDENTIALS", "USER_NOT_FOUND", "WRONG_PASSWORD"}

    def __init__(self, parsed: ParsedAuthError):
        details: dict[str, Any] = {"provider_message": parsed.message}
        if parsed.field:
            details["field"] = parsed.field
        super().__init__(message=parsed.user_message, details=details)
        self.parsed = parsed
        self.code = parsed.code
        if parsed.code in self._UNAUTHORIZED_CODES:
            self.http_status = status.HTTP_401_UNAUTHORIZED
        else:
            self.http_status = status.HTTP_400_BAD_REQUEST


class RateLimitExceededError(ClearDayException):
    http_status = status.HTTP_429_TOO_MANY_REQUESTS
    code = "RATE_LIMIT_EXCEEDED"

    def __init__(self, message: str, retry_after: int, remaining: int, reset_at: float):
        super().__init__(
            message=message,
            details={"retry_after": retry_after},
        )
        self.retry_after = retry_after
        self.remaining = remaining
        self.reset_at = reset_at

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Retry-After": str(self.retry_after),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(int(self.reset_at)),
        }


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def clearday_exception_handler(request: Request, exc: ClearDayException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
        headers=exc.headers or None,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
