"""
Application error hierarchy and FastAPI exception handlers.

AppError is the base for all typed errors. The global exception handler
converts AppError subclasses to consistent JSON responses.

Request body validation failures are reported as ValidationError (400) with
one entry per violated field. Non-AppError exceptions are logged and degrade
to a generic 500 (with Sentry reporting when configured).
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse

from shared.logging import get_logger

log = get_logger(__name__)


class AppError(Exception):
    """Base application error. All typed errors inherit from this."""

    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.details = details

    def to_dict(self) -> dict:
        payload: dict = {"error": self.message, "code": self.error_code}
        if self.field is not None:
            payload["field"] = self.field
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationError(AppError):
    status_code = 400
    error_code = "validation_error"


class DuplicateEmailError(AppError):
    status_code = 400
    error_code = "duplicate_email"


class InvalidRequestError(AppError):
    status_code = 400
    error_code = "invalid_request"


class InvalidOtpError(AppError):
    status_code = 400
    error_code = "invalid_otp"


class OtpExpiredError(AppError):
    status_code = 400
    error_code = "otp_expired"


class AuthenticationError(AppError):
    status_code = 401
    error_code = "authentication_error"


class InvalidCredentialsError(AuthenticationError):
    """Same message for an unknown email and a wrong password."""

    error_code = "invalid_credentials"


class ForbiddenError(AppError):
    status_code = 403
    error_code = "forbidden"


class UnverifiedAccountError(ForbiddenError):
    error_code = "account_not_verified"


class InternalError(AppError):
    status_code = 500
    error_code = "internal_error"


class LogoutError(AppError):
    """Rendered as plain text rather than JSON."""

    status_code = 500
    error_code = "logout_failed"


def _format_validation_errors(exc: RequestValidationError) -> list[dict]:
    details = []
    for err in exc.errors():
        # loc is ("body", "<field>", ...) for JSON bodies
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        details.append({"field": ".".join(loc) or None, "message": err.get("msg")})
    return details


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI app."""

    @app.exception_handler(LogoutError)
    async def logout_error_handler(request: Request, exc: LogoutError) -> PlainTextResponse:
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        error = ValidationError(
            "Invalid request body", details=_format_validation_errors(exc)
        )
        log.info(
            "request_validation_failed",
            path=request.url.path,
            fields=[d["field"] for d in error.details],
        )
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        # Sentry integration: if sentry_sdk is initialized it will auto-capture
        # unhandled exceptions before this handler fires.
        log.error(
            "unhandled_exception",
            path=request.url.path,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "code": "internal_error"},
        )
