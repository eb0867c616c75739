"""Error taxonomy and the central exception translator."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .responses import envelope

logger = logging.getLogger(__name__)

GENERIC_MESSAGE = "Something went wrong!"
NOT_FOUND_MESSAGE = "404 not found!"


class AppError(Exception):
    """Base class for failures that carry their own status code and message."""

    status_code: int = 500
    message: str = GENERIC_MESSAGE

    def __init__(self, message: str | None = None, *, status_code: int | None = None) -> None:
        if message is not None:
            self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class RequestValidationFailed(AppError):
    """Raised when a payload or query string fails its declared schema."""

    status_code = 400
    message = "Invalid input parameters"

    def __init__(self, errors: list[dict[str, Any]], message: str | None = None) -> None:
        super().__init__(message)
        self.errors = errors


class ModelValidationError(AppError):
    """Raised by the persistence layer when a stored value breaks a model rule."""

    status_code = 400


class DuplicateKeyError(AppError):
    status_code = 400

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"Duplicate value entered for {field} field, please use another value")


class InvalidIdError(AppError):
    status_code = 400
    message = "Invalid ID!"


class NotFoundError(AppError):
    status_code = 404
    message = "Resource not found"


class AuthTokenError(AppError):
    status_code = 401
    message = "Invalid token or token expired, authorization denied"


class MissingTokenError(AuthTokenError):
    message = "No access token found"


class InvalidTokenError(AuthTokenError):
    pass


class TokenExpiredError(AuthTokenError):
    message = "Token expired, please login again"


def _duplicate_field(exc: IntegrityError) -> str | None:
    # sqlite: "UNIQUE constraint failed: admin_users.email"
    # postgres: 'duplicate key value violates unique constraint "ix_admin_users_email"'
    text = str(exc.orig)
    if "UNIQUE constraint failed:" in text:
        column = text.split("UNIQUE constraint failed:", 1)[1].strip().split(",")[0]
        return column.rsplit(".", 1)[-1]
    if "duplicate key" in text:
        marker = text.split("Key (", 1)
        if len(marker) == 2:
            return marker[1].split(")", 1)[0]
        return "unique"
    return None


def translate(exc: Exception) -> tuple[int, str, Any]:
    """Map any failure to ``(status_code, message, data)``."""

    if isinstance(exc, RequestValidationFailed):
        return exc.status_code, exc.message, exc.errors
    if isinstance(exc, AppError):
        return exc.status_code, exc.message, None
    if isinstance(exc, IntegrityError):
        field = _duplicate_field(exc)
        if field:
            duplicate = DuplicateKeyError(field)
            return duplicate.status_code, duplicate.message, None
        return 500, GENERIC_MESSAGE, None
    if isinstance(exc, RequestValidationError):
        errors = [
            {
                "code": error.get("type", "invalid"),
                "path": _format_location(error.get("loc", ())),
                "message": error.get("msg", ""),
            }
            for error in exc.errors()
        ]
        return 400, RequestValidationFailed.message, errors
    if isinstance(exc, StarletteHTTPException):
        if exc.status_code in (404, 405):
            return 404, NOT_FOUND_MESSAGE, None
        return exc.status_code, str(exc.detail), None
    return 500, GENERIC_MESSAGE, None


def _format_location(loc: tuple[Any, ...] | list[Any]) -> Any:
    parts = [part for part in loc if part not in ("body", "query", "path")]
    if len(parts) == 1:
        return parts[0]
    return parts


async def _handle(request: Request, exc: Exception) -> JSONResponse:
    status_code, message, data = translate(exc)
    if status_code >= 500:
        logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    else:
        logger.info("%s %s failed: %s", request.method, request.url.path, message)
    return envelope(False, status_code, message, data)


def install_error_handlers(app: FastAPI) -> None:
    """Route every failure through :func:`translate`."""

    for exc_class in (
        AppError,
        IntegrityError,
        RequestValidationError,
        StarletteHTTPException,
        Exception,
    ):
        app.add_exception_handler(exc_class, _handle)
