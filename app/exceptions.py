# =============================================================================
# app/exceptions.py - HTTP Errors and Exception Handlers
# =============================================================================
# Centralized error handling for the API.
#
# HTTP errors are a single exception type tagged with an ErrorKind rather
# than one subclass per status code. Handlers dispatch on the kind:
#
#   raise ApiError(ErrorKind.NOT_FOUND, "Post not found", ["id=42"])
# =============================================================================

from __future__ import annotations

import logging
from enum import Enum
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ErrorKind(Enum):
    """HTTP error kinds, each with its status code and default message."""

    BAD_REQUEST = (400, "Bad Request")
    UNAUTHORIZED = (401, "Unauthorized")
    FORBIDDEN = (403, "Forbidden")
    NOT_FOUND = (404, "Not Found")
    CONFLICT = (409, "Conflict")
    INTERNAL_SERVER_ERROR = (500, "Internal Server Error")

    def __init__(self, status_code: int, default_message: str):
        self.status_code = status_code
        self.default_message = default_message

    @classmethod
    def from_status(cls, status_code: int) -> ErrorKind:
        """
        Look up the kind for a status code.

        Unknown codes map to INTERNAL_SERVER_ERROR so that callers always
        get a renderable error.
        """
        for kind in cls:
            if kind.status_code == status_code:
                return kind
        return cls.INTERNAL_SERVER_ERROR


class ApiError(Exception):
    """
    Error returned to API clients.

    Attributes:
        kind: The ErrorKind tag (decides the HTTP status)
        message: Human-readable summary (defaults to the kind's message)
        errors: Detail strings, e.g. one per invalid field
    """

    success = False

    def __init__(
        self,
        kind: ErrorKind,
        message: str | None = None,
        errors: list[str] | None = None,
    ):
        self.kind = kind
        self.message = message or kind.default_message
        self.errors = list(errors or [])
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    def to_dict(self) -> dict[str, Any]:
        """Convert the error to the API response body."""
        return {
            "success": self.success,
            "code": self.kind.name,
            "message": self.message,
            "errors": self.errors,
        }


# =============================================================================
# Exception Handlers
# =============================================================================

async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Render an ApiError as its JSON body with the matching status code."""
    if exc.kind is ErrorKind.INTERNAL_SERVER_ERROR:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Handle request validation errors.

    Each pydantic error becomes one "<location>: <message>" detail string
    on a BAD_REQUEST ApiError.
    """
    details = [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]
    return await api_error_handler(
        request, ApiError(ErrorKind.BAD_REQUEST, "Validation error", details)
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected exceptions and hide their details from the client."""
    logger.exception(f"Unexpected error: {exc}")
    error = ApiError(ErrorKind.INTERNAL_SERVER_ERROR, "Something went wrong")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())
