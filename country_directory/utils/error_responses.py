"""Builders for the structured error payloads returned by the API.

Exception handlers and routers both go through these helpers so that every
error body carries the request ID and a timezone-aware timestamp.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime

from fastapi.responses import JSONResponse

from country_directory.schemas.error import (
    ErrorResponse,
    ErrorType,
    ValidationErrorDetail,
    ValidationErrorResponse,
)
from country_directory.utils.request_context import get_request_id

__all__ = [
    "build_error_response",
    "build_validation_error_response",
    "error_json_response",
]


def _current_timestamp() -> datetime:
    """Return the timestamp embedded in error payloads (patched in tests)."""

    return datetime.now(UTC)


def build_validation_error_response(
    *,
    errors: Sequence[ValidationErrorDetail],
    message: str,
    detail: str,
    status_code: int,
    path: str,
    error_type: ErrorType = ErrorType.VALIDATION_ERROR,
    request_id: str | None = None,
) -> ValidationErrorResponse:
    """Construct a ``ValidationErrorResponse`` enriched with metadata."""

    resolved_request_id = request_id or get_request_id()
    return ValidationErrorResponse(
        error_type=error_type,
        message=message,
        detail=detail,
        status_code=status_code,
        timestamp=_current_timestamp(),
        request_id=resolved_request_id,
        path=path,
        errors=list(errors),
    )


def build_error_response(
    *,
    error_type: ErrorType,
    message: str,
    detail: str,
    status_code: int,
    path: str,
    retry_after: int | None = None,
    request_id: str | None = None,
) -> ErrorResponse:
    """Construct a generic ``ErrorResponse`` enriched with metadata."""

    resolved_request_id = request_id or get_request_id()
    return ErrorResponse(
        error_type=error_type,
        message=message,
        detail=detail,
        status_code=status_code,
        timestamp=_current_timestamp(),
        request_id=resolved_request_id,
        path=path,
        retry_after=retry_after,
    )


def error_json_response(response: ErrorResponse) -> JSONResponse:
    """Render ``response`` with its own status code."""

    headers: dict[str, str] = {}
    if response.retry_after is not None:
        headers["Retry-After"] = str(response.retry_after)
    return JSONResponse(
        status_code=response.status_code,
        content=response.model_dump(mode="json"),
        headers=headers or None,
    )
