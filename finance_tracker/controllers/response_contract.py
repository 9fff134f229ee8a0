from __future__ import annotations

from typing import Any, Protocol

from flask import Response

from finance_tracker.utils.response_builder import (
    error_payload,
    json_response,
    success_payload,
)


class PublicError(Protocol):
    message: str
    code: str
    status_code: int
    details: dict[str, Any] | None


def success_response(
    *,
    status_code: int,
    message: str,
    data: dict[str, Any],
    meta: dict[str, Any] | None = None,
) -> Response:
    return json_response(
        success_payload(message=message, data=data, meta=meta),
        status_code=status_code,
    )


def error_response(
    *,
    status_code: int,
    message: str,
    error_code: str,
    details: dict[str, Any] | None = None,
) -> Response:
    return json_response(
        error_payload(message=message, code=error_code, details=details),
        status_code=status_code,
    )


def application_error_response(exc: PublicError) -> Response:
    return error_response(
        status_code=exc.status_code,
        message=exc.message,
        error_code=exc.code,
        details=exc.details,
    )


__all__ = [
    "PublicError",
    "success_response",
    "error_response",
    "application_error_response",
]
