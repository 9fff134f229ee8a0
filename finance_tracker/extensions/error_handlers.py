from flask import Flask, Response
from werkzeug.exceptions import HTTPException

from finance_tracker.controllers.response_contract import error_response

HTTP_ERROR_CODES = {
    400: "VALIDATION_ERROR",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    422: "VALIDATION_ERROR",
}


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(HTTPException)  # type: ignore[misc]
    def handle_http_exception(e: HTTPException) -> Response:
        # webargs aborts with the validation messages attached under `data`.
        data = getattr(e, "data", None) or {}
        messages = data.get("messages")
        status_code = e.code or 500
        message = e.description or e.name
        if messages is not None:
            status_code = 400
            message = "Invalid request parameters."
        return error_response(
            status_code=status_code,
            message=message,
            error_code=HTTP_ERROR_CODES.get(status_code, "HTTP_ERROR"),
            details={"messages": messages} if messages is not None else None,
        )

    @app.errorhandler(Exception)  # type: ignore[misc]
    def handle_generic_exception(e: Exception) -> Response:
        app.logger.exception("unhandled_exception error=%s", type(e).__name__)
        return error_response(
            status_code=500,
            message="An unexpected error occurred.",
            error_code="INTERNAL_ERROR",
            details={"error": str(e)},
        )
