from typing import Any, Dict
from uuid import UUID

from flask import Response
from flask_jwt_extended import JWTManager

from finance_tracker.controllers.response_contract import error_response
from finance_tracker.extensions.database import db
from finance_tracker.models.user import User


def _unauthorized(message: str) -> Response:
    return error_response(status_code=401, message=message, error_code="UNAUTHORIZED")


def register_jwt_callbacks(jwt: JWTManager) -> None:
    @jwt.token_in_blocklist_loader  # type: ignore[misc]
    def check_if_token_revoked(
        jwt_header: Dict[str, Any], jwt_payload: Dict[str, Any]
    ) -> bool:
        # Only the most recently issued token of a user is valid.
        user_id = jwt_payload.get("sub")
        jti = jwt_payload.get("jti")
        if not user_id or not jti:
            return True
        try:
            parsed_id = UUID(user_id)
        except ValueError:
            return True
        user = db.session.get(User, parsed_id)
        return not user or user.current_jti != jti

    @jwt.revoked_token_loader  # type: ignore[misc]
    def revoked_token_callback(
        jwt_header: Dict[str, Any], jwt_payload: Dict[str, Any]
    ) -> Response:
        return _unauthorized("Token has been revoked")

    @jwt.invalid_token_loader  # type: ignore[misc]
    def invalid_token_callback(error: str) -> Response:
        return _unauthorized("Invalid token")

    @jwt.expired_token_loader  # type: ignore[misc]
    def expired_token_callback(
        jwt_header: Dict[str, Any], jwt_payload: Dict[str, Any]
    ) -> Response:
        return _unauthorized("Token has expired")

    @jwt.unauthorized_loader  # type: ignore[misc]
    def missing_token_callback(error: str) -> Response:
        return _unauthorized("Missing authorization token")
