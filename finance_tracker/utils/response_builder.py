from typing import Any, Dict, Optional

from flask import Response, current_app, has_app_context, jsonify

SENSITIVE_DATA_FIELDS = {
    "password",
    "current_jti",
    "secret_key",
    "jwt_secret_key",
}


def _expose_internal_details() -> bool:
    if not has_app_context():
        return False
    return bool(current_app.config.get("DEBUG") or current_app.config.get("TESTING"))


def _strip_sensitive(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            key: _strip_sensitive(item)
            for key, item in value.items()
            if str(key).strip().lower() not in SENSITIVE_DATA_FIELDS
        }
    if isinstance(value, list):
        return [_strip_sensitive(item) for item in value]
    return value


def success_payload(
    message: str,
    data: Any = None,
    meta: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "success": True,
        "message": message,
        "data": _strip_sensitive(data),
    }
    if meta is not None:
        payload["meta"] = _strip_sensitive(meta)
    return payload


def error_payload(
    message: str,
    code: str,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    if code == "INTERNAL_ERROR" and not _expose_internal_details():
        details = {}
    return {
        "success": False,
        "message": message,
        "error": {
            "code": code,
            "details": _strip_sensitive(details or {}),
        },
    }


def json_response(payload: Dict[str, Any], status_code: int) -> Response:
    response = jsonify(payload)
    response.status_code = status_code
    return response
