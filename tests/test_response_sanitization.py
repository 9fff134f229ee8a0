from __future__ import annotations

from typing import Any

from finance_tracker.utils.response_builder import error_payload, success_payload


def test_success_payload_removes_sensitive_fields() -> None:
    payload = success_payload(
        message="ok",
        data={
            "user": {
                "email": "test@email.com",
                "password": "secret",
                "nested": {"current_jti": "jti"},
            },
            "items": [{"secret_key": "s"}, {"value": 10}],
        },
        meta={"pagination": {"page": 1}},
    )

    assert payload["success"] is True
    assert payload["data"]["user"]["email"] == "test@email.com"
    assert "password" not in payload["data"]["user"]
    assert "current_jti" not in payload["data"]["user"]["nested"]
    assert "secret_key" not in payload["data"]["items"][0]
    assert payload["meta"] == {"pagination": {"page": 1}}


def test_error_payload_hides_internal_details_outside_debug(app: Any) -> None:
    app.config["DEBUG"] = False
    app.config["TESTING"] = False
    with app.app_context():
        payload = error_payload(
            message="An unexpected error occurred.",
            code="INTERNAL_ERROR",
            details={"error": "db password leaked"},
        )
    assert payload == {
        "success": False,
        "message": "An unexpected error occurred.",
        "error": {"code": "INTERNAL_ERROR", "details": {}},
    }


def test_error_payload_keeps_domain_details() -> None:
    payload = error_payload(
        message="Cannot contribute to inactive goal.",
        code="INVALID_STATE",
        details={"status": "paused"},
    )
    assert payload["error"] == {"code": "INVALID_STATE", "details": {"status": "paused"}}


def test_unhandled_exception_returns_generic_500(app: Any) -> None:
    app.config["TESTING"] = False
    app.config["PROPAGATE_EXCEPTIONS"] = False

    @app.get("/explode")
    def explode() -> None:
        raise RuntimeError("secret internals")

    response = app.test_client().get("/explode")

    assert response.status_code == 500
    body = response.get_json()
    assert body["error"]["code"] == "INTERNAL_ERROR"
    assert body["error"]["details"] == {}
