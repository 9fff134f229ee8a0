def test_healthz_is_public(client) -> None:
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok"}


def test_openapi_document_lists_resources(client) -> None:
    resp = client.get("/docs/swagger/")
    assert resp.status_code == 200
    paths = resp.get_json()["paths"]
    for path in (
        "/goals",
        "/goals/{goal_id}/contribute",
        "/goals/{goal_id}/status",
        "/achievements/check",
        "/achievements/leaderboard",
        "/ledger/entries",
        "/auth/login",
    ):
        assert path in paths


def test_unknown_route_uses_error_envelope(client) -> None:
    resp = client.get("/nope")
    assert resp.status_code == 404
    body = resp.get_json()
    assert body["success"] is False
    assert body["error"]["code"] == "NOT_FOUND"
