from __future__ import annotations

import uuid
from typing import Any, Dict

from finance_tracker.extensions.database import db
from finance_tracker.models.user import User


def _register_and_login(client, *, prefix: str) -> tuple[str, str]:
    suffix = uuid.uuid4().hex[:8]
    email = f"{prefix}-{suffix}@email.com"
    password = "StrongPass@123"
    assert (
        client.post(
            "/auth/register",
            json={"name": f"user-{suffix}", "email": email, "password": password},
        ).status_code
        == 201
    )
    login = client.post("/auth/login", json={"email": email, "password": password})
    data = login.get_json()["data"]
    return data["token"], data["user"]["id"]


def _auth_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def _entry(**overrides: Any) -> Dict[str, Any]:
    payload = {
        "entry_type": "expense",
        "amount": "150.50",
        "category": "Groceries",
        "description": "Weekly shopping",
        "entry_date": "2026-01-15",
    }
    payload.update(overrides)
    return payload


def test_ledger_entries_update_user_aggregate(app, client) -> None:
    token, user_id = _register_and_login(client, prefix="ledger")

    income = client.post(
        "/ledger/entries",
        json=_entry(entry_type="income", amount="1000.00", category="salary"),
        headers=_auth_headers(token),
    )
    assert income.status_code == 201
    expense = client.post("/ledger/entries", json=_entry(), headers=_auth_headers(token))
    assert expense.status_code == 201
    entry = expense.get_json()["data"]["entry"]
    assert entry["entry_type"] == "expense"
    assert entry["category"] == "groceries"
    assert entry["amount"] == "150.50"

    with app.app_context():
        user = db.session.get(User, uuid.UUID(user_id))
        assert str(user.current_balance) == "849.50"
        assert str(user.savings_rate) == "84.95"

    delete = client.delete(
        f"/ledger/entries/{entry['id']}", headers=_auth_headers(token)
    )
    assert delete.status_code == 200

    with app.app_context():
        user = db.session.get(User, uuid.UUID(user_id))
        assert str(user.current_balance) == "1000.00"


def test_ledger_entries_listing_filters(client) -> None:
    token, _ = _register_and_login(client, prefix="ledger-list")
    client.post("/ledger/entries", json=_entry(), headers=_auth_headers(token))
    client.post(
        "/ledger/entries",
        json=_entry(entry_type="income", category="freelance", entry_date="2026-02-01"),
        headers=_auth_headers(token),
    )

    everything = client.get("/ledger/entries", headers=_auth_headers(token)).get_json()
    assert everything["meta"]["pagination"]["total"] == 2
    assert everything["data"]["items"][0]["entry_date"] == "2026-02-01"

    expenses = client.get(
        "/ledger/entries?entry_type=expense", headers=_auth_headers(token)
    ).get_json()
    assert [item["entry_type"] for item in expenses["data"]["items"]] == ["expense"]

    february = client.get(
        "/ledger/entries?start_date=2026-02-01&end_date=2026-02-28",
        headers=_auth_headers(token),
    ).get_json()
    assert len(february["data"]["items"]) == 1

    invalid = client.get(
        "/ledger/entries?entry_type=transfer", headers=_auth_headers(token)
    )
    assert invalid.status_code == 400


def test_ledger_entry_validation(client) -> None:
    token, _ = _register_and_login(client, prefix="ledger-invalid")

    response = client.post(
        "/ledger/entries",
        json=_entry(entry_type="income", category="lottery", amount="-1"),
        headers=_auth_headers(token),
    )

    assert response.status_code == 400
    messages = response.get_json()["error"]["details"]["messages"]
    assert "amount" in messages


def test_foreign_ledger_entry_cannot_be_deleted(client) -> None:
    owner, _ = _register_and_login(client, prefix="ledger-owner")
    other, _ = _register_and_login(client, prefix="ledger-other")
    entry = client.post(
        "/ledger/entries", json=_entry(), headers=_auth_headers(owner)
    ).get_json()["data"]["entry"]

    response = client.delete(
        f"/ledger/entries/{entry['id']}", headers=_auth_headers(other)
    )

    assert response.status_code == 404
    assert response.get_json()["error"]["code"] == "NOT_FOUND"
