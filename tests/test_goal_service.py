from __future__ import annotations

import threading
from datetime import timedelta
from decimal import Decimal
from typing import Any
from uuid import uuid4

import pytest

from finance_tracker.extensions.database import db
from finance_tracker.services.goal_service import GoalService, GoalServiceError
from finance_tracker.services.ledger_store import LedgerStoreError
from finance_tracker.utils.datetime_utils import utc_today


def _goal_payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "title": "Emergency fund",
        "description": "Six months of fixed costs",
        "category": "emergency",
        "target_amount": "1000.00",
        "target_date": (utc_today() + timedelta(days=120)).isoformat(),
    }
    payload.update(overrides)
    return payload


def test_contributions_complete_goal_when_target_is_reached(user) -> None:
    service = GoalService(user.id)
    goal = service.create_goal(_goal_payload())
    assert goal.status == "active"
    assert goal.current_amount == Decimal("0")

    goal = service.add_contribution(goal.id, {"amount": "800"})
    data = service.serialize(goal)
    assert goal.status == "active"
    assert goal.current_amount == Decimal("800")
    assert data["progress_percentage"] == 80.0
    assert data["remaining_amount"] == "200.00"

    goal = service.add_contribution(goal.id, {"amount": "200"})
    data = service.serialize(goal)
    assert goal.status == "completed"
    assert goal.completed_at is not None
    assert goal.current_amount == Decimal("1000")
    assert data["progress_percentage"] == 100.0
    assert data["remaining_amount"] == "0.00"


def test_current_amount_matches_sum_of_contributions(user) -> None:
    service = GoalService(user.id)
    goal = service.create_goal(_goal_payload(target_amount="5000.00"))
    for amount in ("10.50", "99.50", "250"):
        goal = service.add_contribution(goal.id, {"amount": amount})

    total = sum((item.amount for item in goal.contributions), Decimal("0"))
    assert goal.current_amount == total == Decimal("360")
    assert [item.position for item in goal.contributions] == [0, 1, 2]


def test_concurrent_contributions_do_not_lose_updates(app, user) -> None:
    workers = 8
    user_id = user.id
    goal = GoalService(user_id).create_goal(_goal_payload(target_amount="5000.00"))
    goal_id = goal.id
    db.session.commit()

    barrier = threading.Barrier(workers)
    errors: list[Exception] = []

    def contribute() -> None:
        with app.app_context():
            barrier.wait()
            try:
                GoalService(user_id).add_contribution(goal_id, {"amount": "100"})
            except Exception as exc:
                errors.append(exc)

    threads = [threading.Thread(target=contribute) for _ in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    db.session.expire_all()
    goal = GoalService(user_id).get_goal(goal_id)
    total = sum((item.amount for item in goal.contributions), Decimal("0"))
    assert goal.current_amount == total == Decimal("800")
    assert sorted(item.position for item in goal.contributions) == list(range(workers))


def test_seed_amount_is_recorded_as_initial_contribution(user) -> None:
    service = GoalService(user.id)
    goal = service.create_goal(_goal_payload(current_amount="250.00"))

    assert goal.current_amount == Decimal("250")
    assert len(goal.contributions) == 1
    seed = goal.contributions[0]
    assert seed.amount == Decimal("250")
    assert seed.source == "manual"
    assert seed.note == "Initial balance"


def test_seed_reaching_target_completes_goal_on_creation(user) -> None:
    service = GoalService(user.id)
    goal = service.create_goal(_goal_payload(current_amount="1000.00"))

    assert goal.status == "completed"
    assert goal.completed_at is not None


def test_milestones_are_stamped_once_and_never_revert(user) -> None:
    service = GoalService(user.id)
    goal = service.create_goal(
        _goal_payload(
            milestones=[
                {"amount": "500", "description": "Halfway"},
                {"amount": "250", "description": "First quarter"},
            ]
        )
    )
    assert [m.is_achieved for m in goal.milestones] == [False, False]

    goal = service.add_contribution(goal.id, {"amount": "300"})
    first_quarter, halfway = goal.milestones
    assert first_quarter.amount == Decimal("250")
    assert first_quarter.is_achieved is True
    assert halfway.is_achieved is False
    first_stamp = first_quarter.achieved_at

    goal = service.add_contribution(goal.id, {"amount": "300"})
    first_quarter, halfway = goal.milestones
    assert halfway.is_achieved is True
    assert first_quarter.achieved_at == first_stamp


@pytest.mark.parametrize("amount", ["-5", "0", "abc", None])
def test_invalid_contribution_amount_leaves_goal_unchanged(user, amount) -> None:
    service = GoalService(user.id)
    goal = service.create_goal(_goal_payload())

    with pytest.raises(GoalServiceError) as exc_info:
        service.add_contribution(goal.id, {"amount": amount})

    assert exc_info.value.code == "VALIDATION_ERROR"
    assert exc_info.value.status_code == 400
    reloaded = service.get_goal(goal.id)
    assert reloaded.current_amount == Decimal("0")
    assert reloaded.contributions == []


def test_contribution_to_inactive_goal_is_rejected(user) -> None:
    service = GoalService(user.id)
    goal = service.create_goal(_goal_payload())
    service.update_status(goal.id, {"status": "paused"})

    with pytest.raises(GoalServiceError) as exc_info:
        service.add_contribution(goal.id, {"amount": "10"})

    assert exc_info.value.code == "INVALID_STATE"
    assert exc_info.value.details == {"status": "paused"}
    assert service.get_goal(goal.id).current_amount == Decimal("0")


def test_foreign_goal_is_reported_as_not_found(make_user) -> None:
    owner = make_user("owner")
    stranger = make_user("stranger")
    goal = GoalService(owner.id).create_goal(_goal_payload())

    with pytest.raises(GoalServiceError) as exc_info:
        GoalService(stranger.id).add_contribution(goal.id, {"amount": "10"})
    assert exc_info.value.code == "NOT_FOUND"
    assert exc_info.value.status_code == 404

    with pytest.raises(GoalServiceError):
        GoalService(stranger.id).get_goal(goal.id)


def test_missing_goal_is_not_found(user) -> None:
    with pytest.raises(GoalServiceError) as exc_info:
        GoalService(user.id).add_contribution(uuid4(), {"amount": "10"})
    assert exc_info.value.code == "NOT_FOUND"


def test_update_status_allows_any_transition(user) -> None:
    service = GoalService(user.id)
    goal = service.create_goal(_goal_payload())

    goal = service.update_status(goal.id, {"status": "completed"})
    assert goal.status == "completed"
    assert goal.completed_at is not None

    goal = service.update_status(goal.id, {"status": "cancelled"})
    assert goal.completed_at is None

    goal = service.update_status(goal.id, {"status": "ACTIVE"})
    assert goal.status == "active"


def test_update_status_rejects_unknown_status(user) -> None:
    service = GoalService(user.id)
    goal = service.create_goal(_goal_payload())

    with pytest.raises(GoalServiceError) as exc_info:
        service.update_status(goal.id, {"status": "archived"})
    assert exc_info.value.code == "VALIDATION_ERROR"


def test_update_goal_cannot_touch_engine_owned_fields(user) -> None:
    service = GoalService(user.id)
    goal = service.create_goal(_goal_payload())

    with pytest.raises(GoalServiceError) as exc_info:
        service.update_goal(goal.id, {"current_amount": "999"})
    assert exc_info.value.code == "VALIDATION_ERROR"

    updated = service.update_goal(goal.id, {"title": "  Rainy day  ", "priority": "HIGH"})
    assert updated.title == "Rainy day"
    assert updated.priority == "high"


def test_lowering_target_does_not_auto_complete(user) -> None:
    service = GoalService(user.id)
    goal = service.create_goal(_goal_payload())
    service.add_contribution(goal.id, {"amount": "400"})

    goal = service.update_goal(goal.id, {"target_amount": "300"})
    assert goal.status == "active"


def test_create_goal_rejects_past_target_date(user) -> None:
    with pytest.raises(GoalServiceError) as exc_info:
        GoalService(user.id).create_goal(
            _goal_payload(target_date=utc_today().isoformat())
        )
    assert exc_info.value.code == "VALIDATION_ERROR"
    assert "target_date" in exc_info.value.details["messages"]


def test_list_goals_filters_and_paginates(user) -> None:
    service = GoalService(user.id)
    service.create_goal(_goal_payload(title="Trip", category="vacation"))
    service.create_goal(_goal_payload(title="Fund"))
    service.create_goal(_goal_payload(title="Laptop", category="purchase"))

    goals, pagination = service.list_goals(page=1, per_page=2)
    assert len(goals) == 2
    assert pagination["total"] == 3
    assert pagination["pages"] == 2

    goals, _ = service.list_goals(page=1, per_page=10, category="Vacation")
    assert [goal.title for goal in goals] == ["Trip"]

    with pytest.raises(GoalServiceError):
        service.list_goals(page=1, per_page=10, status="done")


def test_delete_goal_removes_it(user) -> None:
    service = GoalService(user.id)
    goal = service.create_goal(_goal_payload(current_amount="10"))
    service.delete_goal(goal.id)

    with pytest.raises(GoalServiceError):
        service.get_goal(goal.id)


class _BrokenLedger:
    def find_goal(self, goal_id, user_id):
        raise LedgerStoreError("find_goal")


def test_storage_failure_maps_to_dependency_failure(app_context) -> None:
    service = GoalService(uuid4(), _BrokenLedger())

    with pytest.raises(GoalServiceError) as exc_info:
        service.get_goal(uuid4())

    assert exc_info.value.code == "DEPENDENCY_FAILURE"
    assert exc_info.value.status_code == 503
    assert exc_info.value.details == {"operation": "find_goal"}
