from __future__ import annotations

from typing import Any
from uuid import uuid4

import pytest

from finance_tracker.application.services.achievement_application_service import (
    AchievementApplicationError,
    AchievementApplicationService,
)
from finance_tracker.application.services.goal_application_service import (
    GoalApplicationError,
    GoalApplicationService,
)
from finance_tracker.services.achievement_service import (
    AchievementEvaluation,
    AchievementServiceError,
)
from finance_tracker.services.goal_service import GoalServiceError


class _FakeGoal:
    status = "active"


class _FakeGoalService:
    def __init__(self, user_id):
        self.user_id = user_id
        self.goal = _FakeGoal()

    def create_goal(self, payload: dict[str, Any]) -> _FakeGoal:
        if not payload.get("title"):
            raise GoalServiceError(
                message="Invalid goal data.",
                code="VALIDATION_ERROR",
                status_code=400,
            )
        return self.goal

    def list_goals(self, *, page, per_page, status, category):
        if status == "invalid":
            raise GoalServiceError(
                message="Invalid goal status.",
                code="VALIDATION_ERROR",
                status_code=400,
            )
        return [self.goal], {"total": 1, "page": page, "per_page": per_page, "pages": 1}

    def add_contribution(self, goal_id, payload):
        if payload.get("amount") == "-5":
            raise GoalServiceError(
                message="Valid contribution amount is required.",
                code="VALIDATION_ERROR",
                status_code=400,
            )
        self.goal.status = "completed"
        return self.goal

    def update_status(self, goal_id, payload):
        raise GoalServiceError(
            message="Goal not found.",
            code="NOT_FOUND",
            status_code=404,
        )

    def serialize(self, goal):
        return {"id": "goal-1", "title": "Fund", "status": goal.status}


def _goal_service() -> GoalApplicationService:
    return GoalApplicationService(
        user_id=uuid4(),
        goal_service_factory=_FakeGoalService,
    )


def test_create_goal_serializes_result() -> None:
    assert _goal_service().create_goal({"title": "Fund"})["title"] == "Fund"


def test_goal_service_errors_are_mapped() -> None:
    with pytest.raises(GoalApplicationError) as exc_info:
        _goal_service().create_goal({})
    assert exc_info.value.code == "VALIDATION_ERROR"
    assert exc_info.value.status_code == 400


def test_list_goals_returns_items_and_pagination() -> None:
    result = _goal_service().list_goals(page=2, per_page=5, status=None)
    assert result["items"] == [{"id": "goal-1", "title": "Fund", "status": "active"}]
    assert result["pagination"]["page"] == 2


def test_add_contribution_returns_serialized_goal() -> None:
    result = _goal_service().add_contribution(uuid4(), {"amount": "10"})
    assert result["status"] == "completed"


def test_add_contribution_maps_invalid_amount() -> None:
    with pytest.raises(GoalApplicationError) as exc_info:
        _goal_service().add_contribution(uuid4(), {"amount": "-5"})
    assert exc_info.value.message == "Valid contribution amount is required."


def test_update_status_maps_not_found() -> None:
    with pytest.raises(GoalApplicationError) as exc_info:
        _goal_service().update_status(uuid4(), {"status": "paused"})
    assert exc_info.value.status_code == 404


class _FakeRecord:
    achievement_id = 8
    name = "Goal Completionist"
    description = "Successfully complete 5 financial goals"
    category = "goals"
    icon = "⭐"
    points = 600
    earned_at = None


class _FakeAchievementService:
    def __init__(self, evaluation=None, error=None):
        self._evaluation = evaluation
        self._error = error
        self.requested_limits: list[int] = []

    def evaluate(self, user_id):
        if self._error:
            raise self._error
        return self._evaluation

    def leaderboard(self, limit):
        self.requested_limits.append(limit)
        return {"leaderboard": [], "total_users": 0}


def _achievement_service(fake, max_limit=100) -> AchievementApplicationService:
    return AchievementApplicationService(
        user_id=uuid4(),
        achievement_service_factory=lambda: fake,
        leaderboard_max_limit=max_limit,
    )


def test_check_achievements_builds_response() -> None:
    fake = _FakeAchievementService(
        AchievementEvaluation(
            newly_unlocked=[_FakeRecord()], total_achievements=3, total_points=900
        )
    )

    result = _achievement_service(fake).check_achievements()

    assert result["new_achievements"][0]["achievement_id"] == 8
    assert result["new_achievements"][0]["earned_at"] is None
    assert result["total_achievements"] == 3
    assert result["total_points"] == 900
    assert result["message"] == "Congratulations! You unlocked 1 new achievement!"


def test_check_achievements_maps_errors() -> None:
    fake = _FakeAchievementService(
        error=AchievementServiceError(
            message="Achievement storage is temporarily unavailable.",
            code="DEPENDENCY_FAILURE",
            status_code=503,
        )
    )
    with pytest.raises(AchievementApplicationError) as exc_info:
        _achievement_service(fake).check_achievements()
    assert exc_info.value.status_code == 503


@pytest.mark.parametrize("limit", [0, 51])
def test_leaderboard_limit_is_bounded(limit) -> None:
    fake = _FakeAchievementService()
    with pytest.raises(AchievementApplicationError) as exc_info:
        _achievement_service(fake, max_limit=50).leaderboard(limit)
    assert exc_info.value.code == "VALIDATION_ERROR"
    assert fake.requested_limits == []


def test_leaderboard_passes_valid_limit() -> None:
    fake = _FakeAchievementService()
    _achievement_service(fake, max_limit=50).leaderboard(50)
    assert fake.requested_limits == [50]
