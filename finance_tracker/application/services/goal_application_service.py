from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable
from uuid import UUID

from finance_tracker.services.goal_service import GoalService, GoalServiceError


@dataclass(frozen=True)
class GoalApplicationError(Exception):
    message: str
    code: str
    status_code: int
    details: dict[str, Any] | None = None


class GoalApplicationService:
    def __init__(
        self,
        *,
        user_id: UUID,
        goal_service_factory: Callable[[UUID], GoalService],
    ) -> None:
        self._user_id = user_id
        self._goal_service = goal_service_factory(user_id)

    @classmethod
    def with_defaults(cls, user_id: UUID) -> GoalApplicationService:
        return cls(user_id=user_id, goal_service_factory=GoalService)

    def create_goal(self, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            goal = self._goal_service.create_goal(payload)
        except GoalServiceError as exc:
            raise _to_goal_application_error(exc) from exc
        return self._goal_service.serialize(goal)

    def list_goals(
        self,
        *,
        page: int,
        per_page: int,
        status: str | None,
        category: str | None = None,
    ) -> dict[str, Any]:
        try:
            goals, pagination = self._goal_service.list_goals(
                page=page,
                per_page=per_page,
                status=status,
                category=category,
            )
        except GoalServiceError as exc:
            raise _to_goal_application_error(exc) from exc
        return {
            "items": [self._goal_service.serialize(goal) for goal in goals],
            "pagination": pagination,
        }

    def get_goal(self, goal_id: UUID) -> dict[str, Any]:
        try:
            goal = self._goal_service.get_goal(goal_id)
        except GoalServiceError as exc:
            raise _to_goal_application_error(exc) from exc
        return self._goal_service.serialize(goal)

    def update_goal(self, goal_id: UUID, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            goal = self._goal_service.update_goal(goal_id, payload)
        except GoalServiceError as exc:
            raise _to_goal_application_error(exc) from exc
        return self._goal_service.serialize(goal)

    def delete_goal(self, goal_id: UUID) -> None:
        try:
            self._goal_service.delete_goal(goal_id)
        except GoalServiceError as exc:
            raise _to_goal_application_error(exc) from exc

    def add_contribution(
        self, goal_id: UUID, payload: dict[str, Any]
    ) -> dict[str, Any]:
        try:
            goal = self._goal_service.add_contribution(goal_id, payload)
        except GoalServiceError as exc:
            raise _to_goal_application_error(exc) from exc
        return self._goal_service.serialize(goal)

    def update_status(self, goal_id: UUID, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            goal = self._goal_service.update_status(goal_id, payload)
        except GoalServiceError as exc:
            raise _to_goal_application_error(exc) from exc
        return self._goal_service.serialize(goal)


def _to_goal_application_error(exc: GoalServiceError) -> GoalApplicationError:
    return GoalApplicationError(
        message=exc.message,
        code=exc.code,
        status_code=exc.status_code,
        details=exc.details,
    )
