from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable
from uuid import UUID

from finance_tracker.services.achievement_service import (
    AchievementService,
    AchievementServiceError,
    serialize_record,
    unlock_message,
)


@dataclass(frozen=True)
class AchievementApplicationError(Exception):
    message: str
    code: str
    status_code: int
    details: dict[str, Any] | None = None


class AchievementApplicationService:
    def __init__(
        self,
        *,
        user_id: UUID,
        achievement_service_factory: Callable[[], AchievementService],
        leaderboard_max_limit: int = 100,
    ) -> None:
        self._user_id = user_id
        self._achievement_service = achievement_service_factory()
        self._leaderboard_max_limit = leaderboard_max_limit

    @classmethod
    def with_defaults(
        cls, user_id: UUID, *, leaderboard_max_limit: int = 100
    ) -> AchievementApplicationService:
        return cls(
            user_id=user_id,
            achievement_service_factory=AchievementService,
            leaderboard_max_limit=leaderboard_max_limit,
        )

    def check_achievements(self) -> dict[str, Any]:
        try:
            evaluation = self._achievement_service.evaluate(self._user_id)
        except AchievementServiceError as exc:
            raise _to_achievement_application_error(exc) from exc
        return {
            "new_achievements": [
                serialize_record(record) for record in evaluation.newly_unlocked
            ],
            "total_achievements": evaluation.total_achievements,
            "total_points": evaluation.total_points,
            "message": unlock_message(len(evaluation.newly_unlocked)),
        }

    def list_achievements(self) -> dict[str, Any]:
        try:
            return self._achievement_service.list_achievements(self._user_id)
        except AchievementServiceError as exc:
            raise _to_achievement_application_error(exc) from exc

    def leaderboard(self, limit: int) -> dict[str, Any]:
        if limit < 1 or limit > self._leaderboard_max_limit:
            raise AchievementApplicationError(
                message=(
                    f"limit must be between 1 and {self._leaderboard_max_limit}."
                ),
                code="VALIDATION_ERROR",
                status_code=400,
                details={"limit": limit},
            )
        try:
            return self._achievement_service.leaderboard(limit)
        except AchievementServiceError as exc:
            raise _to_achievement_application_error(exc) from exc


def _to_achievement_application_error(
    exc: AchievementServiceError,
) -> AchievementApplicationError:
    return AchievementApplicationError(
        message=exc.message,
        code=exc.code,
        status_code=exc.status_code,
        details=exc.details,
    )
