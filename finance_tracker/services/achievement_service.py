from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Mapping
from uuid import UUID

from flask import current_app

from finance_tracker.models.user_achievement import UserAchievement
from finance_tracker.services.achievement_catalog import (
    ACHIEVEMENT_CATALOG,
    AchievementDefinition,
    iter_definitions,
    serialize_definition,
)
from finance_tracker.services.achievement_criteria import (
    ACHIEVEMENT_CRITERIA,
    Criterion,
    CriterionContext,
)
from finance_tracker.services.ledger_store import LedgerStore, LedgerStoreError
from finance_tracker.utils.datetime_utils import utc_now_naive

DEFAULT_LEADERBOARD_LIMIT = 10


@dataclass
class AchievementServiceError(Exception):
    message: str
    code: str
    status_code: int
    details: dict[str, Any] | None = None


@dataclass(frozen=True)
class AchievementEvaluation:
    newly_unlocked: list[UserAchievement] = field(default_factory=list)
    total_achievements: int = 0
    total_points: int = 0


def serialize_record(record: UserAchievement) -> dict[str, Any]:
    return {
        "achievement_id": record.achievement_id,
        "name": record.name,
        "description": record.description,
        "category": record.category,
        "icon": record.icon,
        "points": record.points,
        "earned_at": record.earned_at.isoformat() if record.earned_at else None,
    }


def unlock_message(count: int) -> str:
    if count == 0:
        return "No new achievements unlocked"
    plural = "s" if count > 1 else ""
    return f"Congratulations! You unlocked {count} new achievement{plural}!"


class AchievementService:
    def __init__(
        self,
        ledger: LedgerStore | None = None,
        *,
        criteria: Mapping[int, Criterion] = ACHIEVEMENT_CRITERIA,
        catalog: Mapping[int, AchievementDefinition] = ACHIEVEMENT_CATALOG,
        clock: Callable[[], datetime] = utc_now_naive,
    ) -> None:
        self._ledger = ledger or LedgerStore()
        self._criteria = criteria
        self._catalog = catalog
        self._clock = clock

    def evaluate(self, user_id: UUID, now: datetime | None = None) -> AchievementEvaluation:
        """Grant every catalog achievement the user newly qualifies for.

        Only ids the user does not hold are checked, so repeated calls never
        duplicate or revoke a record.
        """
        now = now or self._clock()
        try:
            user = self._ledger.get_user(user_id)
            if user is None:
                raise AchievementServiceError(
                    message="User not found.",
                    code="NOT_FOUND",
                    status_code=404,
                )
            held = self._ledger.list_achievements(user_id)
        except LedgerStoreError as exc:
            raise _dependency_failure(exc) from exc

        held_ids = {record.achievement_id for record in held}
        context = CriterionContext(user_id=user_id, ledger=self._ledger, now=now)
        staged: list[UserAchievement] = []
        for achievement_id, definition in sorted(self._catalog.items()):
            if achievement_id in held_ids:
                continue
            if self._is_met(achievement_id, context):
                staged.append(_build_record(user_id, definition, now))

        try:
            unlocked = self._ledger.append_achievements(user_id, staged)
            if len(unlocked) < len(staged):
                # Another evaluation stored some of these ids first.
                all_records = self._ledger.list_achievements(user_id)
            else:
                all_records = held + unlocked
        except LedgerStoreError as exc:
            raise _dependency_failure(exc) from exc

        if unlocked:
            current_app.logger.info(
                "achievement_unlocked user_id=%s ids=%s",
                user_id,
                [record.achievement_id for record in unlocked],
            )
        return AchievementEvaluation(
            newly_unlocked=unlocked,
            total_achievements=len(all_records),
            total_points=sum(record.points or 0 for record in all_records),
        )

    def list_achievements(self, user_id: UUID) -> dict[str, Any]:
        try:
            held = {
                record.achievement_id: record
                for record in self._ledger.list_achievements(user_id)
            }
        except LedgerStoreError as exc:
            raise _dependency_failure(exc) from exc

        achievements = []
        for definition in iter_definitions():
            record = held.get(definition.id)
            achievements.append(
                {
                    **serialize_definition(definition),
                    "unlocked": record is not None,
                    "earned_at": (
                        record.earned_at.isoformat()
                        if record is not None and record.earned_at
                        else None
                    ),
                    "progress": 100 if record is not None else 0,
                }
            )

        total = len(self._catalog)
        return {
            "achievements": achievements,
            "stats": {
                "total_achievements": total,
                "unlocked_count": len(held),
                "total_points": sum(record.points or 0 for record in held.values()),
                "completion_percentage": round(len(held) / total * 100) if total else 0,
            },
        }

    def leaderboard(self, limit: int = DEFAULT_LEADERBOARD_LIMIT) -> dict[str, Any]:
        try:
            rows = self._ledger.leaderboard(limit)
        except LedgerStoreError as exc:
            raise _dependency_failure(exc) from exc
        return {"leaderboard": rows, "total_users": len(rows)}

    def _is_met(self, achievement_id: int, context: CriterionContext) -> bool:
        criterion = self._criteria.get(achievement_id)
        if criterion is None:
            return False
        try:
            return bool(criterion(context))
        except Exception:
            current_app.logger.exception(
                "achievement_criterion_failed user_id=%s achievement_id=%s",
                context.user_id,
                achievement_id,
            )
            return False


def _build_record(
    user_id: UUID, definition: AchievementDefinition, now: datetime
) -> UserAchievement:
    return UserAchievement(
        user_id=user_id,
        achievement_id=definition.id,
        name=definition.name,
        description=definition.description,
        category=definition.category,
        icon=definition.icon,
        points=definition.points,
        earned_at=now,
    )


def _dependency_failure(exc: LedgerStoreError) -> AchievementServiceError:
    return AchievementServiceError(
        message="Achievement storage is temporarily unavailable.",
        code="DEPENDENCY_FAILURE",
        status_code=503,
        details={"operation": exc.operation},
    )
