from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, cast
from uuid import UUID

from marshmallow import ValidationError

from finance_tracker.models.goal import (
    GOAL_CATEGORIES,
    GOAL_STATUSES,
    Goal,
    GoalContribution,
    GoalMilestone,
)
from finance_tracker.schemas.goal_schema import (
    GoalContributionSchema,
    GoalSchema,
    GoalStatusSchema,
    GoalUpdateSchema,
)
from finance_tracker.services.ledger_store import LedgerStore, LedgerStoreError
from finance_tracker.utils.datetime_utils import utc_now_naive

INITIAL_BALANCE_NOTE = "Initial balance"


@dataclass
class GoalServiceError(Exception):
    message: str
    code: str
    status_code: int
    details: dict[str, Any] | None = None


def _dependency_failure(exc: LedgerStoreError) -> GoalServiceError:
    return GoalServiceError(
        message="Goal storage is temporarily unavailable.",
        code="DEPENDENCY_FAILURE",
        status_code=503,
        details={"operation": exc.operation},
    )


def apply_progress_rules(goal: Goal, now: datetime) -> None:
    """Auto-complete the goal and stamp milestones reached by current_amount.

    Completion only fires forward from `active`; milestones never revert.
    """
    current_amount = Decimal(str(goal.current_amount))
    if goal.status == "active" and current_amount >= Decimal(str(goal.target_amount)):
        goal.status = "completed"
        goal.completed_at = now
    for milestone in sorted(goal.milestones, key=lambda item: item.amount):
        if not milestone.is_achieved and current_amount >= milestone.amount:
            milestone.is_achieved = True
            milestone.achieved_at = now


class GoalService:
    def __init__(
        self,
        user_id: UUID,
        ledger: LedgerStore | None = None,
        *,
        clock: Callable[[], datetime] = utc_now_naive,
    ) -> None:
        self.user_id = user_id
        self._ledger = ledger or LedgerStore()
        self._clock = clock
        self._schema = GoalSchema()
        self._update_schema = GoalUpdateSchema()
        self._contribution_schema = GoalContributionSchema()
        self._status_schema = GoalStatusSchema()

    def create_goal(self, payload: dict[str, Any]) -> Goal:
        try:
            validated = self._schema.load(payload)
        except ValidationError as exc:
            raise GoalServiceError(
                message="Invalid goal data.",
                code="VALIDATION_ERROR",
                status_code=400,
                details={"messages": exc.messages},
            ) from exc

        now = self._clock()
        milestones = validated.pop("milestones", [])
        seed_amount = validated.pop("current_amount", Decimal("0"))
        goal = Goal(
            user_id=self.user_id,
            status="active",
            current_amount=seed_amount,
            created_at=now,
            updated_at=now,
            **validated,
        )
        goal.milestones = [
            GoalMilestone(
                amount=item["amount"],
                description=item.get("description"),
                is_achieved=False,
            )
            for item in milestones
        ]
        if seed_amount > 0:
            goal.contributions = [
                GoalContribution(
                    position=0,
                    amount=seed_amount,
                    source="manual",
                    note=INITIAL_BALANCE_NOTE,
                    contributed_at=now,
                )
            ]
        apply_progress_rules(goal, now)

        try:
            return self._ledger.save_goal(goal)
        except LedgerStoreError as exc:
            raise _dependency_failure(exc) from exc

    def list_goals(
        self,
        *,
        page: int,
        per_page: int,
        status: str | None = None,
        category: str | None = None,
    ) -> tuple[list[Goal], dict[str, int]]:
        normalized_status = _normalize_filter(status, GOAL_STATUSES, "status")
        normalized_category = _normalize_filter(category, GOAL_CATEGORIES, "category")
        try:
            return self._ledger.list_goals(
                self.user_id,
                page=page,
                per_page=per_page,
                status=normalized_status,
                category=normalized_category,
            )
        except LedgerStoreError as exc:
            raise _dependency_failure(exc) from exc

    def get_goal(self, goal_id: UUID) -> Goal:
        # Foreign goals are reported exactly like missing ones.
        try:
            goal = self._ledger.find_goal(goal_id, self.user_id)
        except LedgerStoreError as exc:
            raise _dependency_failure(exc) from exc
        if goal is None:
            raise GoalServiceError(
                message="Goal not found.",
                code="NOT_FOUND",
                status_code=404,
            )
        return goal

    def update_goal(self, goal_id: UUID, payload: dict[str, Any]) -> Goal:
        goal = self.get_goal(goal_id)
        try:
            validated = self._update_schema.load(payload)
        except ValidationError as exc:
            raise GoalServiceError(
                message="Invalid data for goal update.",
                code="VALIDATION_ERROR",
                status_code=400,
                details={"messages": exc.messages},
            ) from exc

        for field, value in validated.items():
            setattr(goal, field, value)
        goal.updated_at = self._clock()
        try:
            return self._ledger.save_goal(goal)
        except LedgerStoreError as exc:
            raise _dependency_failure(exc) from exc

    def delete_goal(self, goal_id: UUID) -> None:
        goal = self.get_goal(goal_id)
        try:
            self._ledger.delete_goal(goal)
        except LedgerStoreError as exc:
            raise _dependency_failure(exc) from exc

    def add_contribution(self, goal_id: UUID, payload: dict[str, Any]) -> Goal:
        try:
            validated = self._contribution_schema.load(payload)
        except ValidationError as exc:
            raise GoalServiceError(
                message="Valid contribution amount is required.",
                code="VALIDATION_ERROR",
                status_code=400,
                details={"messages": exc.messages},
            ) from exc

        goal = self.get_goal(goal_id)
        if goal.status != "active":
            raise _inactive_goal_error(goal.status)

        try:
            applied = self._ledger.apply_contribution(
                goal_id,
                self.user_id,
                amount=validated["amount"],
                source=validated["source"],
                note=validated.get("note"),
                now=self._clock(),
            )
        except LedgerStoreError as exc:
            raise _dependency_failure(exc) from exc
        if not applied:
            # Status changed between the read and the guarded increment.
            raise _inactive_goal_error(self.get_goal(goal_id).status)
        return self.get_goal(goal_id)

    def update_status(self, goal_id: UUID, payload: dict[str, Any]) -> Goal:
        try:
            validated = self._status_schema.load(payload)
        except ValidationError as exc:
            raise GoalServiceError(
                message="Invalid status.",
                code="VALIDATION_ERROR",
                status_code=400,
                details={"messages": exc.messages},
            ) from exc

        goal = self.get_goal(goal_id)
        new_status = validated["status"]
        now = self._clock()
        if new_status == "completed":
            if goal.completed_at is None:
                goal.completed_at = now
        else:
            goal.completed_at = None
        goal.status = new_status
        goal.updated_at = now
        try:
            return self._ledger.save_goal(goal)
        except LedgerStoreError as exc:
            raise _dependency_failure(exc) from exc

    def serialize(self, goal: Goal) -> dict[str, Any]:
        return cast(dict[str, Any], self._schema.dump(goal))


def _inactive_goal_error(status: str) -> GoalServiceError:
    return GoalServiceError(
        message="Cannot contribute to inactive goal.",
        code="INVALID_STATE",
        status_code=400,
        details={"status": status},
    )


def _normalize_filter(
    value: str | None, allowed: tuple[str, ...], field_name: str
) -> str | None:
    if not value:
        return None
    normalized = value.strip().lower()
    if normalized not in allowed:
        raise GoalServiceError(
            message=f"Invalid goal {field_name}.",
            code="VALIDATION_ERROR",
            status_code=400,
        )
    return normalized
