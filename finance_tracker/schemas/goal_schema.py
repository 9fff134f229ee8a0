from __future__ import annotations

import math
from decimal import Decimal
from typing import Any

from marshmallow import (
    Schema,
    ValidationError,
    fields,
    pre_load,
    validate,
)

from finance_tracker.models.goal import (
    CONTRIBUTION_SOURCES,
    GOAL_CATEGORIES,
    GOAL_PRIORITIES,
    GOAL_STATUSES,
)
from finance_tracker.utils.datetime_utils import start_of_day, utc_now_naive, utc_today

from .sanitization import sanitize_payload

MAX_AMOUNT = Decimal("9999999999.99")
POSITIVE_AMOUNT = validate.Range(min=0, min_inclusive=False, max=MAX_AMOUNT)


def _validate_future_date(value: Any) -> None:
    if value <= utc_today():
        raise ValidationError("Target date must be in the future.")


class MilestoneSchema(Schema):
    class Meta:
        name = "GoalMilestone"

    id = fields.UUID(dump_only=True)
    amount = fields.Decimal(
        as_string=True, places=2, required=True, validate=POSITIVE_AMOUNT
    )
    description = fields.Str(validate=validate.Length(max=255), load_default=None)
    is_achieved = fields.Bool(dump_only=True)
    achieved_at = fields.DateTime(dump_only=True, allow_none=True)


class ContributionRecordSchema(Schema):
    class Meta:
        name = "GoalContributionRecord"

    id = fields.UUID(dump_only=True)
    amount = fields.Decimal(as_string=True, dump_only=True)
    source = fields.Str(dump_only=True)
    note = fields.Str(dump_only=True, allow_none=True)
    contributed_at = fields.DateTime(dump_only=True)


class GoalSchema(Schema):
    class Meta:
        name = "Goal"

    id = fields.UUID(dump_only=True)
    user_id = fields.UUID(dump_only=True)
    title = fields.Str(required=True, validate=validate.Length(min=1, max=128))
    description = fields.Str(validate=validate.Length(max=500))
    category = fields.Str(required=True, validate=validate.OneOf(GOAL_CATEGORIES))
    target_amount = fields.Decimal(
        as_string=True,
        places=2,
        required=True,
        validate=POSITIVE_AMOUNT,
    )
    current_amount = fields.Decimal(
        as_string=True,
        places=2,
        load_default=Decimal("0.00"),
        validate=validate.Range(min=0, max=MAX_AMOUNT),
    )
    priority = fields.Str(
        load_default="medium", validate=validate.OneOf(GOAL_PRIORITIES)
    )
    target_date = fields.Date(required=True, validate=_validate_future_date)
    status = fields.Str(dump_only=True)
    completed_at = fields.DateTime(dump_only=True, allow_none=True)
    milestones = fields.List(fields.Nested(MilestoneSchema), load_default=list)
    contributions = fields.List(
        fields.Nested(ContributionRecordSchema), dump_only=True
    )
    progress_percentage = fields.Method("get_progress_percentage", dump_only=True)
    remaining_amount = fields.Method("get_remaining_amount", dump_only=True)
    days_remaining = fields.Method("get_days_remaining", dump_only=True)
    created_at = fields.DateTime(dump_only=True)
    updated_at = fields.DateTime(dump_only=True)

    @pre_load
    def sanitize_input(self, data: object, **kwargs: object) -> object:
        return sanitize_payload(
            data,
            text_fields={"title", "description"},
            choice_fields=frozenset({"category", "priority"}),
        )

    def get_progress_percentage(self, goal: Any) -> float:
        target = Decimal(str(goal.target_amount))
        if target <= 0:
            return 0.0
        progress = Decimal(str(goal.current_amount)) / target * 100
        return float(round(min(progress, Decimal("100")), 2))

    def get_remaining_amount(self, goal: Any) -> str:
        remaining = Decimal(str(goal.target_amount)) - Decimal(str(goal.current_amount))
        return str(max(remaining, Decimal("0")).quantize(Decimal("0.01")))

    def get_days_remaining(self, goal: Any) -> int:
        delta = start_of_day(goal.target_date) - utc_now_naive()
        return math.ceil(delta.total_seconds() / 86400)


class GoalUpdateSchema(Schema):
    class Meta:
        name = "GoalUpdate"

    title = fields.Str(validate=validate.Length(min=1, max=128))
    description = fields.Str(validate=validate.Length(max=500))
    category = fields.Str(validate=validate.OneOf(GOAL_CATEGORIES))
    target_amount = fields.Decimal(as_string=True, places=2, validate=POSITIVE_AMOUNT)
    priority = fields.Str(validate=validate.OneOf(GOAL_PRIORITIES))
    target_date = fields.Date(validate=_validate_future_date)

    @pre_load
    def sanitize_input(self, data: object, **kwargs: object) -> object:
        return sanitize_payload(
            data,
            text_fields={"title", "description"},
            choice_fields=frozenset({"category", "priority"}),
        )


class GoalContributionSchema(Schema):
    class Meta:
        name = "GoalContribution"

    amount = fields.Decimal(
        as_string=True,
        places=2,
        required=True,
        validate=POSITIVE_AMOUNT,
        metadata={"description": "Amount added to the goal", "example": "150.00"},
    )
    source = fields.Str(
        load_default="manual", validate=validate.OneOf(CONTRIBUTION_SOURCES)
    )
    note = fields.Str(load_default=None, validate=validate.Length(max=255))

    @pre_load
    def sanitize_input(self, data: object, **kwargs: object) -> object:
        return sanitize_payload(
            data, text_fields={"note"}, choice_fields=frozenset({"source"})
        )


class GoalStatusSchema(Schema):
    class Meta:
        name = "GoalStatus"

    status = fields.Str(required=True, validate=validate.OneOf(GOAL_STATUSES))

    @pre_load
    def sanitize_input(self, data: object, **kwargs: object) -> object:
        return sanitize_payload(
            data, text_fields=set(), choice_fields=frozenset({"status"})
        )
