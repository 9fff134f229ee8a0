from __future__ import annotations

from typing import Any

from marshmallow import (
    Schema,
    ValidationError,
    fields,
    pre_load,
    validate,
    validates_schema,
)

from finance_tracker.models.ledger_entry import INCOME_CATEGORIES, LedgerEntryType
from finance_tracker.utils.datetime_utils import utc_today

from .goal_schema import POSITIVE_AMOUNT
from .sanitization import sanitize_payload


class LedgerEntrySchema(Schema):
    """Income or expense entry recorded by the user."""

    class Meta:
        name = "LedgerEntry"

    id = fields.UUID(dump_only=True)
    entry_type = fields.Enum(
        LedgerEntryType,
        by_value=True,
        required=True,
        metadata={"description": "income or expense", "example": "expense"},
    )
    amount = fields.Decimal(
        as_string=True,
        places=2,
        required=True,
        validate=POSITIVE_AMOUNT,
        metadata={"example": "150.50"},
    )
    category = fields.Str(
        required=True,
        validate=validate.Length(min=1, max=64),
        metadata={"example": "groceries"},
    )
    description = fields.Str(validate=validate.Length(max=255), load_default=None)
    entry_date = fields.Date(load_default=utc_today, metadata={"example": "2026-01-15"})
    created_at = fields.DateTime(dump_only=True)

    @pre_load
    def sanitize_input(self, data: object, **kwargs: object) -> object:
        return sanitize_payload(
            data,
            text_fields={"description"},
            choice_fields=frozenset({"entry_type", "category"}),
        )

    @validates_schema
    def validate_income_category(self, data: dict[str, Any], **kwargs: object) -> None:
        if data.get("entry_type") is LedgerEntryType.INCOME and (
            data.get("category") not in INCOME_CATEGORIES
        ):
            raise ValidationError(
                "Income category must be one of: " + ", ".join(INCOME_CATEGORIES),
                field_name="category",
            )
