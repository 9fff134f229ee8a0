"""
Marshmallow schemas used for request validation, response serialization and
the generated OpenAPI document.
"""

from .achievement_schema import AchievementCheckResultSchema, AchievementSchema
from .auth_schema import AuthSchema
from .goal_schema import (
    GoalContributionSchema,
    GoalSchema,
    GoalStatusSchema,
    GoalUpdateSchema,
)
from .ledger_entry_schema import LedgerEntrySchema
from .user_schemas import UserRegistrationSchema

__all__ = [
    "AchievementSchema",
    "AchievementCheckResultSchema",
    "AuthSchema",
    "GoalSchema",
    "GoalUpdateSchema",
    "GoalContributionSchema",
    "GoalStatusSchema",
    "LedgerEntrySchema",
    "UserRegistrationSchema",
]
