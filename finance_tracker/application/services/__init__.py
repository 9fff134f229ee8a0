from finance_tracker.application.services.achievement_application_service import (
    AchievementApplicationError,
    AchievementApplicationService,
)
from finance_tracker.application.services.goal_application_service import (
    GoalApplicationError,
    GoalApplicationService,
)
from finance_tracker.application.services.ledger_entry_application_service import (
    LedgerEntryApplicationError,
    LedgerEntryApplicationService,
)

__all__ = [
    "AchievementApplicationError",
    "AchievementApplicationService",
    "GoalApplicationError",
    "GoalApplicationService",
    "LedgerEntryApplicationError",
    "LedgerEntryApplicationService",
]
