from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

ACHIEVEMENT_CATEGORIES = ("savings", "goals", "consistency", "milestones")


@dataclass(frozen=True)
class AchievementDefinition:
    id: int
    name: str
    description: str
    category: str
    icon: str
    criteria: str
    points: int


_DEFINITIONS = (
    AchievementDefinition(
        id=1,
        name="First Goal Achiever",
        description="Complete your first financial goal within the deadline",
        category="goals",
        icon="🎯",
        criteria="Complete 1 goal on time",
        points=100,
    ),
    AchievementDefinition(
        id=2,
        name="Savings Improver",
        description="Save more than your average of the past two months",
        category="savings",
        icon="📈",
        criteria="Monthly savings > 2-month average",
        points=150,
    ),
    AchievementDefinition(
        id=3,
        name="Consistent Tracker",
        description="Add income or expense entries for 7 consecutive days",
        category="consistency",
        icon="📊",
        criteria="7 consecutive days of entries",
        points=200,
    ),
    AchievementDefinition(
        id=4,
        name="Budget Master",
        description="Keep expenses under 80% of income for a full month",
        category="savings",
        icon="💰",
        criteria="Monthly expense ratio < 80%",
        points=250,
    ),
    AchievementDefinition(
        id=5,
        name="Goal Setter",
        description="Create and actively work on 3 different goals simultaneously",
        category="goals",
        icon="🎯",
        criteria="3 active goals with contributions",
        points=300,
    ),
    AchievementDefinition(
        id=6,
        name="Emergency Fund Builder",
        description="Build an emergency fund worth 3 months of expenses",
        category="milestones",
        icon="🛡️",
        criteria="Emergency fund ≥ 3x monthly expenses",
        points=400,
    ),
    AchievementDefinition(
        id=7,
        name="Savings Champion",
        description=(
            "Maintain a savings rate of 20% or higher for 3 consecutive months"
        ),
        category="savings",
        icon="🏆",
        criteria="20%+ savings rate for 3 months",
        points=500,
    ),
    AchievementDefinition(
        id=8,
        name="Goal Completionist",
        description="Successfully complete 5 financial goals",
        category="goals",
        icon="⭐",
        criteria="Complete 5 goals total",
        points=600,
    ),
    AchievementDefinition(
        id=9,
        name="Financial Discipline Master",
        description="Track expenses daily for 30 consecutive days",
        category="consistency",
        icon="📝",
        criteria="30 consecutive days of expense tracking",
        points=750,
    ),
    AchievementDefinition(
        id=10,
        name="Wealth Builder Legend",
        description="Achieve a net worth growth of 50% from your starting point",
        category="milestones",
        icon="👑",
        criteria="50% net worth growth",
        points=1000,
    ),
)

ACHIEVEMENT_CATALOG: Mapping[int, AchievementDefinition] = MappingProxyType(
    {definition.id: definition for definition in _DEFINITIONS}
)


def iter_definitions() -> tuple[AchievementDefinition, ...]:
    return _DEFINITIONS


def serialize_definition(definition: AchievementDefinition) -> dict[str, object]:
    return {
        "id": definition.id,
        "name": definition.name,
        "description": definition.description,
        "category": definition.category,
        "icon": definition.icon,
        "criteria": definition.criteria,
        "points": definition.points,
    }
