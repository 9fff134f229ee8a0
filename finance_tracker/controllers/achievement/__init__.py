from . import resources as _resources  # noqa: F401
from . import routes as _routes  # noqa: F401
from .blueprint import achievement_bp
from .dependencies import (
    AchievementDependencies,
    get_achievement_dependencies,
    register_achievement_dependencies,
)
from .resources import (
    AchievementCheckResource,
    AchievementCollectionResource,
    AchievementLeaderboardResource,
)

__all__ = [
    "achievement_bp",
    "AchievementDependencies",
    "register_achievement_dependencies",
    "get_achievement_dependencies",
    "AchievementCheckResource",
    "AchievementCollectionResource",
    "AchievementLeaderboardResource",
]
