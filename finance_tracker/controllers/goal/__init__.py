from . import resources as _resources  # noqa: F401
from . import routes as _routes  # noqa: F401
from .blueprint import goal_bp
from .dependencies import (
    GoalDependencies,
    get_goal_dependencies,
    register_goal_dependencies,
)
from .resources import (
    GoalCollectionResource,
    GoalContributionResource,
    GoalResource,
    GoalStatusResource,
)

__all__ = [
    "goal_bp",
    "GoalDependencies",
    "register_goal_dependencies",
    "get_goal_dependencies",
    "GoalCollectionResource",
    "GoalResource",
    "GoalContributionResource",
    "GoalStatusResource",
]
