from __future__ import annotations

from .blueprint import achievement_bp
from .resources import (
    AchievementCheckResource,
    AchievementCollectionResource,
    AchievementLeaderboardResource,
)

_ROUTES_REGISTERED = False


def register_achievement_routes() -> None:
    global _ROUTES_REGISTERED
    if _ROUTES_REGISTERED:
        return

    achievement_bp.add_url_rule(
        "",
        view_func=AchievementCollectionResource.as_view("achievement_collection"),
        methods=["GET"],
    )
    achievement_bp.add_url_rule(
        "/check",
        view_func=AchievementCheckResource.as_view("achievement_check"),
        methods=["POST"],
    )
    achievement_bp.add_url_rule(
        "/leaderboard",
        view_func=AchievementLeaderboardResource.as_view("achievement_leaderboard"),
        methods=["GET"],
    )

    _ROUTES_REGISTERED = True


register_achievement_routes()
