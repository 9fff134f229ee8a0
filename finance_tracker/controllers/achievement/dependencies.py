from __future__ import annotations

from dataclasses import dataclass
from typing import Callable
from uuid import UUID

from flask import Flask, current_app

from finance_tracker.application.services.achievement_application_service import (
    AchievementApplicationService,
)

ACHIEVEMENT_DEPENDENCIES_EXTENSION_KEY = "achievement_dependencies"


@dataclass(frozen=True)
class AchievementDependencies:
    achievement_application_service_factory: Callable[
        [UUID], AchievementApplicationService
    ]


def _build_default_service(user_id: UUID) -> AchievementApplicationService:
    return AchievementApplicationService.with_defaults(
        user_id,
        leaderboard_max_limit=int(current_app.config["LEADERBOARD_MAX_LIMIT"]),
    )


def _default_dependencies() -> AchievementDependencies:
    return AchievementDependencies(
        achievement_application_service_factory=_build_default_service,
    )


def register_achievement_dependencies(
    app: Flask,
    dependencies: AchievementDependencies | None = None,
) -> None:
    if dependencies is None:
        dependencies = _default_dependencies()
    app.extensions.setdefault(ACHIEVEMENT_DEPENDENCIES_EXTENSION_KEY, dependencies)


def get_achievement_dependencies() -> AchievementDependencies:
    configured = current_app.extensions.get(ACHIEVEMENT_DEPENDENCIES_EXTENSION_KEY)
    if isinstance(configured, AchievementDependencies):
        return configured
    fallback = _default_dependencies()
    current_app.extensions[ACHIEVEMENT_DEPENDENCIES_EXTENSION_KEY] = fallback
    return fallback
