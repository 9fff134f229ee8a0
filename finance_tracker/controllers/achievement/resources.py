# mypy: disable-error-code=misc

from __future__ import annotations

from typing import Any
from uuid import UUID

from flask_apispec import doc, marshal_with, use_kwargs
from flask_apispec.views import MethodResource
from flask_jwt_extended import get_jwt_identity, jwt_required
from marshmallow import fields

from finance_tracker.application.services.achievement_application_service import (
    AchievementApplicationError,
)
from finance_tracker.controllers.response_contract import (
    application_error_response,
    success_response,
)
from finance_tracker.schemas.achievement_schema import AchievementCheckResultSchema

from .dependencies import get_achievement_dependencies


class AchievementCheckResource(MethodResource):
    @doc(
        description=(
            "Evaluate every achievement the user does not hold yet and grant "
            "the ones whose criteria are met. Safe to call repeatedly."
        ),
        tags=["Achievements"],
        security=[{"BearerAuth": []}],
        responses={
            200: {"description": "Evaluation result"},
            401: {"description": "Invalid token"},
            404: {"description": "User not found"},
            503: {"description": "Storage unavailable"},
        },
    )
    @marshal_with(AchievementCheckResultSchema, code=200, apply=False)
    @jwt_required()
    def post(self) -> Any:
        user_id = UUID(get_jwt_identity())
        dependencies = get_achievement_dependencies()
        service = dependencies.achievement_application_service_factory(user_id)
        try:
            result = service.check_achievements()
        except AchievementApplicationError as exc:
            return application_error_response(exc)

        return success_response(
            status_code=200,
            message=result["message"],
            data=result,
        )


class AchievementCollectionResource(MethodResource):
    @doc(
        description="List the full catalog annotated with the user's unlocks.",
        tags=["Achievements"],
        security=[{"BearerAuth": []}],
        responses={
            200: {"description": "Catalog with unlock state and stats"},
            401: {"description": "Invalid token"},
        },
    )
    @jwt_required()
    def get(self) -> Any:
        user_id = UUID(get_jwt_identity())
        dependencies = get_achievement_dependencies()
        service = dependencies.achievement_application_service_factory(user_id)
        try:
            result = service.list_achievements()
        except AchievementApplicationError as exc:
            return application_error_response(exc)

        return success_response(
            status_code=200,
            message="Achievements retrieved successfully",
            data=result,
        )


class AchievementLeaderboardResource(MethodResource):
    @doc(
        description="Top users ranked by achievement points, then count.",
        tags=["Achievements"],
        security=[{"BearerAuth": []}],
        responses={
            200: {"description": "Leaderboard"},
            400: {"description": "Invalid limit"},
            401: {"description": "Invalid token"},
        },
    )
    @use_kwargs({"limit": fields.Int(load_default=10)}, location="query")
    @jwt_required()
    def get(self, limit: int) -> Any:
        user_id = UUID(get_jwt_identity())
        dependencies = get_achievement_dependencies()
        service = dependencies.achievement_application_service_factory(user_id)
        try:
            result = service.leaderboard(limit)
        except AchievementApplicationError as exc:
            return application_error_response(exc)

        return success_response(
            status_code=200,
            message="Leaderboard retrieved successfully",
            data={"leaderboard": result["leaderboard"]},
            meta={"total_users": result["total_users"], "limit": limit},
        )
