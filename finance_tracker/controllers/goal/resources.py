# mypy: disable-error-code=misc

from __future__ import annotations

from typing import Any
from uuid import UUID

from flask import request
from flask_apispec import doc, use_kwargs
from flask_apispec.views import MethodResource
from flask_jwt_extended import get_jwt_identity, jwt_required
from marshmallow import fields

from finance_tracker.application.services.goal_application_service import (
    GoalApplicationError,
)
from finance_tracker.controllers.response_contract import (
    application_error_response,
    success_response,
)
from finance_tracker.extensions.achievement_trigger import schedule_achievement_check

from .dependencies import get_goal_dependencies

GOAL_ID_PARAM = {"goal_id": {"in": "path", "type": "string", "required": True}}


class GoalCollectionResource(MethodResource):
    @doc(
        description="Create a savings goal for the authenticated user.",
        tags=["Goals"],
        security=[{"BearerAuth": []}],
        responses={
            201: {"description": "Goal created"},
            400: {"description": "Invalid goal data"},
            401: {"description": "Invalid token"},
        },
    )
    @jwt_required()
    def post(self) -> Any:
        user_id = UUID(get_jwt_identity())
        payload = request.get_json(silent=True) or {}
        service = get_goal_dependencies().goal_application_service_factory(user_id)
        try:
            goal_data = service.create_goal(payload)
        except GoalApplicationError as exc:
            return application_error_response(exc)

        schedule_achievement_check(user_id)
        return success_response(
            status_code=201,
            message="Goal created successfully",
            data={"goal": goal_data},
        )

    @doc(
        description="List the authenticated user's goals, newest first.",
        tags=["Goals"],
        security=[{"BearerAuth": []}],
        responses={
            200: {"description": "Paginated goals"},
            400: {"description": "Invalid parameters"},
            401: {"description": "Invalid token"},
        },
    )
    @use_kwargs(
        {
            "page": fields.Int(load_default=1, validate=lambda x: x > 0),
            "per_page": fields.Int(load_default=10, validate=lambda x: 0 < x <= 100),
            "status": fields.Str(load_default=None),
            "category": fields.Str(load_default=None),
        },
        location="query",
    )
    @jwt_required()
    def get(
        self,
        page: int,
        per_page: int,
        status: str | None,
        category: str | None,
    ) -> Any:
        user_id = UUID(get_jwt_identity())
        service = get_goal_dependencies().goal_application_service_factory(user_id)
        try:
            result = service.list_goals(
                page=page,
                per_page=per_page,
                status=status,
                category=category,
            )
        except GoalApplicationError as exc:
            return application_error_response(exc)

        return success_response(
            status_code=200,
            message="Goals listed successfully",
            data={"items": result["items"]},
            meta={"pagination": result["pagination"]},
        )


class GoalResource(MethodResource):
    @doc(
        description="Return one goal of the authenticated user.",
        tags=["Goals"],
        security=[{"BearerAuth": []}],
        params=GOAL_ID_PARAM,
        responses={
            200: {"description": "Goal found"},
            401: {"description": "Invalid token"},
            404: {"description": "Goal not found"},
        },
    )
    @jwt_required()
    def get(self, goal_id: UUID) -> Any:
        user_id = UUID(get_jwt_identity())
        service = get_goal_dependencies().goal_application_service_factory(user_id)
        try:
            goal_data = service.get_goal(goal_id)
        except GoalApplicationError as exc:
            return application_error_response(exc)

        return success_response(
            status_code=200,
            message="Goal retrieved successfully",
            data={"goal": goal_data},
        )

    @doc(
        description=(
            "Edit a goal's title, description, category, target amount, "
            "target date or priority."
        ),
        tags=["Goals"],
        security=[{"BearerAuth": []}],
        params=GOAL_ID_PARAM,
        responses={
            200: {"description": "Goal updated"},
            400: {"description": "Invalid data"},
            401: {"description": "Invalid token"},
            404: {"description": "Goal not found"},
        },
    )
    @jwt_required()
    def put(self, goal_id: UUID) -> Any:
        user_id = UUID(get_jwt_identity())
        payload = request.get_json(silent=True) or {}
        service = get_goal_dependencies().goal_application_service_factory(user_id)
        try:
            goal_data = service.update_goal(goal_id, payload)
        except GoalApplicationError as exc:
            return application_error_response(exc)

        return success_response(
            status_code=200,
            message="Goal updated successfully",
            data={"goal": goal_data},
        )

    @doc(
        description="Delete a goal with its milestones and contributions.",
        tags=["Goals"],
        security=[{"BearerAuth": []}],
        params=GOAL_ID_PARAM,
        responses={
            200: {"description": "Goal deleted"},
            401: {"description": "Invalid token"},
            404: {"description": "Goal not found"},
        },
    )
    @jwt_required()
    def delete(self, goal_id: UUID) -> Any:
        user_id = UUID(get_jwt_identity())
        service = get_goal_dependencies().goal_application_service_factory(user_id)
        try:
            service.delete_goal(goal_id)
        except GoalApplicationError as exc:
            return application_error_response(exc)

        return success_response(
            status_code=200,
            message="Goal deleted successfully",
            data={},
        )


class GoalContributionResource(MethodResource):
    @doc(
        description=(
            "Add money to an active goal. Completes the goal and marks "
            "milestones once their amounts are reached."
        ),
        tags=["Goals"],
        security=[{"BearerAuth": []}],
        params=GOAL_ID_PARAM,
        responses={
            200: {"description": "Contribution recorded"},
            400: {"description": "Invalid amount or inactive goal"},
            401: {"description": "Invalid token"},
            404: {"description": "Goal not found"},
            503: {"description": "Storage unavailable"},
        },
    )
    @jwt_required()
    def post(self, goal_id: UUID) -> Any:
        user_id = UUID(get_jwt_identity())
        payload = request.get_json(silent=True) or {}
        service = get_goal_dependencies().goal_application_service_factory(user_id)
        try:
            goal_data = service.add_contribution(goal_id, payload)
        except GoalApplicationError as exc:
            return application_error_response(exc)

        schedule_achievement_check(user_id)
        return success_response(
            status_code=200,
            message="Contribution added successfully",
            data={"goal": goal_data},
        )


class GoalStatusResource(MethodResource):
    @doc(
        description="Set the goal status (active, completed, paused or cancelled).",
        tags=["Goals"],
        security=[{"BearerAuth": []}],
        params=GOAL_ID_PARAM,
        responses={
            200: {"description": "Status updated"},
            400: {"description": "Invalid status"},
            401: {"description": "Invalid token"},
            404: {"description": "Goal not found"},
        },
    )
    @jwt_required()
    def put(self, goal_id: UUID) -> Any:
        user_id = UUID(get_jwt_identity())
        payload = request.get_json(silent=True) or {}
        service = get_goal_dependencies().goal_application_service_factory(user_id)
        try:
            goal_data = service.update_status(goal_id, payload)
        except GoalApplicationError as exc:
            return application_error_response(exc)

        schedule_achievement_check(user_id)
        return success_response(
            status_code=200,
            message="Goal status updated successfully",
            data={"goal": goal_data},
        )
