# mypy: disable-error-code=misc

from __future__ import annotations

from datetime import date
from typing import Any
from uuid import UUID

from flask import request
from flask_apispec import doc, use_kwargs
from flask_apispec.views import MethodResource
from flask_jwt_extended import get_jwt_identity, jwt_required
from marshmallow import fields

from finance_tracker.application.services.ledger_entry_application_service import (
    LedgerEntryApplicationError,
)
from finance_tracker.controllers.response_contract import (
    application_error_response,
    success_response,
)
from finance_tracker.extensions.achievement_trigger import schedule_achievement_check

from .dependencies import get_ledger_dependencies


class LedgerEntryCollectionResource(MethodResource):
    @doc(
        description="Record an income or expense entry.",
        tags=["Ledger"],
        security=[{"BearerAuth": []}],
        responses={
            201: {"description": "Entry recorded"},
            400: {"description": "Invalid entry data"},
            401: {"description": "Invalid token"},
        },
    )
    @jwt_required()
    def post(self) -> Any:
        user_id = UUID(get_jwt_identity())
        payload = request.get_json(silent=True) or {}
        dependencies = get_ledger_dependencies()
        service = dependencies.ledger_entry_application_service_factory(user_id)
        try:
            entry_data = service.create_entry(payload)
        except LedgerEntryApplicationError as exc:
            return application_error_response(exc)

        schedule_achievement_check(user_id)
        return success_response(
            status_code=201,
            message="Ledger entry created successfully",
            data={"entry": entry_data},
        )

    @doc(
        description="List ledger entries, most recent date first.",
        tags=["Ledger"],
        security=[{"BearerAuth": []}],
        responses={
            200: {"description": "Paginated entries"},
            400: {"description": "Invalid parameters"},
            401: {"description": "Invalid token"},
        },
    )
    @use_kwargs(
        {
            "page": fields.Int(load_default=1, validate=lambda x: x > 0),
            "per_page": fields.Int(load_default=20, validate=lambda x: 0 < x <= 100),
            "entry_type": fields.Str(load_default=None),
            "start_date": fields.Date(load_default=None),
            "end_date": fields.Date(load_default=None),
        },
        location="query",
    )
    @jwt_required()
    def get(
        self,
        page: int,
        per_page: int,
        entry_type: str | None,
        start_date: date | None,
        end_date: date | None,
    ) -> Any:
        user_id = UUID(get_jwt_identity())
        dependencies = get_ledger_dependencies()
        service = dependencies.ledger_entry_application_service_factory(user_id)
        try:
            result = service.list_entries(
                page=page,
                per_page=per_page,
                entry_type=entry_type,
                start_date=start_date,
                end_date=end_date,
            )
        except LedgerEntryApplicationError as exc:
            return application_error_response(exc)

        return success_response(
            status_code=200,
            message="Ledger entries listed successfully",
            data={"items": result["items"]},
            meta={"pagination": result["pagination"]},
        )


class LedgerEntryResource(MethodResource):
    @doc(
        description="Delete one ledger entry of the authenticated user.",
        tags=["Ledger"],
        security=[{"BearerAuth": []}],
        params={"entry_id": {"in": "path", "type": "string", "required": True}},
        responses={
            200: {"description": "Entry deleted"},
            401: {"description": "Invalid token"},
            404: {"description": "Entry not found"},
        },
    )
    @jwt_required()
    def delete(self, entry_id: UUID) -> Any:
        user_id = UUID(get_jwt_identity())
        dependencies = get_ledger_dependencies()
        service = dependencies.ledger_entry_application_service_factory(user_id)
        try:
            service.delete_entry(entry_id)
        except LedgerEntryApplicationError as exc:
            return application_error_response(exc)

        schedule_achievement_check(user_id)
        return success_response(
            status_code=200,
            message="Ledger entry deleted successfully",
            data={},
        )
