from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Callable
from uuid import UUID

from finance_tracker.services.ledger_entry_service import (
    LedgerEntryService,
    LedgerEntryServiceError,
)


@dataclass(frozen=True)
class LedgerEntryApplicationError(Exception):
    message: str
    code: str
    status_code: int
    details: dict[str, Any] | None = None


class LedgerEntryApplicationService:
    def __init__(
        self,
        *,
        user_id: UUID,
        ledger_entry_service_factory: Callable[[UUID], LedgerEntryService],
    ) -> None:
        self._user_id = user_id
        self._entry_service = ledger_entry_service_factory(user_id)

    @classmethod
    def with_defaults(cls, user_id: UUID) -> LedgerEntryApplicationService:
        return cls(user_id=user_id, ledger_entry_service_factory=LedgerEntryService)

    def create_entry(self, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            entry = self._entry_service.create_entry(payload)
        except LedgerEntryServiceError as exc:
            raise _to_ledger_entry_application_error(exc) from exc
        return self._entry_service.serialize(entry)

    def list_entries(
        self,
        *,
        page: int,
        per_page: int,
        entry_type: str | None,
        start_date: date | None,
        end_date: date | None,
    ) -> dict[str, Any]:
        try:
            entries, pagination = self._entry_service.list_entries(
                page=page,
                per_page=per_page,
                entry_type=entry_type,
                start_date=start_date,
                end_date=end_date,
            )
        except LedgerEntryServiceError as exc:
            raise _to_ledger_entry_application_error(exc) from exc
        return {
            "items": [self._entry_service.serialize(entry) for entry in entries],
            "pagination": pagination,
        }

    def delete_entry(self, entry_id: UUID) -> None:
        try:
            self._entry_service.delete_entry(entry_id)
        except LedgerEntryServiceError as exc:
            raise _to_ledger_entry_application_error(exc) from exc


def _to_ledger_entry_application_error(
    exc: LedgerEntryServiceError,
) -> LedgerEntryApplicationError:
    return LedgerEntryApplicationError(
        message=exc.message,
        code=exc.code,
        status_code=exc.status_code,
        details=exc.details,
    )
