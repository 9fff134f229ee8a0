from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, cast
from uuid import UUID

from marshmallow import ValidationError

from finance_tracker.models.ledger_entry import LedgerEntry, LedgerEntryType
from finance_tracker.schemas.ledger_entry_schema import LedgerEntrySchema
from finance_tracker.services.ledger_store import LedgerStore, LedgerStoreError
from finance_tracker.utils.datetime_utils import utc_now_naive


@dataclass
class LedgerEntryServiceError(Exception):
    message: str
    code: str
    status_code: int
    details: dict[str, Any] | None = None


def _dependency_failure(exc: LedgerStoreError) -> LedgerEntryServiceError:
    return LedgerEntryServiceError(
        message="Ledger storage is temporarily unavailable.",
        code="DEPENDENCY_FAILURE",
        status_code=503,
        details={"operation": exc.operation},
    )


class LedgerEntryService:
    """Income and expense entries of a single user.

    Every create or delete recomputes the user's financial aggregate
    (balance and savings rate) read by the achievement criteria.
    """

    def __init__(
        self,
        user_id: UUID,
        ledger: LedgerStore | None = None,
        *,
        clock: Callable[[], datetime] = utc_now_naive,
    ) -> None:
        self.user_id = user_id
        self._ledger = ledger or LedgerStore()
        self._clock = clock
        self._schema = LedgerEntrySchema()

    def create_entry(self, payload: dict[str, Any]) -> LedgerEntry:
        try:
            validated = self._schema.load(payload)
        except ValidationError as exc:
            raise LedgerEntryServiceError(
                message="Invalid ledger entry data.",
                code="VALIDATION_ERROR",
                status_code=400,
                details={"messages": exc.messages},
            ) from exc

        now = self._clock()
        entry = LedgerEntry(user_id=self.user_id, created_at=now, **validated)
        try:
            self._ledger.add_entry_and_refresh(entry, now=now)
        except LedgerStoreError as exc:
            raise _dependency_failure(exc) from exc
        return entry

    def list_entries(
        self,
        *,
        page: int,
        per_page: int,
        entry_type: str | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> tuple[list[LedgerEntry], dict[str, int]]:
        normalized_type = None
        if entry_type:
            try:
                normalized_type = LedgerEntryType(entry_type.strip().lower())
            except ValueError as exc:
                raise LedgerEntryServiceError(
                    message="Invalid entry type.",
                    code="VALIDATION_ERROR",
                    status_code=400,
                    details={"entry_type": entry_type},
                ) from exc
        if start_date and end_date and start_date > end_date:
            raise LedgerEntryServiceError(
                message="start_date must not be after end_date.",
                code="VALIDATION_ERROR",
                status_code=400,
            )
        try:
            return self._ledger.list_entries(
                self.user_id,
                page=page,
                per_page=per_page,
                entry_type=normalized_type,
                start_date=start_date,
                end_date=end_date,
            )
        except LedgerStoreError as exc:
            raise _dependency_failure(exc) from exc

    def delete_entry(self, entry_id: UUID) -> None:
        try:
            entry = self._ledger.find_entry(entry_id, self.user_id)
            if entry is None:
                raise LedgerEntryServiceError(
                    message="Ledger entry not found.",
                    code="NOT_FOUND",
                    status_code=404,
                )
            self._ledger.delete_entry_and_refresh(entry, now=self._clock())
        except LedgerStoreError as exc:
            raise _dependency_failure(exc) from exc

    def serialize(self, entry: LedgerEntry) -> dict[str, Any]:
        return cast(dict[str, Any], self._schema.dump(entry))
