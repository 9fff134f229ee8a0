from __future__ import annotations

from dataclasses import dataclass
from typing import Callable
from uuid import UUID

from flask import Flask, current_app

from finance_tracker.application.services.ledger_entry_application_service import (
    LedgerEntryApplicationService,
)

LEDGER_DEPENDENCIES_EXTENSION_KEY = "ledger_dependencies"


@dataclass(frozen=True)
class LedgerDependencies:
    ledger_entry_application_service_factory: Callable[
        [UUID], LedgerEntryApplicationService
    ]


def _default_dependencies() -> LedgerDependencies:
    return LedgerDependencies(
        ledger_entry_application_service_factory=(
            LedgerEntryApplicationService.with_defaults
        ),
    )


def register_ledger_dependencies(
    app: Flask,
    dependencies: LedgerDependencies | None = None,
) -> None:
    if dependencies is None:
        dependencies = _default_dependencies()
    app.extensions.setdefault(LEDGER_DEPENDENCIES_EXTENSION_KEY, dependencies)


def get_ledger_dependencies() -> LedgerDependencies:
    configured = current_app.extensions.get(LEDGER_DEPENDENCIES_EXTENSION_KEY)
    if isinstance(configured, LedgerDependencies):
        return configured
    fallback = _default_dependencies()
    current_app.extensions[LEDGER_DEPENDENCIES_EXTENSION_KEY] = fallback
    return fallback
