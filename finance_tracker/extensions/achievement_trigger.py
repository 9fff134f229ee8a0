"""Post-response achievement evaluation.

Mutating requests call `schedule_achievement_check(user_id)`. Once the
response has been produced, the pending ids are evaluated in a fresh
application context. Failures are logged and never reach the client.
"""

from __future__ import annotations

from functools import partial
from typing import Iterable
from uuid import UUID

from flask import Flask, Response, current_app, g

from finance_tracker.services.achievement_service import (
    AchievementEvaluation,
    AchievementService,
)

PENDING_CHECKS_ATTR = "pending_achievement_checks"


def schedule_achievement_check(user_id: UUID) -> None:
    pending: list[UUID] = g.setdefault(PENDING_CHECKS_ATTR, [])
    if user_id not in pending:
        pending.append(user_id)


def trigger_achievement_check(user_id: UUID) -> AchievementEvaluation | None:
    try:
        return AchievementService().evaluate(user_id)
    except Exception:
        current_app.logger.exception(
            "achievement_check_failed user_id=%s", user_id
        )
        return None


def run_achievement_checks(app: Flask, user_ids: Iterable[UUID]) -> None:
    with app.app_context():
        for user_id in user_ids:
            trigger_achievement_check(user_id)


def register_achievement_trigger(app: Flask) -> None:
    @app.after_request  # type: ignore[misc]
    def dispatch_achievement_checks(response: Response) -> Response:
        pending = g.pop(PENDING_CHECKS_ATTR, None)
        if not pending or not current_app.config.get(
            "ACHIEVEMENT_TRIGGER_ENABLED", True
        ):
            return response
        if response.status_code >= 400:
            return response
        response.call_on_close(
            partial(run_achievement_checks, current_app._get_current_object(), pending)
        )
        return response
