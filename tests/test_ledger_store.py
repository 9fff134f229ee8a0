from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from finance_tracker.extensions.database import db
from finance_tracker.models.goal import Goal
from finance_tracker.models.ledger_entry import LedgerEntry, LedgerEntryType
from finance_tracker.models.user_achievement import UserAchievement
from finance_tracker.services.achievement_catalog import ACHIEVEMENT_CATALOG
from finance_tracker.services.ledger_store import LedgerStore, LedgerStoreError
from finance_tracker.utils.datetime_utils import utc_today

NOW = datetime(2026, 3, 15, 12, 0, 0)


def _goal(user_id, **overrides) -> Goal:
    values = {
        "user_id": user_id,
        "title": "Laptop",
        "category": "purchase",
        "target_amount": Decimal("1000"),
        "current_amount": Decimal("0"),
        "target_date": utc_today() + timedelta(days=60),
        "status": "active",
    }
    values.update(overrides)
    return Goal(**values)


def _entry(user_id, entry_type, amount, entry_date, category="other") -> LedgerEntry:
    return LedgerEntry(
        user_id=user_id,
        entry_type=entry_type,
        amount=Decimal(amount),
        category=category,
        entry_date=entry_date,
    )


def _record(user_id, achievement_id, earned_at=NOW) -> UserAchievement:
    definition = ACHIEVEMENT_CATALOG[achievement_id]
    return UserAchievement(
        user_id=user_id,
        achievement_id=definition.id,
        name=definition.name,
        description=definition.description,
        category=definition.category,
        icon=definition.icon,
        points=definition.points,
        earned_at=earned_at,
    )


def test_contributions_after_stale_reads_accumulate(user) -> None:
    ledger = LedgerStore()
    goal = ledger.save_goal(_goal(user.id))
    goal_id = goal.id

    # Both callers read the goal at 0 before either increment lands.
    first_read = ledger.find_goal(goal_id, user.id)
    second_read = ledger.find_goal(goal_id, user.id)
    assert first_read.current_amount == second_read.current_amount == Decimal("0")

    for _ in range(2):
        assert ledger.apply_contribution(
            goal_id,
            user.id,
            amount=Decimal("100"),
            source="manual",
            note=None,
            now=NOW,
        )

    reloaded = ledger.find_goal(goal_id, user.id)
    assert reloaded.current_amount == Decimal("200")
    assert [item.position for item in reloaded.contributions] == [0, 1]
    assert sum(item.amount for item in reloaded.contributions) == Decimal("200")


def test_apply_contribution_skips_inactive_goal(user) -> None:
    ledger = LedgerStore()
    goal = ledger.save_goal(_goal(user.id, status="cancelled"))

    applied = ledger.apply_contribution(
        goal.id, user.id, amount=Decimal("5"), source="manual", note=None, now=NOW
    )

    assert applied is False
    reloaded = ledger.find_goal(goal.id, user.id)
    assert reloaded.current_amount == Decimal("0")
    assert reloaded.contributions == []


def test_apply_contribution_completes_in_same_transaction(user) -> None:
    ledger = LedgerStore()
    goal = ledger.save_goal(_goal(user.id, current_amount=Decimal("950")))

    ledger.apply_contribution(
        goal.id, user.id, amount=Decimal("50"), source="bonus", note="gift", now=NOW
    )

    reloaded = ledger.find_goal(goal.id, user.id)
    assert reloaded.status == "completed"
    assert reloaded.completed_at == NOW


def test_sum_amounts_uses_half_open_range(user) -> None:
    ledger = LedgerStore()
    ledger.add_entry(_entry(user.id, LedgerEntryType.INCOME, "100", date(2026, 2, 28)))
    ledger.add_entry(_entry(user.id, LedgerEntryType.INCOME, "200", date(2026, 3, 1)))
    ledger.add_entry(_entry(user.id, LedgerEntryType.INCOME, "400", date(2026, 4, 1)))
    ledger.add_entry(_entry(user.id, LedgerEntryType.EXPENSE, "50", date(2026, 3, 2)))

    march = ledger.sum_amounts(
        LedgerEntryType.INCOME, user.id, date(2026, 3, 1), date(2026, 4, 1)
    )
    assert march == Decimal("200")
    assert ledger.sum_amounts(LedgerEntryType.INCOME, user.id) == Decimal("700")
    assert ledger.sum_amounts(LedgerEntryType.EXPENSE, user.id) == Decimal("50")


def test_refresh_user_aggregate_computes_balance_and_rate(user) -> None:
    ledger = LedgerStore()
    ledger.add_entry(_entry(user.id, LedgerEntryType.INCOME, "3000", date(2026, 3, 1), "salary"))
    ledger.add_entry(_entry(user.id, LedgerEntryType.EXPENSE, "2000", date(2026, 3, 2)))

    ledger.refresh_user_aggregate(user.id, now=NOW)

    aggregate = ledger.get_user_aggregate(user.id)
    assert aggregate.current_balance == Decimal("1000")
    assert aggregate.savings_rate == Decimal("33.33")


def test_refresh_user_aggregate_without_income_has_zero_rate(user) -> None:
    ledger = LedgerStore()
    ledger.add_entry(_entry(user.id, LedgerEntryType.EXPENSE, "20", date(2026, 3, 2)))

    ledger.refresh_user_aggregate(user.id, now=NOW)

    aggregate = ledger.get_user_aggregate(user.id)
    assert aggregate.current_balance == Decimal("-20")
    assert aggregate.savings_rate == Decimal("0")


def test_append_achievements_skips_ids_inserted_concurrently(user) -> None:
    ledger = LedgerStore()
    user_id = user.id
    # Another evaluation already stored id 8.
    ledger.append_achievements(user_id, [_record(user_id, 8)])

    persisted = ledger.append_achievements(
        user_id, [_record(user_id, 5), _record(user_id, 8)]
    )

    assert [record.achievement_id for record in persisted] == [5]
    held = sorted(r.achievement_id for r in ledger.list_achievements(user_id))
    assert held == [5, 8]


def test_append_achievements_without_records_does_not_write(user) -> None:
    assert LedgerStore().append_achievements(user.id, []) == []


def test_leaderboard_orders_by_points_then_count(make_user) -> None:
    ledger = LedgerStore()
    alice = make_user("alice")
    bob = make_user("bob")
    carol = make_user("carol")
    make_user("dave")

    # alice and bob tie on 600 points; bob holds more records.
    ledger.append_achievements(alice.id, [_record(alice.id, 8)])
    ledger.append_achievements(
        bob.id,
        [_record(bob.id, 1, NOW), _record(bob.id, 7, NOW + timedelta(days=1))],
    )
    ledger.append_achievements(carol.id, [_record(carol.id, 10)])

    rows = ledger.leaderboard(10)

    assert [row["name"] for row in rows] == ["carol", "bob", "alice", "dave"]
    assert rows[0]["total_points"] == 1000
    assert rows[1]["total_points"] == rows[2]["total_points"] == 600
    assert rows[1]["achievement_count"] == 2
    assert rows[1]["last_achievement"] == "Savings Champion"
    assert rows[3]["achievement_count"] == 0
    assert rows[3]["last_achievement"] is None
    assert len(ledger.leaderboard(2)) == 2


def test_storage_errors_are_wrapped(user, monkeypatch) -> None:
    ledger = LedgerStore()

    def _fail(*args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("connection lost"))

    monkeypatch.setattr(db.session, "scalar", _fail)

    with pytest.raises(LedgerStoreError) as exc_info:
        ledger.count_goals_by_status(user.id, "active")
    assert exc_info.value.operation == "count_goals_by_status"
