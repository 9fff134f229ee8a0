"""Unlock rules for the achievement catalog.

Each rule is a read-only predicate over the ledger store. Rules are looked up
by achievement id in `ACHIEVEMENT_CRITERIA`; supporting a new achievement means
registering one more entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from types import MappingProxyType
from typing import Callable, Mapping
from uuid import UUID

from finance_tracker.models.ledger_entry import LedgerEntryType
from finance_tracker.services.ledger_store import LedgerStore
from finance_tracker.utils.datetime_utils import (
    shift_months,
    start_of_month,
    trailing_days,
)

BUDGET_MASTER_EXPENSE_RATIO = Decimal("0.8")
SAVINGS_CHAMPION_MIN_RATE = Decimal("20")
EMERGENCY_FUND_MONTHS = 3
GOAL_SETTER_MIN_GOALS = 3
GOAL_COMPLETIONIST_MIN_GOALS = 5
CONSISTENT_TRACKER_DAYS = 7
DISCIPLINE_MASTER_DAYS = 30
# No historical net worth is recorded, so growth is measured from zero.
STARTING_NET_WORTH = Decimal("0")
WEALTH_GROWTH_FACTOR = Decimal("1.5")
WEALTH_MIN_BALANCE = Decimal("1000")

BOTH_ENTRY_TYPES = (LedgerEntryType.INCOME, LedgerEntryType.EXPENSE)


@dataclass(frozen=True)
class CriterionContext:
    user_id: UUID
    ledger: LedgerStore
    now: datetime

    @property
    def today(self) -> date:
        return self.now.date()


Criterion = Callable[[CriterionContext], bool]


def _net_savings(ctx: CriterionContext, start: date, end: date) -> Decimal:
    income = ctx.ledger.sum_amounts(LedgerEntryType.INCOME, ctx.user_id, start, end)
    expenses = ctx.ledger.sum_amounts(LedgerEntryType.EXPENSE, ctx.user_id, start, end)
    return income - expenses


def _has_daily_streak(
    ctx: CriterionContext,
    entry_types: tuple[LedgerEntryType, ...],
    days: int,
) -> bool:
    window = trailing_days(ctx.today, days)
    entries = ctx.ledger.list_entries_in_range(
        entry_types, ctx.user_id, window[-1], ctx.today + timedelta(days=1)
    )
    entry_dates = {entry.entry_date for entry in entries}
    streak = 0
    for day in window:
        if day not in entry_dates:
            break
        streak += 1
    return streak >= days


def first_goal_achiever(ctx: CriterionContext) -> bool:
    for goal in ctx.ledger.list_goals_by_status(ctx.user_id, "completed"):
        if goal.completed_at is None:
            continue
        if goal.completed_at.date() <= goal.target_date and Decimal(
            str(goal.current_amount)
        ) >= Decimal(str(goal.target_amount)):
            return True
    return False


def savings_improver(ctx: CriterionContext) -> bool:
    month_start = start_of_month(ctx.today)
    next_month = shift_months(month_start, 1)
    two_months_ago = shift_months(month_start, -2)

    current_savings = _net_savings(ctx, month_start, next_month)
    past_average = _net_savings(ctx, two_months_ago, month_start) / 2
    return current_savings > past_average and past_average > 0


def consistent_tracker(ctx: CriterionContext) -> bool:
    return _has_daily_streak(ctx, BOTH_ENTRY_TYPES, CONSISTENT_TRACKER_DAYS)


def budget_master(ctx: CriterionContext) -> bool:
    month_start = start_of_month(ctx.today)
    next_month = shift_months(month_start, 1)
    income = ctx.ledger.sum_amounts(
        LedgerEntryType.INCOME, ctx.user_id, month_start, next_month
    )
    expenses = ctx.ledger.sum_amounts(
        LedgerEntryType.EXPENSE, ctx.user_id, month_start, next_month
    )
    return income > 0 and (expenses / income) < BUDGET_MASTER_EXPENSE_RATIO


def goal_setter(ctx: CriterionContext) -> bool:
    if ctx.ledger.count_goals_by_status(ctx.user_id, "active") < GOAL_SETTER_MIN_GOALS:
        return False
    return (
        ctx.ledger.count_goals_with_contributions(ctx.user_id, "active")
        >= GOAL_SETTER_MIN_GOALS
    )


def emergency_fund_builder(ctx: CriterionContext) -> bool:
    aggregate = ctx.ledger.get_user_aggregate(ctx.user_id)
    if aggregate is None:
        return False

    window_start = shift_months(start_of_month(ctx.today), -EMERGENCY_FUND_MONTHS)
    monthly_totals: dict[tuple[int, int], Decimal] = {}
    for entry in ctx.ledger.list_entries_in_range(
        (LedgerEntryType.EXPENSE,),
        ctx.user_id,
        window_start,
        ctx.today + timedelta(days=1),
    ):
        key = (entry.entry_date.year, entry.entry_date.month)
        monthly_totals[key] = monthly_totals.get(key, Decimal("0")) + Decimal(
            str(entry.amount)
        )
    if not monthly_totals:
        return False

    average_monthly = sum(monthly_totals.values(), Decimal("0")) / len(monthly_totals)
    emergency_fund_goal = average_monthly * EMERGENCY_FUND_MONTHS
    return emergency_fund_goal > 0 and aggregate.current_balance >= emergency_fund_goal


def savings_champion(ctx: CriterionContext) -> bool:
    # Only the stored savings rate is checked, not three months of history.
    aggregate = ctx.ledger.get_user_aggregate(ctx.user_id)
    if aggregate is None:
        return False
    return aggregate.savings_rate >= SAVINGS_CHAMPION_MIN_RATE


def goal_completionist(ctx: CriterionContext) -> bool:
    return (
        ctx.ledger.count_goals_by_status(ctx.user_id, "completed")
        >= GOAL_COMPLETIONIST_MIN_GOALS
    )


def financial_discipline_master(ctx: CriterionContext) -> bool:
    return _has_daily_streak(
        ctx, (LedgerEntryType.EXPENSE,), DISCIPLINE_MASTER_DAYS
    )


def wealth_builder_legend(ctx: CriterionContext) -> bool:
    if not ctx.ledger.has_entries(ctx.user_id):
        return False
    aggregate = ctx.ledger.get_user_aggregate(ctx.user_id)
    if aggregate is None:
        return False
    growth_target = STARTING_NET_WORTH + abs(STARTING_NET_WORTH) * (
        WEALTH_GROWTH_FACTOR - 1
    )
    return (
        aggregate.current_balance >= growth_target
        and aggregate.current_balance > WEALTH_MIN_BALANCE
    )


ACHIEVEMENT_CRITERIA: Mapping[int, Criterion] = MappingProxyType(
    {
        1: first_goal_achiever,
        2: savings_improver,
        3: consistent_tracker,
        4: budget_master,
        5: goal_setter,
        6: emergency_fund_builder,
        7: savings_champion,
        8: goal_completionist,
        9: financial_discipline_master,
        10: wealth_builder_legend,
    }
)
