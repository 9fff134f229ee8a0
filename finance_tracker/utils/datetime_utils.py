from __future__ import annotations

from datetime import UTC, date, datetime, time, timedelta

from dateutil.relativedelta import relativedelta


def utc_now() -> datetime:
    return datetime.now(UTC)


def utc_now_naive() -> datetime:
    return utc_now().replace(tzinfo=None)


def utc_today() -> date:
    return utc_now_naive().date()


def start_of_day(value: date) -> datetime:
    return datetime.combine(value, time.min)


def start_of_month(value: date) -> date:
    return value.replace(day=1)


def shift_months(value: date, months: int) -> date:
    """Return the first day of the month `months` away from `value`."""
    return start_of_month(value) + relativedelta(months=months)


def trailing_days(today: date, count: int) -> list[date]:
    """Calendar days ending at `today`, most recent first."""
    return [today - timedelta(days=offset) for offset in range(count)]
