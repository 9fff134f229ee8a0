from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Any, cast
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from finance_tracker.extensions.database import db
from finance_tracker.models.goal import Goal, GoalContribution, GoalMilestone
from finance_tracker.models.ledger_entry import LedgerEntry, LedgerEntryType
from finance_tracker.models.user import User
from finance_tracker.models.user_achievement import UserAchievement

TWO_PLACES = Decimal("0.01")


class LedgerStoreError(Exception):
    """Raised when the underlying database cannot complete an operation."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"Ledger store operation failed: {operation}")
        self.operation = operation


@dataclass(frozen=True)
class UserAggregate:
    current_balance: Decimal
    savings_rate: Decimal


def to_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


class LedgerStore:
    """Persistence boundary shared by the goal and achievement engines."""

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise LedgerStoreError(operation) from exc

    # Users -----------------------------------------------------------------

    def get_user(self, user_id: UUID) -> User | None:
        with self._guard("get_user"):
            return cast(User | None, db.session.get(User, user_id))

    def get_user_aggregate(self, user_id: UUID) -> UserAggregate | None:
        user = self.get_user(user_id)
        if user is None:
            return None
        return UserAggregate(
            current_balance=to_decimal(user.current_balance),
            savings_rate=to_decimal(user.savings_rate),
        )

    def refresh_user_aggregate(self, user_id: UUID, *, now: datetime) -> None:
        with self._guard("refresh_user_aggregate"):
            self._stage_user_aggregate(user_id, now=now)
            db.session.commit()

    def _stage_user_aggregate(self, user_id: UUID, *, now: datetime) -> None:
        user = db.session.get(User, user_id)
        if user is None:
            return
        total_income = self.sum_amounts(LedgerEntryType.INCOME, user_id)
        total_expenses = self.sum_amounts(LedgerEntryType.EXPENSE, user_id)
        balance = total_income - total_expenses
        savings_rate = Decimal("0")
        if total_income > 0:
            savings_rate = (balance / total_income * 100).quantize(TWO_PLACES)
        user.total_income = total_income
        user.total_expenses = total_expenses
        user.current_balance = balance
        user.savings_rate = savings_rate
        user.summary_updated_at = now

    # Goals -----------------------------------------------------------------

    def find_goal(self, goal_id: UUID, user_id: UUID) -> Goal | None:
        with self._guard("find_goal"):
            return cast(
                Goal | None,
                Goal.query.filter_by(id=goal_id, user_id=user_id).first(),
            )

    def list_goals(
        self,
        user_id: UUID,
        *,
        page: int,
        per_page: int,
        status: str | None = None,
        category: str | None = None,
    ) -> tuple[list[Goal], dict[str, int]]:
        with self._guard("list_goals"):
            query = Goal.query.filter_by(user_id=user_id)
            if status:
                query = query.filter(Goal.status == status)
            if category:
                query = query.filter(Goal.category == category)
            pagination = query.order_by(Goal.created_at.desc()).paginate(
                page=page,
                per_page=per_page,
                error_out=False,
            )
            return cast(list[Goal], pagination.items), {
                "total": int(pagination.total or 0),
                "page": int(pagination.page),
                "per_page": int(pagination.per_page),
                "pages": int(pagination.pages),
            }

    def list_goals_by_status(self, user_id: UUID, status: str) -> list[Goal]:
        with self._guard("list_goals_by_status"):
            return cast(
                list[Goal],
                Goal.query.filter_by(user_id=user_id, status=status).all(),
            )

    def save_goal(self, goal: Goal) -> Goal:
        with self._guard("save_goal"):
            db.session.add(goal)
            db.session.commit()
        return goal

    def delete_goal(self, goal: Goal) -> None:
        with self._guard("delete_goal"):
            db.session.delete(goal)
            db.session.commit()

    def count_goals_by_status(self, user_id: UUID, status: str) -> int:
        with self._guard("count_goals_by_status"):
            return int(
                db.session.scalar(
                    select(func.count(Goal.id)).where(
                        Goal.user_id == user_id, Goal.status == status
                    )
                )
                or 0
            )

    def count_goals_with_contributions(self, user_id: UUID, status: str) -> int:
        with self._guard("count_goals_with_contributions"):
            return int(
                db.session.scalar(
                    select(func.count(func.distinct(GoalContribution.goal_id)))
                    .select_from(GoalContribution)
                    .join(Goal, Goal.id == GoalContribution.goal_id)
                    .where(Goal.user_id == user_id, Goal.status == status)
                )
                or 0
            )

    def apply_contribution(
        self,
        goal_id: UUID,
        user_id: UUID,
        *,
        amount: Decimal,
        source: str,
        note: str | None,
        now: datetime,
    ) -> bool:
        """Append a contribution and advance the goal in one transaction.

        The increment is evaluated by the database against the row it locks,
        so concurrent contributions to the same goal never overwrite each
        other. Returns False when no active goal matched.
        """
        with self._guard("apply_contribution"):
            incremented = db.session.execute(
                update(Goal)
                .where(
                    Goal.id == goal_id,
                    Goal.user_id == user_id,
                    Goal.status == "active",
                )
                .values(current_amount=Goal.current_amount + amount, updated_at=now)
                .execution_options(synchronize_session=False)
            )
            if incremented.rowcount == 0:
                db.session.rollback()
                return False

            position = db.session.scalar(
                select(func.count(GoalContribution.id)).where(
                    GoalContribution.goal_id == goal_id
                )
            )
            db.session.add(
                GoalContribution(
                    goal_id=goal_id,
                    position=int(position or 0),
                    amount=amount,
                    source=source,
                    note=note,
                    contributed_at=now,
                )
            )
            db.session.execute(
                update(Goal)
                .where(
                    Goal.id == goal_id,
                    Goal.status == "active",
                    Goal.current_amount >= Goal.target_amount,
                )
                .values(status="completed", completed_at=now)
                .execution_options(synchronize_session=False)
            )
            current_amount = (
                select(Goal.current_amount).where(Goal.id == goal_id).scalar_subquery()
            )
            db.session.execute(
                update(GoalMilestone)
                .where(
                    GoalMilestone.goal_id == goal_id,
                    GoalMilestone.is_achieved.is_(False),
                    GoalMilestone.amount <= current_amount,
                )
                .values(is_achieved=True, achieved_at=now)
                .execution_options(synchronize_session=False)
            )
            db.session.commit()
        return True

    # Ledger entries --------------------------------------------------------

    def add_entry(self, entry: LedgerEntry) -> LedgerEntry:
        with self._guard("add_entry"):
            db.session.add(entry)
            db.session.commit()
        return entry

    def find_entry(self, entry_id: UUID, user_id: UUID) -> LedgerEntry | None:
        with self._guard("find_entry"):
            return cast(
                LedgerEntry | None,
                LedgerEntry.query.filter_by(id=entry_id, user_id=user_id).first(),
            )

    def add_entry_and_refresh(
        self, entry: LedgerEntry, *, now: datetime
    ) -> LedgerEntry:
        """Insert an entry and recompute its owner's aggregate in one commit."""
        with self._guard("add_entry"):
            db.session.add(entry)
            db.session.flush()
            self._stage_user_aggregate(entry.user_id, now=now)
            db.session.commit()
        return entry

    def delete_entry_and_refresh(self, entry: LedgerEntry, *, now: datetime) -> None:
        user_id = entry.user_id
        with self._guard("delete_entry"):
            db.session.delete(entry)
            db.session.flush()
            self._stage_user_aggregate(user_id, now=now)
            db.session.commit()

    def list_entries(
        self,
        user_id: UUID,
        *,
        page: int,
        per_page: int,
        entry_type: LedgerEntryType | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> tuple[list[LedgerEntry], dict[str, int]]:
        with self._guard("list_entries"):
            query = LedgerEntry.query.filter_by(user_id=user_id)
            if entry_type is not None:
                query = query.filter(LedgerEntry.entry_type == entry_type)
            if start_date is not None:
                query = query.filter(LedgerEntry.entry_date >= start_date)
            if end_date is not None:
                query = query.filter(LedgerEntry.entry_date <= end_date)
            pagination = query.order_by(
                LedgerEntry.entry_date.desc(), LedgerEntry.created_at.desc()
            ).paginate(page=page, per_page=per_page, error_out=False)
            return cast(list[LedgerEntry], pagination.items), {
                "total": int(pagination.total or 0),
                "page": int(pagination.page),
                "per_page": int(pagination.per_page),
                "pages": int(pagination.pages),
            }

    def sum_amounts(
        self,
        entry_type: LedgerEntryType,
        user_id: UUID,
        start: date | None = None,
        end: date | None = None,
    ) -> Decimal:
        """Sum entry amounts with `start <= entry_date < end`."""
        with self._guard("sum_amounts"):
            statement = select(func.sum(LedgerEntry.amount)).where(
                LedgerEntry.user_id == user_id,
                LedgerEntry.entry_type == entry_type,
            )
            if start is not None:
                statement = statement.where(LedgerEntry.entry_date >= start)
            if end is not None:
                statement = statement.where(LedgerEntry.entry_date < end)
            return to_decimal(db.session.scalar(statement))

    def list_entries_in_range(
        self,
        entry_types: Iterable[LedgerEntryType],
        user_id: UUID,
        start: date,
        end: date,
    ) -> list[LedgerEntry]:
        """Entries with `start <= entry_date < end`, oldest first."""
        with self._guard("list_entries_in_range"):
            return cast(
                list[LedgerEntry],
                LedgerEntry.query.filter(
                    LedgerEntry.user_id == user_id,
                    LedgerEntry.entry_type.in_(list(entry_types)),
                    LedgerEntry.entry_date >= start,
                    LedgerEntry.entry_date < end,
                )
                .order_by(LedgerEntry.entry_date.asc())
                .all(),
            )

    def has_entries(self, user_id: UUID) -> bool:
        with self._guard("has_entries"):
            return (
                db.session.scalar(
                    select(LedgerEntry.id).where(LedgerEntry.user_id == user_id).limit(1)
                )
                is not None
            )

    # Achievements ----------------------------------------------------------

    def list_achievements(self, user_id: UUID) -> list[UserAchievement]:
        with self._guard("list_achievements"):
            return cast(
                list[UserAchievement],
                UserAchievement.query.filter_by(user_id=user_id)
                .order_by(UserAchievement.earned_at.asc())
                .all(),
            )

    def append_achievements(
        self, user_id: UUID, records: list[UserAchievement]
    ) -> list[UserAchievement]:
        """Persist records in one commit, skipping ids the user already holds.

        A concurrent evaluation may insert the same id first; the unique
        constraint rejects the batch, held ids are reloaded and the
        remainder is written once more.
        """
        if not records:
            return []
        with self._guard("append_achievements"):
            try:
                db.session.add_all(records)
                db.session.commit()
                return records
            except IntegrityError:
                db.session.rollback()

            held = {
                achievement_id
                for (achievement_id,) in db.session.query(
                    UserAchievement.achievement_id
                ).filter(UserAchievement.user_id == user_id)
            }
            remaining = [
                _detached_copy(record)
                for record in records
                if record.achievement_id not in held
            ]
            if remaining:
                db.session.add_all(remaining)
                db.session.commit()
            return remaining

    def leaderboard(self, limit: int) -> list[dict[str, Any]]:
        with self._guard("leaderboard"):
            total_points = func.coalesce(func.sum(UserAchievement.points), 0).label(
                "total_points"
            )
            achievement_count = func.count(UserAchievement.id).label(
                "achievement_count"
            )
            rows = (
                db.session.query(User.id, User.name, total_points, achievement_count)
                .outerjoin(UserAchievement, UserAchievement.user_id == User.id)
                .group_by(User.id, User.name)
                .order_by(
                    total_points.desc(), achievement_count.desc(), User.name.asc()
                )
                .limit(limit)
                .all()
            )
            user_ids = [row.id for row in rows]
            latest: dict[UUID, str] = {}
            if user_ids:
                for record in (
                    UserAchievement.query.filter(UserAchievement.user_id.in_(user_ids))
                    .order_by(UserAchievement.earned_at.asc())
                    .all()
                ):
                    latest[record.user_id] = record.name

        return [
            {
                "user_id": str(row.id),
                "name": row.name,
                "achievement_count": int(row.achievement_count or 0),
                "total_points": int(row.total_points or 0),
                "last_achievement": latest.get(row.id),
            }
            for row in rows
        ]


def _detached_copy(record: UserAchievement) -> UserAchievement:
    return UserAchievement(
        user_id=record.user_id,
        achievement_id=record.achievement_id,
        name=record.name,
        description=record.description,
        category=record.category,
        icon=record.icon,
        points=record.points,
        earned_at=record.earned_at,
    )
