# mypy: disable-error-code=name-defined

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

from sqlalchemy.dialects.postgresql import UUID

from finance_tracker.extensions.database import db
from finance_tracker.utils.datetime_utils import utc_now_naive

GOAL_STATUSES = ("active", "completed", "paused", "cancelled")
GOAL_CATEGORIES = ("emergency", "vacation", "investment", "purchase", "other")
GOAL_PRIORITIES = ("low", "medium", "high")
CONTRIBUTION_SOURCES = ("manual", "automatic", "bonus")


class Goal(db.Model):
    __tablename__ = "goals"

    id = db.Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = db.Column(
        UUID(as_uuid=True),
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title = db.Column(db.String(128), nullable=False)
    description = db.Column(db.String(500), nullable=True)
    category = db.Column(db.String(24), nullable=False)

    target_amount = db.Column(db.Numeric(12, 2), nullable=False)
    current_amount = db.Column(
        db.Numeric(12, 2),
        nullable=False,
        default=Decimal("0"),
        server_default="0",
    )
    priority = db.Column(
        db.String(8), nullable=False, default="medium", server_default="medium"
    )
    target_date = db.Column(db.Date, nullable=False)
    status = db.Column(
        db.String(24),
        nullable=False,
        default="active",
        server_default="active",
    )
    completed_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, default=utc_now_naive, nullable=False)
    updated_at = db.Column(
        db.DateTime,
        default=utc_now_naive,
        onupdate=utc_now_naive,
        nullable=False,
    )

    milestones = db.relationship(
        "GoalMilestone",
        backref="goal",
        lazy=True,
        cascade="all, delete-orphan",
        order_by="GoalMilestone.amount",
    )
    contributions = db.relationship(
        "GoalContribution",
        backref="goal",
        lazy=True,
        cascade="all, delete-orphan",
        order_by="GoalContribution.position",
    )

    __table_args__ = (
        db.CheckConstraint("target_amount > 0", name="ck_goals_target_amount_pos"),
        db.CheckConstraint(
            "current_amount >= 0",
            name="ck_goals_current_amount_nonneg",
        ),
        db.Index("ix_goals_user_status", "user_id", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<Goal id={self.id} title={self.title!r} "
            f"target_amount={self.target_amount} status={self.status!r}>"
        )


class GoalMilestone(db.Model):
    __tablename__ = "goal_milestones"

    id = db.Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    goal_id = db.Column(
        UUID(as_uuid=True),
        db.ForeignKey("goals.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    description = db.Column(db.String(255), nullable=True)
    is_achieved = db.Column(
        db.Boolean, nullable=False, default=False, server_default=db.false()
    )
    achieved_at = db.Column(db.DateTime, nullable=True)

    __table_args__ = (
        db.CheckConstraint("amount > 0", name="ck_goal_milestones_amount_pos"),
    )


class GoalContribution(db.Model):
    __tablename__ = "goal_contributions"

    id = db.Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    goal_id = db.Column(
        UUID(as_uuid=True),
        db.ForeignKey("goals.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Insertion order; contributions are append-only
    position = db.Column(db.BigInteger, nullable=False, default=0)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    source = db.Column(
        db.String(16), nullable=False, default="manual", server_default="manual"
    )
    note = db.Column(db.String(255), nullable=True)
    contributed_at = db.Column(db.DateTime, default=utc_now_naive, nullable=False)

    __table_args__ = (
        db.CheckConstraint("amount > 0", name="ck_goal_contributions_amount_pos"),
    )
