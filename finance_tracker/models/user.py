# mypy: disable-error-code=name-defined

import uuid
from decimal import Decimal

from sqlalchemy.dialects.postgresql import UUID

from finance_tracker.extensions.database import db
from finance_tracker.utils.datetime_utils import utc_now_naive


class User(db.Model):
    __tablename__ = "users"
    id = db.Column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False
    )
    name = db.Column(db.String(128), nullable=False)
    email = db.Column(db.String(128), nullable=False, unique=True)
    password = db.Column(db.String(256), nullable=False)
    created_at = db.Column(db.DateTime, default=utc_now_naive)
    updated_at = db.Column(db.DateTime, default=utc_now_naive, onupdate=utc_now_naive)
    current_jti = db.Column(db.String(128), nullable=True)

    # Financial aggregate, recomputed after every income/expense mutation
    total_income = db.Column(
        db.Numeric(14, 2), nullable=False, default=Decimal("0"), server_default="0"
    )
    total_expenses = db.Column(
        db.Numeric(14, 2), nullable=False, default=Decimal("0"), server_default="0"
    )
    current_balance = db.Column(
        db.Numeric(14, 2), nullable=False, default=Decimal("0"), server_default="0"
    )
    savings_rate = db.Column(
        db.Numeric(7, 2), nullable=False, default=Decimal("0"), server_default="0"
    )
    summary_updated_at = db.Column(db.DateTime, nullable=True)

    goals = db.relationship(
        "Goal",
        backref="user",
        lazy=True,
        cascade="all, delete-orphan",
    )
    ledger_entries = db.relationship(
        "LedgerEntry",
        backref="user",
        lazy=True,
        cascade="all, delete-orphan",
    )
    achievements = db.relationship(
        "UserAchievement",
        backref="user",
        lazy=True,
        cascade="all, delete-orphan",
        order_by="UserAchievement.earned_at",
    )

    def __repr__(self) -> str:
        return f"<User {self.name}>"
