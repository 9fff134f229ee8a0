import enum
from uuid import uuid4

from sqlalchemy.dialects.postgresql import UUID

from finance_tracker.extensions.database import db
from finance_tracker.utils.datetime_utils import utc_now_naive


class LedgerEntryType(enum.Enum):
    INCOME = "income"
    EXPENSE = "expense"


INCOME_CATEGORIES = ("salary", "freelance", "investment", "business", "other")


class LedgerEntry(db.Model):
    __tablename__ = "ledger_entries"

    id = db.Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = db.Column(
        UUID(as_uuid=True),
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    entry_type = db.Column(db.Enum(LedgerEntryType), nullable=False)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    category = db.Column(db.String(64), nullable=False)
    description = db.Column(db.String(255))
    entry_date = db.Column(db.Date, nullable=False)

    created_at = db.Column(db.DateTime, default=utc_now_naive, nullable=False)

    __table_args__ = (
        db.CheckConstraint("amount > 0", name="ck_ledger_entries_amount_pos"),
        db.Index("ix_ledger_entries_user_type_date", "user_id", "entry_type", "entry_date"),
    )

    def __repr__(self) -> str:
        return (
            f"<LedgerEntry(id={self.id}, type={self.entry_type}, "
            f"amount={self.amount}, entry_date={self.entry_date})>"
        )
