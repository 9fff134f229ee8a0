"""Achievements earned by a user, one row per (user, achievement) pair."""

from uuid import uuid4

from sqlalchemy.dialects.postgresql import UUID

from finance_tracker.extensions.database import db
from finance_tracker.utils.datetime_utils import utc_now_naive


class UserAchievement(db.Model):
    """Write-once snapshot of a catalog entry at the moment it was earned."""

    __tablename__ = "user_achievements"
    __table_args__ = (
        db.UniqueConstraint("user_id", "achievement_id", name="uq_user_achievement"),
    )

    id = db.Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = db.Column(
        UUID(as_uuid=True),
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    achievement_id = db.Column(db.Integer, nullable=False)
    name = db.Column(db.String(128), nullable=False)
    description = db.Column(db.String(255), nullable=False)
    category = db.Column(db.String(24), nullable=False)
    icon = db.Column(db.String(16), nullable=False)
    points = db.Column(db.Integer, nullable=False, default=0)
    earned_at = db.Column(db.DateTime, default=utc_now_naive, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<UserAchievement user_id={self.user_id} "
            f"achievement_id={self.achievement_id}>"
        )
