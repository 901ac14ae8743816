"""SQLAlchemy model for per-user notification preferences."""

from sqlalchemy import Boolean, Column, DateTime, String
from sqlalchemy.sql import expression

from roster_activity.infrastructure.database import Base
from roster_activity.utils import now_in_app_naive_datetime


def _flag() -> Column:
    return Column(Boolean, nullable=False, default=True, server_default=expression.true())


class NotificationPreferenceModel(Base):
    """One row per user; missing rows mean every flag is enabled."""

    __tablename__ = "notification_preference"

    owner_id = Column(String(64), primary_key=True)
    transfer_updates = _flag()
    message_notifications = _flag()
    profile_changes = _flag()
    login_notifications = _flag()
    contract_updates = _flag()
    email_notifications = _flag()
    push_notifications = _flag()
    in_app_notifications = _flag()
    newsletter_subscription = _flag()
    updated_at = Column(
        DateTime(),
        nullable=False,
        default=now_in_app_naive_datetime,
        onupdate=now_in_app_naive_datetime,
    )


__all__ = ["NotificationPreferenceModel"]
