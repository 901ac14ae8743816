"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, JSON, String, Text
from sqlalchemy.sql import expression

from roster_activity.infrastructure.database import Base
from roster_activity.utils import now_in_app_naive_datetime


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_owner_created", "owner_id", "created_at", "id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(String(64), nullable=False, index=True)
    category = Column(String(50), nullable=False, default="system")
    title = Column(String(200), nullable=False)
    body = Column(Text, nullable=False, default="")
    metadata_ = Column("metadata", JSON, nullable=False, default=dict)
    read = Column(
        Boolean,
        nullable=False,
        default=False,
        server_default=expression.false(),
    )
    created_at = Column(DateTime(), nullable=False, default=now_in_app_naive_datetime)


__all__ = ["NotificationModel"]
