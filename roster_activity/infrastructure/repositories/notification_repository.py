"""Persistence helpers for notification entities."""

from __future__ import annotations

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from roster_activity.domain.entities import FeedCursor, Notification, NotificationPage
from roster_activity.infrastructure.models import NotificationModel
from roster_activity.utils import (
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class NotificationRepository:
    """Provide storage operations for :class:`Notification` objects.

    Feeds are ordered by ``created_at`` descending with the id as tie breaker,
    so a cursor taken from any page stays valid while new rows are inserted.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def insert(self, notification: Notification) -> Notification:
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def get(self, notification_id: int) -> Notification | None:
        model = self.session.get(NotificationModel, notification_id)
        return self._to_entity(model) if model else None

    def list_by_owner(
        self,
        owner_id: str,
        *,
        limit: int = 50,
        before: FeedCursor | None = None,
        category: str | None = None,
        unread_only: bool = False,
    ) -> NotificationPage:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.owner_id == owner_id
        )
        if category is not None:
            query = query.filter(NotificationModel.category == category)
        if unread_only:
            query = query.filter(NotificationModel.read.is_(False))
        if before is not None:
            boundary = ensure_app_naive_datetime(before.created_at)
            query = query.filter(
                or_(
                    NotificationModel.created_at < boundary,
                    and_(
                        NotificationModel.created_at == boundary,
                        NotificationModel.id < before.notification_id,
                    ),
                )
            )
        query = query.order_by(
            NotificationModel.created_at.desc(), NotificationModel.id.desc()
        )
        models = query.limit(limit + 1).all()

        items = [self._to_entity(model) for model in models[:limit]]
        next_cursor = None
        if len(models) > limit and items:
            next_cursor = FeedCursor.after(items[-1])
        return NotificationPage(items=items, next_cursor=next_cursor)

    def count_unread(self, owner_id: str) -> int:
        return (
            self.session.query(func.count(NotificationModel.id))
            .filter(NotificationModel.owner_id == owner_id)
            .filter(NotificationModel.read.is_(False))
            .scalar()
            or 0
        )

    def set_read(
        self, notification_id: int, read: bool, *, owner_id: str | None = None
    ) -> bool:
        """Update the read flag; returns ``False`` when no such record exists."""

        query = self.session.query(NotificationModel).filter(
            NotificationModel.id == notification_id
        )
        if owner_id is not None:
            query = query.filter(NotificationModel.owner_id == owner_id)
        updated = query.update(
            {NotificationModel.read: read}, synchronize_session=False
        )
        self.session.commit()
        return bool(updated)

    def set_all_read(self, owner_id: str) -> int:
        """Mark every unread notification of ``owner_id`` as read in one statement."""

        updated = (
            self.session.query(NotificationModel)
            .filter(NotificationModel.owner_id == owner_id)
            .filter(NotificationModel.read.is_(False))
            .update({NotificationModel.read: True}, synchronize_session=False)
        )
        self.session.commit()
        return int(updated or 0)

    def delete(self, notification_id: int, *, owner_id: str | None = None) -> bool:
        """Hard delete a notification; returns ``False`` when it was already gone."""

        query = self.session.query(NotificationModel).filter(
            NotificationModel.id == notification_id
        )
        if owner_id is not None:
            query = query.filter(NotificationModel.owner_id == owner_id)
        deleted = query.delete(synchronize_session=False)
        self.session.commit()
        return bool(deleted)

    @staticmethod
    def _apply_entity_to_model(
        model: NotificationModel, notification: Notification
    ) -> None:
        model.owner_id = notification.owner_id
        model.category = notification.category
        model.title = notification.title
        model.body = notification.body
        model.metadata_ = dict(notification.metadata or {})
        model.read = bool(notification.read)
        model.created_at = ensure_app_naive_datetime(
            notification.created_at or now_in_app_timezone()
        )

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        return Notification(
            id=model.id,
            owner_id=model.owner_id,
            category=model.category,
            title=model.title,
            body=model.body or "",
            metadata=dict(model.metadata_ or {}),
            read=bool(model.read),
            created_at=ensure_app_timezone(model.created_at),
        )


__all__ = ["NotificationRepository"]
