"""Use cases operating on an owner's notification feed."""

from __future__ import annotations

import threading

from sqlalchemy.orm import Session

from roster_activity.domain.entities import FeedCursor, NotificationPage
from roster_activity.domain.exceptions import OperationInProgressError
from roster_activity.infrastructure.database import store_operation
from roster_activity.infrastructure.repositories import NotificationRepository

FILTER_ALL = "all"
FILTER_UNREAD = "unread"

_mark_all_lock = threading.Lock()
_mark_all_in_flight: set[str] = set()


def list_notifications(
    session: Session,
    *,
    owner_id: str,
    limit: int,
    cursor: FeedCursor | None = None,
    view: str = FILTER_ALL,
) -> NotificationPage:
    """Return one page of the owner's feed, newest first.

    ``view`` is ``"all"``, ``"unread"`` or a category value.
    """

    category = None if view in (FILTER_ALL, FILTER_UNREAD) else view
    with store_operation(session, "load notifications"):
        return NotificationRepository(session).list_by_owner(
            owner_id,
            limit=limit,
            before=cursor,
            category=category,
            unread_only=view == FILTER_UNREAD,
        )


def count_unread(session: Session, *, owner_id: str) -> int:
    with store_operation(session, "count unread notifications"):
        return NotificationRepository(session).count_unread(owner_id)


def set_notification_read(
    session: Session, *, owner_id: str, notification_id: int, read: bool = True
) -> bool:
    """Set the read flag; a missing record is a successful no-op returning ``False``."""

    with store_operation(session, "update notification"):
        return NotificationRepository(session).set_read(
            notification_id, read, owner_id=owner_id
        )


def mark_all_notifications_read(session: Session, *, owner_id: str) -> int:
    """Mark the owner's unread notifications as read and return how many changed.

    Raises :class:`OperationInProgressError` when another call for the same
    owner has not finished yet.
    """

    with _mark_all_lock:
        if owner_id in _mark_all_in_flight:
            raise OperationInProgressError("Mark all as read is already running")
        _mark_all_in_flight.add(owner_id)
    try:
        with store_operation(session, "mark notifications as read"):
            return NotificationRepository(session).set_all_read(owner_id)
    finally:
        with _mark_all_lock:
            _mark_all_in_flight.discard(owner_id)


def delete_notification(
    session: Session, *, owner_id: str, notification_id: int
) -> bool:
    """Hard delete; deleting an absent record is a successful no-op returning ``False``."""

    with store_operation(session, "delete notification"):
        return NotificationRepository(session).delete(notification_id, owner_id=owner_id)


__all__ = [
    "FILTER_ALL",
    "FILTER_UNREAD",
    "count_unread",
    "delete_notification",
    "list_notifications",
    "mark_all_notifications_read",
    "set_notification_read",
]
