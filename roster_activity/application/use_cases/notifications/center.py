"""Session-side aggregation of a notification feed.

A :class:`NotificationCenter` merges the initial page loaded from the store
with realtime pushes and exposes the operations a client may perform on its
feed. Mutations are applied locally first and confirmed against the store;
when the confirmation fails the local change is reverted and the error is
raised to the caller.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import replace
from enum import Enum
from functools import partial
from typing import Any, Awaitable, Callable, Protocol, Union

from anyio import to_thread
from sqlalchemy.orm import Session, sessionmaker

from roster_activity.domain.entities import Notification
from roster_activity.domain.exceptions import (
    OperationInProgressError,
    TransientStoreError,
)
from roster_activity.infrastructure.notifications import RealtimeChannel, Subscription

from .feed import (
    FILTER_ALL,
    FILTER_UNREAD,
    delete_notification,
    list_notifications,
    mark_all_notifications_read,
    set_notification_read,
)

logger = logging.getLogger(__name__)

InsertListener = Callable[[Notification], Union[None, Awaitable[None]]]


class FeedStatus(str, Enum):
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


class FeedGateway(Protocol):
    """Store access used by :class:`NotificationCenter`."""

    async def load_page(self, owner_id: str, limit: int) -> list[Notification]:
        ...

    async def set_read(self, owner_id: str, notification_id: int, read: bool) -> bool:
        ...

    async def set_all_read(self, owner_id: str) -> int:
        ...

    async def delete(self, owner_id: str, notification_id: int) -> bool:
        ...


class SessionFeedGateway:
    """Run the feed use cases in a worker thread, one short-lived session per call."""

    def __init__(self, session_factory: sessionmaker | Callable[[], Session]) -> None:
        self._session_factory = session_factory

    async def load_page(self, owner_id: str, limit: int) -> list[Notification]:
        page = await self._run(list_notifications, owner_id=owner_id, limit=limit)
        return list(page.items)

    async def set_read(self, owner_id: str, notification_id: int, read: bool) -> bool:
        return await self._run(
            set_notification_read,
            owner_id=owner_id,
            notification_id=notification_id,
            read=read,
        )

    async def set_all_read(self, owner_id: str) -> int:
        return await self._run(mark_all_notifications_read, owner_id=owner_id)

    async def delete(self, owner_id: str, notification_id: int) -> bool:
        return await self._run(
            delete_notification, owner_id=owner_id, notification_id=notification_id
        )

    async def _run(self, use_case: Callable[..., Any], **kwargs: Any) -> Any:
        return await to_thread.run_sync(partial(self._call, use_case, **kwargs))

    def _call(self, use_case: Callable[..., Any], **kwargs: Any) -> Any:
        session = self._session_factory()
        try:
            return use_case(session, **kwargs)
        finally:
            session.close()


def _sort_key(notification: Notification) -> tuple[float, int]:
    created = notification.created_at.timestamp() if notification.created_at else float("-inf")
    return created, notification.id or 0


class NotificationCenter:
    """In-memory merged feed for one owner's session.

    ``unread_count`` is always derived from the merged records.
    """

    def __init__(
        self,
        owner_id: str,
        gateway: FeedGateway,
        *,
        channel: RealtimeChannel | None = None,
        page_size: int = 50,
        on_insert: InsertListener | None = None,
    ) -> None:
        self.owner_id = owner_id
        self.status = FeedStatus.LOADING
        self.error: str | None = None
        self.active_filter = FILTER_ALL
        self._gateway = gateway
        self._channel = channel
        self._page_size = page_size
        self._on_insert = on_insert
        self._records: list[Notification] = []
        self._pending: list[Notification] = []
        self._versions: dict[int, int] = {}
        self._subscription: Subscription | None = None
        self._mark_all_in_flight = False

    @property
    def records(self) -> tuple[Notification, ...]:
        return tuple(self._records)

    @property
    def unread_count(self) -> int:
        return sum(1 for record in self._records if not record.read)

    @property
    def visible(self) -> list[Notification]:
        return self._apply_filter(self.active_filter)

    async def open(self) -> FeedStatus:
        """Subscribe to pushes and load the first page.

        The subscription is opened first so nothing inserted during the load
        is missed; duplicates are dropped by id.
        """

        if self._channel is not None and self._subscription is None:
            self._subscription = self._channel.subscribe(self.owner_id, self._handle_push)
        return await self.refresh()

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.close()

    async def refresh(self) -> FeedStatus:
        """(Re)load the first page; failures leave the center in ``ERROR``."""

        self.status = FeedStatus.LOADING
        self.error = None
        try:
            page = await self._gateway.load_page(self.owner_id, self._page_size)
        except TransientStoreError as exc:
            logger.warning("Loading notifications for %s failed: %s", self.owner_id, exc)
            self.status = FeedStatus.ERROR
            self.error = str(exc) or "Could not load notifications"
            return self.status

        self._records = []
        for record in page:
            self._merge(record)
        pending, self._pending = self._pending, []
        for record in pending:
            self._merge(record)
        self.status = FeedStatus.READY
        return self.status

    def receive(self, notification: Notification) -> bool:
        """Merge a pushed record; returns ``True`` when it was new to the feed."""

        if notification.owner_id != self.owner_id:
            return False
        if self.status is not FeedStatus.READY:
            self._pending.append(notification)
            return False
        return self._merge(notification)

    def filter_by_category(self, value: str) -> list[Notification]:
        """Select ``"all"``, ``"unread"`` or a category and return the visible records."""

        self.active_filter = (value or FILTER_ALL).strip().lower()
        return self.visible

    async def mark_read(self, notification_id: int) -> bool:
        return await self._set_read(notification_id, True)

    async def mark_unread(self, notification_id: int) -> bool:
        return await self._set_read(notification_id, False)

    async def mark_all_read(self) -> int:
        """Mark every unread record as read; returns the number the store changed.

        Only one call may run at a time for this center.
        """

        if self._mark_all_in_flight:
            raise OperationInProgressError("Mark all as read is already running")
        self._mark_all_in_flight = True
        try:
            changed = {
                record.id: self._bump(record.id)
                for record in self._records
                if not record.read and record.id is not None
            }
            for notification_id in changed:
                self._replace(notification_id, read=True)
            try:
                return await self._gateway.set_all_read(self.owner_id)
            except Exception:
                for notification_id, version in changed.items():
                    if self._versions.get(notification_id) == version:
                        self._replace(notification_id, read=False)
                raise
        finally:
            self._mark_all_in_flight = False

    async def delete(self, notification_id: int) -> bool:
        """Remove a record; an already deleted record counts as success."""

        removed = self._find(notification_id)
        version = self._bump(notification_id)
        if removed is not None:
            self._records.remove(removed)
        try:
            await self._gateway.delete(self.owner_id, notification_id)
        except Exception:
            if (
                removed is not None
                and self._versions.get(notification_id) == version
                and self._find(notification_id) is None
            ):
                self._insert_sorted(removed)
            raise
        return True

    async def _handle_push(self, notification: Notification) -> None:
        if not self.receive(notification) or self._on_insert is None:
            return
        result = self._on_insert(notification)
        if inspect.isawaitable(result):
            await result

    async def _set_read(self, notification_id: int, read: bool) -> bool:
        current = self._find(notification_id)
        previous = current.read if current is not None else None
        version = self._bump(notification_id)
        if current is not None:
            self._replace(notification_id, read=read)
        try:
            found = await self._gateway.set_read(self.owner_id, notification_id, read)
        except Exception:
            if previous is not None and self._versions.get(notification_id) == version:
                self._replace(notification_id, read=previous)
            raise
        if not found and self._versions.get(notification_id) == version:
            # Gone from the store, so the local copy is stale.
            stale = self._find(notification_id)
            if stale is not None:
                self._records.remove(stale)
        return True

    def _merge(self, notification: Notification) -> bool:
        if notification.id is not None and self._find(notification.id) is not None:
            return False
        self._insert_sorted(notification)
        return True

    def _insert_sorted(self, notification: Notification) -> None:
        key = _sort_key(notification)
        for index, existing in enumerate(self._records):
            if _sort_key(existing) < key:
                self._records.insert(index, notification)
                return
        self._records.append(notification)

    def _find(self, notification_id: int) -> Notification | None:
        for record in self._records:
            if record.id == notification_id:
                return record
        return None

    def _replace(self, notification_id: int, **changes: Any) -> None:
        for index, record in enumerate(self._records):
            if record.id == notification_id:
                self._records[index] = replace(record, **changes)
                return

    def _bump(self, notification_id: int) -> int:
        version = self._versions.get(notification_id, 0) + 1
        self._versions[notification_id] = version
        return version

    def _apply_filter(self, value: str) -> list[Notification]:
        if value == FILTER_ALL:
            return list(self._records)
        if value == FILTER_UNREAD:
            return [record for record in self._records if not record.read]
        return [record for record in self._records if record.category == value]


__all__ = [
    "FeedGateway",
    "FeedStatus",
    "InsertListener",
    "NotificationCenter",
    "SessionFeedGateway",
]
