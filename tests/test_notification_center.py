"""Tests for the in-memory notification center."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import anyio
import pytest

from roster_activity.application.use_cases.notifications import (
    FeedStatus,
    NotificationCenter,
    SessionFeedGateway,
)
from roster_activity.domain.entities import Notification
from roster_activity.domain.exceptions import OperationInProgressError, TransientStoreError
from roster_activity.infrastructure.database import SessionLocal
from roster_activity.infrastructure.notifications import RealtimeChannel
from roster_activity.infrastructure.repositories import NotificationRepository

BASE_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _notification(notification_id, minutes=None, category="info", read=False, owner_id="user-1"):
    return Notification(
        id=notification_id,
        owner_id=owner_id,
        category=category,
        title=f"n{notification_id}",
        body="",
        read=read,
        created_at=BASE_TIME + timedelta(minutes=notification_id if minutes is None else minutes),
    )


class FakeGateway:
    """Gateway over a list, with switchable failures."""

    def __init__(self, records=None):
        self.records = list(records or [])
        self.fail_with: Exception | None = None
        self.on_load = None
        self.release: anyio.Event | None = None
        self.started = anyio.Event()

    async def load_page(self, owner_id, limit):
        if self.fail_with:
            raise self.fail_with
        if self.on_load:
            self.on_load()
        return sorted(self.records, key=lambda r: (r.created_at, r.id), reverse=True)[:limit]

    async def set_read(self, owner_id, notification_id, read):
        await self._checkpoint()
        for index, record in enumerate(self.records):
            if record.id == notification_id:
                record.read = read
                return True
        return False

    async def set_all_read(self, owner_id):
        await self._checkpoint()
        changed = [record for record in self.records if not record.read]
        for record in changed:
            record.read = True
        return len(changed)

    async def delete(self, owner_id, notification_id):
        await self._checkpoint()
        before = len(self.records)
        self.records = [record for record in self.records if record.id != notification_id]
        return len(self.records) != before

    async def _checkpoint(self):
        self.started.set()
        if self.release is not None:
            await self.release.wait()
        if self.fail_with:
            raise self.fail_with


def _stored():
    return [_notification(1, read=True), _notification(2), _notification(3, category="message")]


@pytest.mark.anyio
async def test_open_loads_newest_first_and_derives_unread_count():
    center = NotificationCenter("user-1", FakeGateway(_stored()))

    status = await center.open()

    assert status is FeedStatus.READY
    assert [record.id for record in center.records] == [3, 2, 1]
    assert center.unread_count == 2


@pytest.mark.anyio
async def test_pushed_duplicates_are_ignored():
    center = NotificationCenter("user-1", FakeGateway(_stored()))
    await center.open()

    assert center.receive(_notification(4)) is True
    assert center.receive(_notification(4)) is False
    assert center.receive(_notification(2)) is False
    assert [record.id for record in center.records] == [4, 3, 2, 1]
    assert center.unread_count == 3


@pytest.mark.anyio
async def test_pushes_for_other_owners_are_dropped():
    center = NotificationCenter("user-1", FakeGateway(_stored()))
    await center.open()

    assert center.receive(_notification(9, owner_id="someone-else")) is False
    assert len(center.records) == 3


@pytest.mark.anyio
async def test_pushes_during_loading_are_merged_after_the_load():
    gateway = FakeGateway(_stored())
    center = NotificationCenter("user-1", gateway)
    gateway.on_load = lambda: (center.receive(_notification(4)), center.receive(_notification(3)))

    await center.open()

    assert [record.id for record in center.records] == [4, 3, 2, 1]


@pytest.mark.anyio
async def test_out_of_order_push_is_inserted_by_creation_time():
    center = NotificationCenter("user-1", FakeGateway(_stored()))
    await center.open()

    center.receive(_notification(10, minutes=0))
    center.receive(_notification(11, minutes=2))

    assert [record.id for record in center.records] == [3, 11, 2, 1, 10]


@pytest.mark.anyio
async def test_filter_by_category():
    center = NotificationCenter("user-1", FakeGateway(_stored()))
    await center.open()

    assert [r.id for r in center.filter_by_category("unread")] == [3, 2]
    assert [r.id for r in center.filter_by_category("message")] == [3]
    assert [r.id for r in center.filter_by_category("transfer")] == []
    assert [r.id for r in center.filter_by_category("all")] == [3, 2, 1]


@pytest.mark.anyio
async def test_mark_read_then_unread_updates_count():
    gateway = FakeGateway(_stored())
    center = NotificationCenter("user-1", gateway)
    await center.open()

    await center.mark_read(2)
    assert center.unread_count == 1
    await center.mark_unread(1)
    assert center.unread_count == 2
    assert [record.read for record in gateway.records] == [False, True, False]


@pytest.mark.anyio
async def test_failed_mark_read_is_rolled_back():
    gateway = FakeGateway(_stored())
    center = NotificationCenter("user-1", gateway)
    await center.open()
    gateway.fail_with = TransientStoreError("Could not update notification")

    with pytest.raises(TransientStoreError):
        await center.mark_read(2)

    assert center.unread_count == 2
    assert not next(record for record in center.records if record.id == 2).read


@pytest.mark.anyio
async def test_mark_read_of_a_record_gone_from_the_store_drops_it_locally():
    gateway = FakeGateway(_stored())
    center = NotificationCenter("user-1", gateway)
    await center.open()
    gateway.records = [record for record in gateway.records if record.id != 2]

    assert await center.mark_read(2) is True
    assert [record.id for record in center.records] == [3, 1]


@pytest.mark.anyio
async def test_mark_all_read_returns_store_count():
    gateway = FakeGateway(_stored())
    center = NotificationCenter("user-1", gateway)
    await center.open()

    assert await center.mark_all_read() == 2
    assert center.unread_count == 0


@pytest.mark.anyio
async def test_failed_mark_all_read_restores_unread_records():
    gateway = FakeGateway(_stored())
    center = NotificationCenter("user-1", gateway)
    await center.open()
    gateway.fail_with = TransientStoreError("Could not mark notifications as read")

    with pytest.raises(TransientStoreError):
        await center.mark_all_read()

    assert center.unread_count == 2


@pytest.mark.anyio
async def test_second_mark_all_read_while_one_is_running_is_rejected():
    gateway = FakeGateway(_stored())
    center = NotificationCenter("user-1", gateway)
    await center.open()
    gateway.release = anyio.Event()
    results: list[int] = []

    async def first_call():
        results.append(await center.mark_all_read())

    async with anyio.create_task_group() as tg:
        tg.start_soon(first_call)
        await gateway.started.wait()
        with pytest.raises(OperationInProgressError):
            await center.mark_all_read()
        gateway.release.set()

    assert results == [2]
    assert center.unread_count == 0


@pytest.mark.anyio
async def test_delete_removes_locally_and_restores_on_failure():
    gateway = FakeGateway(_stored())
    center = NotificationCenter("user-1", gateway)
    await center.open()

    assert await center.delete(3) is True
    assert [record.id for record in center.records] == [2, 1]
    assert await center.delete(3) is True

    gateway.fail_with = TransientStoreError("Could not delete notification")
    with pytest.raises(TransientStoreError):
        await center.delete(2)
    assert [record.id for record in center.records] == [2, 1]


@pytest.mark.anyio
async def test_load_failure_enters_error_state_and_refresh_recovers():
    gateway = FakeGateway(_stored())
    gateway.fail_with = TransientStoreError("Could not load notifications")
    center = NotificationCenter("user-1", gateway)

    assert await center.open() is FeedStatus.ERROR
    assert center.error == "Could not load notifications"

    gateway.fail_with = None
    assert await center.refresh() is FeedStatus.READY
    assert center.error is None
    assert len(center.records) == 3


@pytest.mark.anyio
async def test_realtime_pushes_reach_the_center_and_listener():
    channel = RealtimeChannel()
    inserted: list[int] = []

    async def on_insert(notification):
        inserted.append(notification.id)

    center = NotificationCenter(
        "user-1", FakeGateway(_stored()), channel=channel, on_insert=on_insert
    )
    await center.open()

    channel.publish(_notification(4))
    channel.publish(_notification(4))
    for _ in range(5):
        await anyio.sleep(0)

    assert inserted == [4]
    assert center.unread_count == 3

    center.close()
    center.close()
    assert channel.subscriber_count("user-1") == 0


@pytest.mark.anyio
async def test_session_gateway_runs_against_the_database(session):
    repository = NotificationRepository(session)
    for minutes in range(3):
        repository.insert(_notification(None, minutes=minutes))
    center = NotificationCenter("user-1", SessionFeedGateway(SessionLocal), page_size=2)

    await center.open()
    newest = center.records[0]
    await center.mark_read(newest.id)

    assert len(center.records) == 2
    assert center.unread_count == 1
    assert repository.count_unread("user-1") == 2
