"""Per-owner push channel for newly inserted notifications."""

from __future__ import annotations

import asyncio
import inspect
import logging
import threading
from collections import defaultdict
from typing import Any, Awaitable, Callable, DefaultDict, Set, Union

from anyio import from_thread

from roster_activity.domain.entities import Notification

logger = logging.getLogger(__name__)

InsertCallback = Callable[[Notification], Union[None, Awaitable[None]]]


class Subscription:
    """Handle returned by :meth:`RealtimeChannel.subscribe`.

    Closing is idempotent and safe after the underlying connection dropped.
    """

    def __init__(
        self,
        channel: "RealtimeChannel",
        owner_id: str,
        callback: InsertCallback,
        loop: asyncio.AbstractEventLoop | None,
    ) -> None:
        self._channel = channel
        self.owner_id = owner_id
        self.callback = callback
        self.loop = loop
        self._closed = False

    @property
    def active(self) -> bool:
        return not self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._channel._remove(self)

    def unsubscribe(self) -> None:
        self.close()

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        state = "active" if self.active else "closed"
        return f"<Subscription owner={self.owner_id!r} {state}>"


class RealtimeChannel:
    """Fan out inserted notifications to the live subscriptions of their owner.

    There is no replay: a subscription only sees records published after it
    was opened. Async callbacks run on the event loop that was running when
    the subscription was created.
    """

    def __init__(self) -> None:
        self._subscriptions: DefaultDict[str, Set[Subscription]] = defaultdict(set)
        self._lock = threading.Lock()
        self._pending: Set[asyncio.Future[Any]] = set()

    def subscribe(self, owner_id: str, on_insert: InsertCallback) -> Subscription:
        try:
            loop: asyncio.AbstractEventLoop | None = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        subscription = Subscription(self, owner_id, on_insert, loop)
        with self._lock:
            self._subscriptions[owner_id].add(subscription)
        return subscription

    def subscriber_count(self, owner_id: str) -> int:
        with self._lock:
            return len(self._subscriptions.get(owner_id, ()))

    def publish(self, notification: Notification) -> int:
        """Deliver ``notification`` to its owner's subscriptions; returns how many were reached."""

        with self._lock:
            subscriptions = list(self._subscriptions.get(notification.owner_id, ()))
        for subscription in subscriptions:
            self._deliver(subscription, notification)
        return len(subscriptions)

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            subscriptions = self._subscriptions.get(subscription.owner_id)
            if subscriptions is None:
                return
            subscriptions.discard(subscription)
            if not subscriptions:
                self._subscriptions.pop(subscription.owner_id, None)

    def _deliver(self, subscription: Subscription, notification: Notification) -> None:
        if inspect.iscoroutinefunction(subscription.callback):
            self._schedule(subscription, notification)
            return
        try:
            subscription.callback(notification)
        except Exception:
            logger.exception(
                "Realtime subscriber for owner %s failed; closing it",
                subscription.owner_id,
            )
            subscription.close()

    def _schedule(self, subscription: Subscription, notification: Notification) -> None:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        target = subscription.loop
        if running is not None and (target is None or target is running):
            task = running.create_task(self._run_async(subscription, notification))
            self._track(task)
        elif target is not None and not target.is_closed():
            future = asyncio.run_coroutine_threadsafe(
                self._run_async(subscription, notification), target
            )
            self._track(future)
        else:
            try:
                from_thread.run(self._run_async, subscription, notification)
            except RuntimeError:
                logger.warning(
                    "No event loop available to deliver notification %s to owner %s",
                    notification.id,
                    subscription.owner_id,
                )

    async def _run_async(
        self, subscription: Subscription, notification: Notification
    ) -> None:
        if not subscription.active:
            return
        try:
            await subscription.callback(notification)  # type: ignore[misc]
        except Exception:
            logger.exception(
                "Realtime subscriber for owner %s failed; closing it",
                subscription.owner_id,
            )
            subscription.close()

    def _track(self, future: "asyncio.Future[Any]") -> None:
        self._pending.add(future)
        future.add_done_callback(self._pending.discard)


realtime_channel = RealtimeChannel()


__all__ = ["InsertCallback", "RealtimeChannel", "Subscription", "realtime_channel"]
