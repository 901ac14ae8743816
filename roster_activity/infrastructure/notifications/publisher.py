"""Utility helpers to push notifications to realtime subscribers."""

from __future__ import annotations

from typing import Any

from roster_activity.domain.entities import Notification, category_style

from .channel import RealtimeChannel, realtime_channel


class NotificationPublisher:
    """Serialize notifications and hand them to the realtime channel."""

    def __init__(self, channel: RealtimeChannel) -> None:
        self._channel = channel

    def dispatch(self, notification: Notification) -> int:
        """Deliver ``notification`` to its owner's live sessions."""

        return self._channel.publish(notification)

    @staticmethod
    def _serialize(notification: Notification) -> dict[str, Any]:
        style = category_style(notification.category)
        return {
            "id": notification.id,
            "owner_id": notification.owner_id,
            "category": notification.category,
            "display_category": notification.display_category.value,
            "icon": style.icon,
            "tone": style.tone,
            "title": notification.title,
            "body": notification.body,
            "metadata": notification.metadata or {},
            "read": notification.read,
            "created_at": notification.created_at.isoformat()
            if notification.created_at
            else None,
        }


notification_publisher = NotificationPublisher(realtime_channel)


def dispatch_notification(notification: Notification) -> int:
    """Public helper that delegates to the shared publisher instance."""

    return notification_publisher.dispatch(notification)


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the websocket payload representation for ``notification``."""

    return NotificationPublisher._serialize(notification)


__all__ = [
    "NotificationPublisher",
    "notification_publisher",
    "dispatch_notification",
    "serialize_notification",
]
