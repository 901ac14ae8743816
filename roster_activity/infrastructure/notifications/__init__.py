"""Realtime notification helpers for the infrastructure layer."""

from .channel import InsertCallback, RealtimeChannel, Subscription, realtime_channel
from .publisher import (
    NotificationPublisher,
    dispatch_notification,
    notification_publisher,
    serialize_notification,
)

__all__ = [
    "InsertCallback",
    "RealtimeChannel",
    "Subscription",
    "realtime_channel",
    "NotificationPublisher",
    "notification_publisher",
    "dispatch_notification",
    "serialize_notification",
]
