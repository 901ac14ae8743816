"""Public helpers for emitting and consuming notifications."""

from .center import (
    FeedGateway,
    FeedStatus,
    NotificationCenter,
    SessionFeedGateway,
)
from .emitter import EventEmitter, emit_best_effort, emit_notification
from .events import (
    notify_login_succeeded,
    notify_message_received,
    notify_player_removed,
    notify_profile_changed,
    notify_transfer_interest,
)
from .feed import (
    FILTER_ALL,
    FILTER_UNREAD,
    count_unread,
    delete_notification,
    list_notifications,
    mark_all_notifications_read,
    set_notification_read,
)

__all__ = [
    "EventEmitter",
    "emit_best_effort",
    "emit_notification",
    "FeedGateway",
    "FeedStatus",
    "NotificationCenter",
    "SessionFeedGateway",
    "notify_login_succeeded",
    "notify_message_received",
    "notify_player_removed",
    "notify_profile_changed",
    "notify_transfer_interest",
    "FILTER_ALL",
    "FILTER_UNREAD",
    "count_unread",
    "delete_notification",
    "list_notifications",
    "mark_all_notifications_read",
    "set_notification_read",
]
