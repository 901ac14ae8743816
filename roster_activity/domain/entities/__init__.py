"""Domain entities exposed by the application."""

from .audit_record import (
    AuditAction,
    AuditFilters,
    AuditPage,
    AuditRecord,
    EntitySnapshot,
    action_tone,
)
from .feed import FeedCursor, NotificationPage
from .identity import Identity
from .notification import (
    CategoryStyle,
    MetadataValue,
    Notification,
    NotificationCategory,
    Suppressed,
    category_style,
    normalize_category,
    sanitize_metadata,
)
from .player import Player
from .preference import (
    CATEGORY_PREFERENCE_FLAGS,
    IN_APP_CHANNEL_FLAG,
    PreferenceSet,
    blocking_preference,
    governing_preference,
)

__all__ = [
    "AuditAction",
    "AuditFilters",
    "AuditPage",
    "AuditRecord",
    "CATEGORY_PREFERENCE_FLAGS",
    "CategoryStyle",
    "EntitySnapshot",
    "FeedCursor",
    "IN_APP_CHANNEL_FLAG",
    "Identity",
    "MetadataValue",
    "Notification",
    "NotificationCategory",
    "NotificationPage",
    "Player",
    "PreferenceSet",
    "Suppressed",
    "action_tone",
    "blocking_preference",
    "category_style",
    "governing_preference",
    "normalize_category",
    "sanitize_metadata",
]
