"""Repository implementations for infrastructure layer."""

from .audit_record_repository import AuditRecordRepository
from .notification_preference_repository import NotificationPreferenceRepository
from .notification_repository import NotificationRepository
from .player_repository import PlayerRepository

__all__ = [
    "AuditRecordRepository",
    "NotificationPreferenceRepository",
    "NotificationRepository",
    "PlayerRepository",
]
