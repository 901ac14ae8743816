"""ORM models used by the application infrastructure."""

from .audit_record import AuditRecordModel
from .notification import NotificationModel
from .notification_preference import NotificationPreferenceModel
from .player import PlayerModel

__all__ = [
    "AuditRecordModel",
    "NotificationModel",
    "NotificationPreferenceModel",
    "PlayerModel",
]
