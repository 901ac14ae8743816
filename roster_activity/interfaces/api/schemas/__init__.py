from .audit_record import AuditPageRead, AuditRecordRead
from .notification import (
    MarkAllReadResponse,
    NotificationPageRead,
    NotificationRead,
    PreferenceRead,
    PreferenceUpdate,
    UnreadCountRead,
)

__all__ = [
    "AuditPageRead",
    "AuditRecordRead",
    "MarkAllReadResponse",
    "NotificationPageRead",
    "NotificationRead",
    "PreferenceRead",
    "PreferenceUpdate",
    "UnreadCountRead",
]
