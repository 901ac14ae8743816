"""Aggregate application use cases."""

from .audit import AuditLogger
from .notifications import EventEmitter, NotificationCenter
from .preferences import get_preferences, update_preferences

__all__ = [
    "AuditLogger",
    "EventEmitter",
    "NotificationCenter",
    "get_preferences",
    "update_preferences",
]
