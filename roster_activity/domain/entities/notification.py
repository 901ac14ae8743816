"""Domain entities describing user notifications."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Union

MetadataValue = Union[str, int, float, bool, None]


class NotificationCategory(str, Enum):
    """Known notification categories.

    Stored categories stay open-ended; values outside this set are rendered
    as :attr:`INFO`.
    """

    TRANSFER = "transfer"
    MESSAGE = "message"
    PROFILE = "profile"
    CONTRACT = "contract"
    LOGIN = "login"
    SYSTEM = "system"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    INFO = "info"

    @classmethod
    def parse(cls, value: str | None) -> "NotificationCategory":
        """Return the category for ``value`` or :attr:`INFO` when unknown."""

        if isinstance(value, cls):
            return value
        normalized = (value or "").strip().lower()
        for category in cls:
            if category.value == normalized:
                return category
        return cls.INFO


@dataclass(frozen=True)
class CategoryStyle:
    """Presentation hint attached to a notification category."""

    icon: str
    tone: str


_CATEGORY_STYLES: dict[NotificationCategory, CategoryStyle] = {
    NotificationCategory.TRANSFER: CategoryStyle(icon="arrow-left-right", tone="green"),
    NotificationCategory.MESSAGE: CategoryStyle(icon="message-square", tone="blue"),
    NotificationCategory.PROFILE: CategoryStyle(icon="user", tone="purple"),
    NotificationCategory.CONTRACT: CategoryStyle(icon="file-text", tone="yellow"),
    NotificationCategory.LOGIN: CategoryStyle(icon="log-in", tone="gray"),
    NotificationCategory.SYSTEM: CategoryStyle(icon="settings", tone="gray"),
    NotificationCategory.SUCCESS: CategoryStyle(icon="check-circle", tone="green"),
    NotificationCategory.WARNING: CategoryStyle(icon="alert-triangle", tone="yellow"),
    NotificationCategory.ERROR: CategoryStyle(icon="x-circle", tone="red"),
}
_DEFAULT_STYLE = CategoryStyle(icon="info", tone="blue")


def category_style(category: str | None) -> CategoryStyle:
    """Return the display style for ``category``; unknown values get the info style."""

    return _CATEGORY_STYLES.get(NotificationCategory.parse(category), _DEFAULT_STYLE)


def normalize_category(category: str | None) -> str:
    """Return the stored form of ``category``.

    Known categories map to their enum value; anything else is kept as its
    stripped, lower-cased text so filters match it exactly.
    """

    normalized = (category or "").strip().lower()
    parsed = NotificationCategory.parse(normalized)
    if parsed.value == normalized:
        return parsed.value
    return normalized


def sanitize_metadata(raw: Mapping[str, Any] | None) -> dict[str, MetadataValue]:
    """Coerce an arbitrary payload into a string to primitive map.

    Nested or otherwise non primitive values are stored as their string form.
    """

    if not raw:
        return {}
    cleaned: dict[str, MetadataValue] = {}
    for key, value in raw.items():
        if value is None or isinstance(value, (str, int, float, bool)):
            cleaned[str(key)] = value
        elif isinstance(value, datetime):
            cleaned[str(key)] = value.isoformat()
        else:
            cleaned[str(key)] = str(value)
    return cleaned


@dataclass
class Notification:
    """Message delivered to a specific user's feed."""

    id: int | None
    owner_id: str
    category: str
    title: str
    body: str
    metadata: dict[str, MetadataValue] = field(default_factory=dict)
    read: bool = False
    created_at: datetime | None = None

    @property
    def display_category(self) -> NotificationCategory:
        return NotificationCategory.parse(self.category)

    def metadata_text(self, key: str, default: str = "") -> str:
        """Return ``metadata[key]`` as text, or ``default`` when missing."""

        value = (self.metadata or {}).get(key)
        if value is None:
            return default
        return str(value)


@dataclass(frozen=True)
class Suppressed:
    """Outcome of an emission declined by the owner's preferences."""

    owner_id: str
    category: str
    preference: str


__all__ = [
    "CategoryStyle",
    "MetadataValue",
    "Notification",
    "NotificationCategory",
    "Suppressed",
    "category_style",
    "normalize_category",
    "sanitize_metadata",
]
