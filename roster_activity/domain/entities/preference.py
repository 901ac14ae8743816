"""Domain entity holding a user's notification preferences."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from datetime import datetime
from typing import Mapping

from roster_activity.domain.exceptions import InvalidPreferenceError

from .notification import NotificationCategory


@dataclass(frozen=True)
class PreferenceSet:
    """Independent boolean flags gating notification categories and channels.

    Every flag defaults to ``True`` so that a user without stored preferences
    receives everything.
    """

    owner_id: str
    transfer_updates: bool = True
    message_notifications: bool = True
    profile_changes: bool = True
    login_notifications: bool = True
    contract_updates: bool = True
    email_notifications: bool = True
    push_notifications: bool = True
    in_app_notifications: bool = True
    newsletter_subscription: bool = True
    updated_at: datetime | None = None

    @classmethod
    def flag_names(cls) -> tuple[str, ...]:
        return tuple(
            item.name for item in fields(cls) if item.name not in ("owner_id", "updated_at")
        )

    def as_flags(self) -> dict[str, bool]:
        return {name: getattr(self, name) for name in self.flag_names()}

    def merged(self, patch: Mapping[str, object]) -> "PreferenceSet":
        """Return a copy with ``patch`` applied.

        Raises :class:`InvalidPreferenceError` for unknown flags or values
        that are not booleans.
        """

        known = set(self.flag_names())
        changes: dict[str, bool] = {}
        for name, value in patch.items():
            if name not in known:
                raise InvalidPreferenceError(f"Unknown preference '{name}'")
            if not isinstance(value, bool):
                raise InvalidPreferenceError(f"Preference '{name}' must be a boolean")
            changes[name] = value
        return replace(self, **changes)


# Category flags; categories missing here are always delivered.
CATEGORY_PREFERENCE_FLAGS: dict[NotificationCategory, str] = {
    NotificationCategory.TRANSFER: "transfer_updates",
    NotificationCategory.MESSAGE: "message_notifications",
    NotificationCategory.PROFILE: "profile_changes",
    NotificationCategory.LOGIN: "login_notifications",
    NotificationCategory.CONTRACT: "contract_updates",
}

IN_APP_CHANNEL_FLAG = "in_app_notifications"


def governing_preference(category: str) -> str | None:
    """Return the preference flag gating ``category``, if any.

    Only exact category values are gated; unknown categories render as
    ``info`` and are never suppressed by a category flag.
    """

    normalized = (category or "").strip().lower()
    for known, flag in CATEGORY_PREFERENCE_FLAGS.items():
        if known.value == normalized:
            return flag
    return None


def blocking_preference(preferences: PreferenceSet, category: str) -> str | None:
    """Return the name of the disabled flag that blocks ``category``, or ``None``.

    Categories without a governing flag (``system``, ``warning``, ...) are
    always delivered, even with in-app notifications turned off.
    """

    flag = governing_preference(category)
    if flag is None:
        return None
    if not preferences.in_app_notifications:
        return IN_APP_CHANNEL_FLAG
    if not getattr(preferences, flag):
        return flag
    return None


__all__ = [
    "CATEGORY_PREFERENCE_FLAGS",
    "IN_APP_CHANNEL_FLAG",
    "PreferenceSet",
    "blocking_preference",
    "governing_preference",
]
