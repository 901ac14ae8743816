"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, StrictBool

from roster_activity.domain.entities import MetadataValue


class NotificationRead(BaseModel):
    """Representation of a notification delivered to the client."""

    id: int
    owner_id: str
    category: str
    display_category: str = Field(description="Category used for rendering; unknown values map to 'info'")
    icon: str
    tone: str
    title: str
    body: str
    metadata: dict[str, MetadataValue] = Field(default_factory=dict)
    read: bool
    created_at: datetime


class NotificationPageRead(BaseModel):
    items: list[NotificationRead]
    next_cursor: str | None = None
    unread_count: int


class UnreadCountRead(BaseModel):
    unread_count: int


class MarkAllReadResponse(BaseModel):
    affected: int = Field(description="Number of notifications that changed to read")


class PreferenceRead(BaseModel):
    """Notification preferences of the authenticated user."""

    transfer_updates: bool
    message_notifications: bool
    profile_changes: bool
    login_notifications: bool
    contract_updates: bool
    email_notifications: bool
    push_notifications: bool
    in_app_notifications: bool
    newsletter_subscription: bool
    updated_at: datetime | None = None


class PreferenceUpdate(BaseModel):
    """Partial patch; omitted flags keep their current value."""

    model_config = ConfigDict(extra="forbid")

    transfer_updates: StrictBool | None = None
    message_notifications: StrictBool | None = None
    profile_changes: StrictBool | None = None
    login_notifications: StrictBool | None = None
    contract_updates: StrictBool | None = None
    email_notifications: StrictBool | None = None
    push_notifications: StrictBool | None = None
    in_app_notifications: StrictBool | None = None
    newsletter_subscription: StrictBool | None = None

    def changes(self) -> dict[str, bool]:
        return self.model_dump(exclude_none=True)


__all__ = [
    "MarkAllReadResponse",
    "NotificationPageRead",
    "NotificationRead",
    "PreferenceRead",
    "PreferenceUpdate",
    "UnreadCountRead",
]
