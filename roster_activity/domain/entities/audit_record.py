"""Domain entities for the activity audit trail."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any


class AuditAction(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str | None) -> "AuditAction":
        normalized = (value or "").strip().lower()
        for action in cls:
            if action.value == normalized:
                return action
        return cls.UNKNOWN


_ACTION_TONES: dict[AuditAction, str] = {
    AuditAction.CREATED: "green",
    AuditAction.UPDATED: "blue",
    AuditAction.DELETED: "red",
}


def action_tone(action: str | None) -> str:
    """Return the color hint for ``action``; unknown actions are gray."""

    return _ACTION_TONES.get(AuditAction.parse(action), "gray")


@dataclass(frozen=True)
class EntitySnapshot:
    """Identifying fields of a tracked entity captured at write time."""

    entity_id: str | None
    entity_name: str
    entity_type: str = "player"
    fields: dict[str, Any] = field(default_factory=dict)


@dataclass
class AuditRecord:
    """Immutable line in a scope's activity history.

    ``is_orphaned`` is computed when the record is read and only tells the
    presentation layer that the referenced entity no longer exists.
    """

    id: int | None
    team_scope: str
    entity_type: str
    entity_id: str | None
    entity_name: str
    action: str
    performed_by: str | None
    performed_at: datetime | None
    details: str = ""
    snapshot: dict[str, Any] = field(default_factory=dict)
    is_orphaned: bool = False


@dataclass(frozen=True)
class AuditFilters:
    search: str | None = None
    on_date: date | None = None


@dataclass
class AuditPage:
    records: list[AuditRecord]
    page: int
    page_size: int
    total: int

    @property
    def has_more(self) -> bool:
        return self.page * self.page_size < self.total


__all__ = [
    "AuditAction",
    "AuditFilters",
    "AuditPage",
    "AuditRecord",
    "EntitySnapshot",
    "action_tone",
]
