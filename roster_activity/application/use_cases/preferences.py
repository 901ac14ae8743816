"""Use cases for reading and updating notification preferences."""

from __future__ import annotations

from typing import Mapping

from sqlalchemy.orm import Session

from roster_activity.domain.entities import PreferenceSet
from roster_activity.infrastructure.database import store_operation
from roster_activity.infrastructure.repositories import NotificationPreferenceRepository


def get_preferences(session: Session, owner_id: str) -> PreferenceSet:
    """Return the stored preferences or the all-enabled defaults.

    Reading never creates a row.
    """

    with store_operation(session, "load notification preferences"):
        stored = NotificationPreferenceRepository(session).get(owner_id)
    return stored if stored is not None else PreferenceSet(owner_id=owner_id)


def update_preferences(
    session: Session, owner_id: str, patch: Mapping[str, object]
) -> PreferenceSet:
    """Merge ``patch`` into the owner's preferences and persist the result."""

    current = get_preferences(session, owner_id)
    merged = current.merged(patch)
    with store_operation(session, "save notification preferences"):
        return NotificationPreferenceRepository(session).save(merged)


__all__ = ["get_preferences", "update_preferences"]
