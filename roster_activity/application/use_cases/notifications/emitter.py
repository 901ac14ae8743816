"""Single write path for new notifications."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from sqlalchemy.orm import Session

from roster_activity.application.use_cases.preferences import get_preferences
from roster_activity.domain.entities import (
    Notification,
    PreferenceSet,
    Suppressed,
    blocking_preference,
    normalize_category,
    sanitize_metadata,
)
from roster_activity.domain.exceptions import TransientStoreError
from roster_activity.infrastructure.database import store_operation
from roster_activity.infrastructure.notifications import (
    NotificationPublisher,
    notification_publisher,
)
from roster_activity.infrastructure.repositories import NotificationRepository
from roster_activity.utils import now_in_app_timezone

logger = logging.getLogger(__name__)


class EventEmitter:
    """Write notifications allowed by the owner's preferences and push them live."""

    def __init__(
        self,
        session: Session,
        *,
        publisher: NotificationPublisher | None = None,
    ) -> None:
        self.session = session
        self._publisher = publisher or notification_publisher

    def emit(
        self,
        category: str,
        owner_id: str,
        title: str,
        body: str,
        metadata: Mapping[str, Any] | None = None,
    ) -> Notification | Suppressed:
        """Persist a notification for ``owner_id`` unless a preference blocks it.

        Returns :class:`Suppressed` when the category is disabled. Raises
        :class:`TransientStoreError` when the write fails.
        """

        if not owner_id:
            raise ValueError("A notification needs an owner")
        category = normalize_category(category)

        preferences = self._resolve_preferences(owner_id)
        blocked_by = blocking_preference(preferences, category)
        if blocked_by is not None:
            logger.debug(
                "Suppressed %s notification for %s (%s disabled)",
                category,
                owner_id,
                blocked_by,
            )
            return Suppressed(owner_id=owner_id, category=category, preference=blocked_by)

        notification = Notification(
            id=None,
            owner_id=owner_id,
            category=category,
            title=title,
            body=body,
            metadata=sanitize_metadata(metadata),
            read=False,
            created_at=now_in_app_timezone(),
        )
        with store_operation(self.session, "store notification"):
            saved = NotificationRepository(self.session).insert(notification)

        try:
            self._publisher.dispatch(saved)
        except Exception:
            logger.exception("Realtime dispatch failed for notification %s", saved.id)
        return saved

    def _resolve_preferences(self, owner_id: str) -> PreferenceSet:
        try:
            return get_preferences(self.session, owner_id)
        except TransientStoreError:
            logger.warning(
                "Preferences for %s unavailable; delivering with defaults", owner_id
            )
            return PreferenceSet(owner_id=owner_id)


def emit_notification(
    session: Session,
    *,
    category: str,
    owner_id: str,
    title: str,
    body: str,
    metadata: Mapping[str, Any] | None = None,
) -> Notification | Suppressed:
    """Public helper that delegates to :class:`EventEmitter`."""

    return EventEmitter(session).emit(category, owner_id, title, body, metadata)


def emit_best_effort(
    session: Session,
    *,
    category: str,
    owner_id: str,
    title: str,
    body: str,
    metadata: Mapping[str, Any] | None = None,
) -> Notification | Suppressed | None:
    """Emit without letting a store failure reach the triggering action.

    Returns ``None`` when the write failed; the failure is logged.
    """

    try:
        return emit_notification(
            session,
            category=category,
            owner_id=owner_id,
            title=title,
            body=body,
            metadata=metadata,
        )
    except TransientStoreError:
        logger.exception("Could not notify %s about '%s'", owner_id, title)
        return None


__all__ = ["EventEmitter", "emit_best_effort", "emit_notification"]
