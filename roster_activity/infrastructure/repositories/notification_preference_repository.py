"""Persistence layer for notification preferences."""

from __future__ import annotations

from sqlalchemy.orm import Session

from roster_activity.domain.entities import PreferenceSet
from roster_activity.infrastructure.models import NotificationPreferenceModel
from roster_activity.utils import ensure_app_timezone


class NotificationPreferenceRepository:
    """Read and upsert :class:`PreferenceSet` rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, owner_id: str) -> PreferenceSet | None:
        model = self.session.get(NotificationPreferenceModel, owner_id)
        return self._to_entity(model) if model else None

    def save(self, preferences: PreferenceSet) -> PreferenceSet:
        model = self.session.get(NotificationPreferenceModel, preferences.owner_id)
        if model is None:
            model = NotificationPreferenceModel(owner_id=preferences.owner_id)
        for name, value in preferences.as_flags().items():
            setattr(model, name, value)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: NotificationPreferenceModel) -> PreferenceSet:
        flags = {name: bool(getattr(model, name)) for name in PreferenceSet.flag_names()}
        return PreferenceSet(
            owner_id=model.owner_id,
            updated_at=ensure_app_timezone(model.updated_at),
            **flags,
        )


__all__ = ["NotificationPreferenceRepository"]
