"""Persistence layer for the activity audit trail."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from sqlalchemy import func, or_
from sqlalchemy.orm import Query, Session

from roster_activity.domain.entities import AuditRecord
from roster_activity.infrastructure.models import AuditRecordModel
from roster_activity.utils import (
    app_day_bounds,
    ensure_app_naive_datetime,
    ensure_app_timezone,
    now_in_app_timezone,
)


class AuditRecordRepository:
    """Append and query :class:`AuditRecord` entries.

    Records are never updated or deleted, so the repository exposes no such
    operations.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def append(self, record: AuditRecord) -> AuditRecord:
        model = AuditRecordModel()
        self._apply_entity_to_model(model, record)
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def get(self, record_id: int) -> AuditRecord | None:
        model = self.session.get(AuditRecordModel, record_id)
        return self._to_entity(model) if model else None

    def list_by_scope(
        self,
        team_scope: str,
        *,
        search: str | None = None,
        on_date: date | None = None,
        offset: int = 0,
        limit: int = 25,
    ) -> tuple[list[AuditRecord], int]:
        """Return one page of records for ``team_scope`` and the total match count."""

        query = self.session.query(AuditRecordModel).filter(
            AuditRecordModel.team_scope == team_scope
        )
        query = self._apply_filters(query, search=search, on_date=on_date)
        total = query.order_by(None).count()
        models: Iterable[AuditRecordModel] = (
            query.order_by(
                AuditRecordModel.performed_at.desc(), AuditRecordModel.id.desc()
            )
            .offset(offset)
            .limit(limit)
            .all()
        )
        return [self._to_entity(model) for model in models], total

    def list_for_entity(
        self, entity_type: str, entity_id: str, *, team_scope: str | None = None
    ) -> list[AuditRecord]:
        query = (
            self.session.query(AuditRecordModel)
            .filter(AuditRecordModel.entity_type == entity_type)
            .filter(AuditRecordModel.entity_id == entity_id)
        )
        if team_scope is not None:
            query = query.filter(AuditRecordModel.team_scope == team_scope)
        models = query.order_by(
            AuditRecordModel.performed_at.desc(), AuditRecordModel.id.desc()
        ).all()
        return [self._to_entity(model) for model in models]

    @staticmethod
    def _apply_filters(
        query: Query, *, search: str | None, on_date: date | None
    ) -> Query:
        term = (search or "").strip().lower()
        if term:
            query = query.filter(
                or_(
                    func.lower(AuditRecordModel.entity_name).contains(term, autoescape=True),
                    func.lower(AuditRecordModel.action).contains(term, autoescape=True),
                    func.lower(AuditRecordModel.details).contains(term, autoescape=True),
                )
            )
        if on_date is not None:
            start, end = app_day_bounds(on_date)
            query = query.filter(
                AuditRecordModel.performed_at >= start,
                AuditRecordModel.performed_at < end,
            )
        return query

    @staticmethod
    def _to_entity(model: AuditRecordModel) -> AuditRecord:
        return AuditRecord(
            id=model.id,
            team_scope=model.team_scope,
            entity_type=model.entity_type,
            entity_id=model.entity_id,
            entity_name=model.entity_name,
            action=model.action,
            performed_by=model.performed_by,
            performed_at=ensure_app_timezone(model.performed_at),
            details=model.details or "",
            snapshot=dict(model.snapshot or {}),
        )

    @staticmethod
    def _apply_entity_to_model(model: AuditRecordModel, record: AuditRecord) -> None:
        model.team_scope = record.team_scope
        model.entity_type = record.entity_type
        model.entity_id = record.entity_id
        model.entity_name = record.entity_name
        model.action = record.action
        model.performed_by = record.performed_by
        model.performed_at = ensure_app_naive_datetime(
            record.performed_at or now_in_app_timezone()
        )
        model.details = record.details or ""
        model.snapshot = dict(record.snapshot or {})


__all__ = ["AuditRecordRepository"]
