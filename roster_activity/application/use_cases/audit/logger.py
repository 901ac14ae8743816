"""Append-only activity log for tracked roster entities."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence
from typing import Iterable

from sqlalchemy.orm import Session

from roster_activity.config import get_settings
from roster_activity.domain.entities import (
    AuditAction,
    AuditFilters,
    AuditPage,
    AuditRecord,
    EntitySnapshot,
)
from roster_activity.infrastructure.database import store_operation
from roster_activity.infrastructure.entity_directory import EntityDirectory
from roster_activity.infrastructure.repositories import AuditRecordRepository
from roster_activity.utils import now_in_app_timezone

from .details import UNKNOWN_NAME, default_details, describe_changes

logger = logging.getLogger(__name__)


class AuditLogger:
    """Write and read audit records for one database session.

    Each ``log_*`` call is one append. Records keep the entity name captured
    at write time, so they stay readable after the entity is deleted; such
    records come back from queries with ``is_orphaned`` set and are never
    filtered out.
    """

    def __init__(
        self,
        session: Session,
        *,
        directory: EntityDirectory | None = None,
        page_size: int | None = None,
    ) -> None:
        self.session = session
        self._repository = AuditRecordRepository(session)
        self._directory = directory or EntityDirectory(session)
        self._page_size = page_size or get_settings().audit_page_size

    def log_created(
        self,
        snapshot: EntitySnapshot,
        scope: str,
        actor: str | None,
        *,
        details: str | None = None,
    ) -> AuditRecord:
        return self._append(
            snapshot=snapshot,
            scope=scope,
            actor=actor,
            action=AuditAction.CREATED,
            details=details or default_details(AuditAction.CREATED, snapshot.entity_name),
        )

    def log_updated(
        self,
        entity_id: str,
        scope: str,
        actor: str | None,
        change_summary: str | Sequence[str],
        *,
        entity_name: str | None = None,
        entity_type: str = "player",
    ) -> AuditRecord:
        """Record an update.

        ``change_summary`` is either free text or the list of changed fields.
        When ``entity_name`` is omitted the name last recorded for the entity
        is reused.
        """

        name = entity_name or self._last_known_name(entity_type, entity_id)
        if isinstance(change_summary, str):
            details = change_summary or default_details(AuditAction.UPDATED, name)
        else:
            details = describe_changes(name, list(change_summary))
        snapshot = EntitySnapshot(entity_id=entity_id, entity_name=name, entity_type=entity_type)
        return self._append(
            snapshot=snapshot,
            scope=scope,
            actor=actor,
            action=AuditAction.UPDATED,
            details=details,
        )

    def log_deleted(
        self,
        snapshot: EntitySnapshot,
        scope: str,
        actor: str | None,
        *,
        details: str | None = None,
    ) -> AuditRecord:
        """Record a deletion; call it before the entity row is removed."""

        return self._append(
            snapshot=snapshot,
            scope=scope,
            actor=actor,
            action=AuditAction.DELETED,
            details=details or default_details(AuditAction.DELETED, snapshot.entity_name),
        )

    def list_by_scope(
        self,
        scope: str,
        filters: AuditFilters | None = None,
        page: int = 1,
    ) -> AuditPage:
        """Return one page of ``scope``'s history, newest first."""

        filters = filters or AuditFilters()
        page = max(page, 1)
        with store_operation(self.session, "load activity history"):
            records, total = self._repository.list_by_scope(
                scope,
                search=filters.search,
                on_date=filters.on_date,
                offset=(page - 1) * self._page_size,
                limit=self._page_size,
            )
            self._flag_orphans(records)
        return AuditPage(records=records, page=page, page_size=self._page_size, total=total)

    def history_for(
        self, entity_type: str, entity_id: str, scope: str | None = None
    ) -> list[AuditRecord]:
        """Return every record about one entity, including after its deletion.

        When ``scope`` is given only that team's records are returned.
        """

        with store_operation(self.session, "load entity history"):
            records = self._repository.list_for_entity(
                entity_type, entity_id, team_scope=scope
            )
            self._flag_orphans(records)
        return records

    def _append(
        self,
        *,
        snapshot: EntitySnapshot,
        scope: str,
        actor: str | None,
        action: AuditAction,
        details: str,
    ) -> AuditRecord:
        if not scope:
            raise ValueError("An audit record needs a scope")
        record = AuditRecord(
            id=None,
            team_scope=scope,
            entity_type=snapshot.entity_type,
            entity_id=snapshot.entity_id,
            entity_name=snapshot.entity_name or UNKNOWN_NAME,
            action=action.value,
            performed_by=actor,
            performed_at=now_in_app_timezone(),
            details=details,
            snapshot=dict(snapshot.fields),
        )
        with store_operation(self.session, f"record {action.value} activity"):
            saved = self._repository.append(record)
        logger.info(
            "Audit %s %s '%s' in %s by %s",
            action.value,
            saved.entity_type,
            saved.entity_name,
            scope,
            actor,
        )
        return saved

    def _last_known_name(self, entity_type: str, entity_id: str) -> str:
        with store_operation(self.session, "load entity history"):
            history = self._repository.list_for_entity(entity_type, entity_id)
        return history[0].entity_name if history else UNKNOWN_NAME

    def _flag_orphans(self, records: Iterable[AuditRecord]) -> None:
        records = list(records)
        ids_by_type: dict[str, set[str]] = defaultdict(set)
        for record in records:
            if record.entity_id:
                ids_by_type[record.entity_type].add(record.entity_id)

        existing = {
            entity_type: self._directory.existing_ids(entity_type, ids)
            for entity_type, ids in ids_by_type.items()
        }
        for record in records:
            record.is_orphaned = not record.entity_id or record.entity_id not in existing.get(
                record.entity_type, set()
            )


__all__ = ["AuditLogger"]
