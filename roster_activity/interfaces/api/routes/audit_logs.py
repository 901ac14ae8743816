"""Routes for browsing the team activity history."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from roster_activity.application.use_cases import AuditLogger
from roster_activity.domain.entities import AuditFilters, AuditRecord, Identity, action_tone
from roster_activity.domain.exceptions import TransientStoreError
from roster_activity.infrastructure.database import get_db
from roster_activity.interfaces.api.dependencies import require_team_scope
from roster_activity.interfaces.api.schemas import AuditPageRead, AuditRecordRead

router = APIRouter(prefix="/audit-logs", tags=["audit_logs"])


def _audit_record_to_read_model(record: AuditRecord) -> AuditRecordRead:
    read_model = AuditRecordRead.model_validate(record)
    read_model.tone = action_tone(record.action)
    return read_model


@router.get("/", response_model=AuditPageRead)
def list_audit_logs(
    q: str | None = Query(None, description="Text matched against name, action and details"),
    on_date: date | None = Query(None, description="Only records performed on this day"),
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_team_scope),
) -> AuditPageRead:
    """Return one page of the caller's team history, newest first."""

    filters = AuditFilters(search=(q or "").strip() or None, on_date=on_date)
    try:
        result = AuditLogger(db).list_by_scope(identity.scope, filters, page)
    except TransientStoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc

    return AuditPageRead(
        items=[_audit_record_to_read_model(record) for record in result.records],
        page=result.page,
        page_size=result.page_size,
        total=result.total,
        has_more=result.has_more,
    )


@router.get("/entities/{entity_type}/{entity_id}", response_model=list[AuditRecordRead])
def read_entity_history(
    entity_type: str,
    entity_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(require_team_scope),
) -> list[AuditRecordRead]:
    """Return the full history of one entity, including after it was deleted."""

    try:
        records = AuditLogger(db).history_for(entity_type, entity_id, identity.scope)
    except TransientStoreError as exc:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)
        ) from exc

    return [_audit_record_to_read_model(record) for record in records]


__all__ = ["router"]
