"""SQLAlchemy model for the append-only activity audit trail."""

from sqlalchemy import Column, DateTime, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.types import JSON

from roster_activity.infrastructure.database import Base
from roster_activity.utils import now_in_app_naive_datetime

_audit_json_type = JSONB().with_variant(JSON(), "sqlite")


class AuditRecordModel(Base):
    """Database representation of audit events.

    ``entity_id`` has no foreign key; rows outlive the entity they describe.
    """

    __tablename__ = "audit_record"
    __table_args__ = (
        Index("ix_audit_record_scope_performed", "team_scope", "performed_at", "id"),
        Index("ix_audit_record_entity", "entity_type", "entity_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    team_scope = Column(String(64), nullable=False)
    entity_type = Column(String(40), nullable=False, default="player")
    entity_id = Column(String(64), nullable=True)
    entity_name = Column(String(200), nullable=False)
    action = Column(String(20), nullable=False)
    performed_by = Column(String(64), nullable=True)
    performed_at = Column(
        DateTime(), nullable=False, default=now_in_app_naive_datetime
    )
    details = Column(Text, nullable=False, default="")
    snapshot = Column(_audit_json_type, nullable=False, default=dict)


__all__ = ["AuditRecordModel"]
