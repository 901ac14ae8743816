"""Schemas for audit history endpoints."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AuditRecordRead(BaseModel):
    """Representation of an audit record returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    team_scope: str
    entity_type: str
    entity_id: str | None
    entity_name: str
    action: str
    tone: str = "gray"
    performed_by: str | None
    performed_at: datetime
    details: str
    snapshot: dict[str, Any] = Field(default_factory=dict)
    is_orphaned: bool = Field(
        description="The referenced entity no longer exists; display hint only"
    )


class AuditPageRead(BaseModel):
    items: list[AuditRecordRead]
    page: int
    page_size: int
    total: int
    has_more: bool


__all__ = ["AuditPageRead", "AuditRecordRead"]
