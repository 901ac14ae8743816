"""Activity audit trail use cases."""

from .details import changed_fields, describe_changes, player_snapshot
from .logger import AuditLogger

__all__ = [
    "AuditLogger",
    "changed_fields",
    "describe_changes",
    "player_snapshot",
]
