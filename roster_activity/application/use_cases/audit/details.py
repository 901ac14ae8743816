"""Human readable details for audit records."""

from __future__ import annotations

from dataclasses import asdict
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping

from roster_activity.domain.entities import AuditAction, EntitySnapshot, Player

UNKNOWN_NAME = "Unknown"

# Fields a user edits through the roster forms, with their display label.
PLAYER_FIELD_LABELS: dict[str, str] = {
    "full_name": "name",
    "position": "position",
    "age": "age",
    "height": "height",
    "weight": "weight",
    "citizenship": "citizenship",
    "jersey_number": "jersey number",
    "market_value": "market value",
    "bio": "bio",
    "date_of_birth": "date of birth",
    "place_of_birth": "place of birth",
    "foot": "preferred foot",
    "fifa_id": "FIFA ID",
    "player_agent": "player agent",
    "current_club": "current club",
    "joined_date": "joined date",
    "contract_expires": "contract expiry",
    "gender": "gender",
    "photo_url": "photo",
    "headshot_url": "headshot",
    "portrait_url": "portrait",
    "full_body_url": "full body photo",
    "leagues_participated": "leagues participated",
    "titles_seasons": "titles and seasons",
    "transfer_history": "transfer history",
    "international_duty": "international duty",
}

SYSTEM_FIELDS = frozenset(
    {"ai_analysis", "created_at", "updated_at", "id", "team_id", "is_active"}
)

# Kept on the audit record so a deleted player stays recognizable.
SNAPSHOT_FIELDS = (
    "full_name",
    "position",
    "age",
    "citizenship",
    "jersey_number",
    "market_value",
)


def changed_fields(old: Mapping[str, Any], new: Mapping[str, Any]) -> list[str]:
    """Return the user-editable fields whose value differs between ``old`` and ``new``.

    Lists are compared without regard to order.
    """

    changes: list[str] = []
    for name in PLAYER_FIELD_LABELS:
        if name not in old and name not in new:
            continue
        before = old.get(name)
        after = new.get(name)
        if before is None and after is None:
            continue
        if isinstance(before, (list, tuple)) and isinstance(after, (list, tuple)):
            if sorted(map(str, before)) != sorted(map(str, after)):
                changes.append(name)
        elif before != after:
            changes.append(name)
    return changes


def describe_changes(entity_name: str | None, fields: list[str]) -> str:
    """Build a sentence such as ``Updated position and age for Jane Doe``."""

    name = entity_name or UNKNOWN_NAME
    meaningful = [field for field in fields if field not in SYSTEM_FIELDS]
    if not meaningful:
        return f"Player {name} was updated"

    labels = [PLAYER_FIELD_LABELS.get(field, field.replace("_", " ")) for field in meaningful]
    if len(labels) == 1:
        changed = labels[0]
    else:
        changed = f"{', '.join(labels[:-1])} and {labels[-1]}"
    return f"Updated {changed} for {name}"


def default_details(action: AuditAction, entity_name: str | None) -> str:
    name = entity_name or UNKNOWN_NAME
    if action is AuditAction.CREATED:
        return f"Player {name} was added to the roster"
    if action is AuditAction.UPDATED:
        return f"Player {name} was updated"
    if action is AuditAction.DELETED:
        return f"Player {name} was removed from the roster"
    return f"Player activity: {action.value}"


def player_snapshot(player: Player) -> EntitySnapshot:
    """Capture the identifying fields of ``player`` for the audit trail."""

    values = asdict(player)
    fields = {name: _json_value(values.get(name)) for name in SNAPSHOT_FIELDS}
    return EntitySnapshot(
        entity_id=player.id,
        entity_name=player.full_name,
        entity_type="player",
        fields=fields,
    )


def player_values(player: Player) -> dict[str, Any]:
    return asdict(player)


def _json_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


__all__ = [
    "PLAYER_FIELD_LABELS",
    "SNAPSHOT_FIELDS",
    "SYSTEM_FIELDS",
    "changed_fields",
    "default_details",
    "describe_changes",
    "player_snapshot",
    "player_values",
]
