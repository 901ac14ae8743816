"""Roster mutations wired to the audit trail and the notification feed.

The player write is the primary action. Audit and notification writes are
secondary: their failures are logged and never undo or block the player
change.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import replace
from typing import Any

from sqlalchemy.orm import Session

from roster_activity.domain.entities import Player
from roster_activity.domain.exceptions import TransientStoreError
from roster_activity.infrastructure.repositories import PlayerRepository

from .audit import AuditLogger, changed_fields, player_snapshot
from .audit.details import player_values
from .notifications import notify_player_removed

logger = logging.getLogger(__name__)


def add_player(session: Session, *, player: Player, actor: str | None) -> Player:
    created = PlayerRepository(session).create(player)
    try:
        AuditLogger(session).log_created(player_snapshot(created), created.team_id, actor)
    except TransientStoreError:
        logger.exception("Could not record creation of player %s", created.id)
    return created


def update_player(
    session: Session, *, player_id: str, changes: dict[str, Any], actor: str | None
) -> Player:
    repository = PlayerRepository(session)
    current = repository.get(player_id)
    if current is None:
        raise ValueError("Player not found")

    updated = repository.update(replace(current, **changes))
    fields = changed_fields(player_values(current), player_values(updated))
    try:
        AuditLogger(session).log_updated(
            updated.id,
            updated.team_id,
            actor,
            fields,
            entity_name=current.full_name,
        )
    except TransientStoreError:
        logger.exception("Could not record update of player %s", updated.id)
    return updated


def delete_player(
    session: Session,
    *,
    player_id: str,
    actor: str | None,
    notify_owner_ids: Iterable[str] = (),
) -> None:
    """Delete a player, recording the deletion before the row disappears."""

    repository = PlayerRepository(session)
    player = repository.get(player_id)
    if player is None:
        raise ValueError("Player not found")

    try:
        AuditLogger(session).log_deleted(player_snapshot(player), player.team_id, actor)
    except TransientStoreError:
        logger.exception("Could not record deletion of player %s", player.id)

    repository.delete(player.id)

    for owner_id in notify_owner_ids:
        notify_player_removed(
            session,
            owner_id=owner_id,
            player_name=player.full_name,
            team_scope=player.team_id,
        )


__all__ = ["add_player", "delete_player", "update_player"]
