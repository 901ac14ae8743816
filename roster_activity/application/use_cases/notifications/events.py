"""Helpers used by domain triggers to emit notifications."""

from __future__ import annotations

from sqlalchemy.orm import Session

from roster_activity.domain.entities import (
    NotificationCategory,
    Notification,
    Suppressed,
)

from .emitter import emit_best_effort


def notify_message_received(
    session: Session,
    *,
    owner_id: str,
    sender_name: str,
    message_id: str,
    message_type: str = "direct",
    pitch_id: str | None = None,
    player_id: str | None = None,
) -> Notification | Suppressed | None:
    """Tell ``owner_id`` that ``sender_name`` sent them a message."""

    return emit_best_effort(
        session,
        category=NotificationCategory.MESSAGE.value,
        owner_id=owner_id,
        title="New Message Received",
        body=f"You have received a new {message_type} message from {sender_name}",
        metadata={
            "message_id": message_id,
            "sender_name": sender_name,
            "message_type": message_type,
            "pitch_id": pitch_id,
            "player_id": player_id,
            "action_url": f"/messages/{message_id}",
        },
    )


def notify_transfer_interest(
    session: Session,
    *,
    owner_id: str,
    team_name: str,
    player_name: str,
    pitch_id: str | None = None,
    offer_amount: float | None = None,
) -> Notification | Suppressed | None:
    """Tell a player's owner that a team expressed transfer interest."""

    body = f"{team_name} expressed interest in {player_name}"
    if offer_amount is not None:
        body = f"{team_name} made an offer of {offer_amount:,.2f} for {player_name}"
    return emit_best_effort(
        session,
        category=NotificationCategory.TRANSFER.value,
        owner_id=owner_id,
        title="Transfer Interest",
        body=body,
        metadata={
            "team_name": team_name,
            "player_name": player_name,
            "pitch_id": pitch_id,
            "offer_amount": offer_amount,
        },
    )


def notify_login_succeeded(
    session: Session, *, owner_id: str, ip_address: str | None = None
) -> Notification | Suppressed | None:
    body = "A new sign-in to your account was detected"
    if ip_address:
        body = f"{body} from {ip_address}"
    return emit_best_effort(
        session,
        category=NotificationCategory.LOGIN.value,
        owner_id=owner_id,
        title="New Sign-in",
        body=body,
        metadata={"ip_address": ip_address},
    )


def notify_profile_changed(
    session: Session, *, owner_id: str, changed_fields: list[str]
) -> Notification | Suppressed | None:
    summary = ", ".join(changed_fields) if changed_fields else "your profile"
    return emit_best_effort(
        session,
        category=NotificationCategory.PROFILE.value,
        owner_id=owner_id,
        title="Profile Updated",
        body=f"Changes saved to {summary}",
        metadata={"changed_fields": ", ".join(changed_fields)},
    )


def notify_player_removed(
    session: Session, *, owner_id: str, player_name: str, team_scope: str
) -> Notification | Suppressed | None:
    return emit_best_effort(
        session,
        category=NotificationCategory.WARNING.value,
        owner_id=owner_id,
        title="Player Removed",
        body=f"Player {player_name} was removed from the roster",
        metadata={"player_name": player_name, "team_id": team_scope},
    )


__all__ = [
    "notify_login_succeeded",
    "notify_message_received",
    "notify_player_removed",
    "notify_profile_changed",
    "notify_transfer_interest",
]
