"""Endpoints and websocket handler for the notification center."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    Response,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from sqlalchemy.orm import Session

from roster_activity.application.use_cases.notifications import (
    FILTER_ALL,
    FeedStatus,
    NotificationCenter,
    SessionFeedGateway,
    count_unread,
    delete_notification,
    list_notifications,
    mark_all_notifications_read,
    set_notification_read,
)
from roster_activity.application.use_cases.preferences import (
    get_preferences,
    update_preferences,
)
from roster_activity.config import get_settings
from roster_activity.domain.entities import FeedCursor, Identity, Notification, PreferenceSet
from roster_activity.domain.exceptions import (
    InvalidPreferenceError,
    OperationInProgressError,
    TransientStoreError,
)
from roster_activity.infrastructure.database import SessionLocal, get_db
from roster_activity.infrastructure.notifications import (
    realtime_channel,
    serialize_notification,
)
from roster_activity.infrastructure.security import identity_from_token
from roster_activity.interfaces.api.dependencies import get_current_identity
from roster_activity.interfaces.api.schemas import (
    MarkAllReadResponse,
    NotificationPageRead,
    NotificationRead,
    PreferenceRead,
    PreferenceUpdate,
    UnreadCountRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])

logger = logging.getLogger(__name__)


def _notification_to_schema(notification: Notification) -> NotificationRead:
    return NotificationRead(**serialize_notification(notification))


def _preferences_to_schema(preferences: PreferenceSet) -> PreferenceRead:
    return PreferenceRead(updated_at=preferences.updated_at, **preferences.as_flags())


def _store_unavailable(exc: TransientStoreError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))


@router.get("/", response_model=NotificationPageRead)
def read_notifications(
    limit: int | None = Query(None, ge=1, description="Maximum number of notifications"),
    cursor: str | None = Query(None, description="Cursor returned by the previous page"),
    view: str = Query(FILTER_ALL, description="'all', 'unread' or a category"),
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> NotificationPageRead:
    """Return the caller's notifications, newest first."""

    settings = get_settings()
    page_size = min(limit or settings.notification_page_size, settings.notification_page_size_max)
    try:
        before = FeedCursor.decode(cursor) if cursor else None
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    try:
        page = list_notifications(
            db,
            owner_id=identity.owner_id,
            limit=page_size,
            cursor=before,
            view=view.strip().lower(),
        )
        unread = count_unread(db, owner_id=identity.owner_id)
    except TransientStoreError as exc:
        raise _store_unavailable(exc) from exc

    return NotificationPageRead(
        items=[_notification_to_schema(item) for item in page.items],
        next_cursor=page.next_cursor.encode() if page.next_cursor else None,
        unread_count=unread,
    )


@router.get("/unread-count", response_model=UnreadCountRead)
def read_unread_count(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> UnreadCountRead:
    try:
        return UnreadCountRead(unread_count=count_unread(db, owner_id=identity.owner_id))
    except TransientStoreError as exc:
        raise _store_unavailable(exc) from exc


@router.post("/read-all", response_model=MarkAllReadResponse)
def mark_all_read(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> MarkAllReadResponse:
    """Mark every unread notification of the caller as read."""

    try:
        affected = mark_all_notifications_read(db, owner_id=identity.owner_id)
    except OperationInProgressError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc
    except TransientStoreError as exc:
        raise _store_unavailable(exc) from exc
    return MarkAllReadResponse(affected=affected)


@router.get("/preferences", response_model=PreferenceRead)
def read_preferences(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> PreferenceRead:
    """Return the caller's preferences; users without a row get everything enabled."""

    try:
        preferences = get_preferences(db, identity.owner_id)
    except TransientStoreError as exc:
        raise _store_unavailable(exc) from exc
    return _preferences_to_schema(preferences)


@router.patch("/preferences", response_model=PreferenceRead)
def patch_preferences(
    payload: PreferenceUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> PreferenceRead:
    try:
        preferences = update_preferences(db, identity.owner_id, payload.changes())
    except InvalidPreferenceError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except TransientStoreError as exc:
        raise _store_unavailable(exc) from exc
    return _preferences_to_schema(preferences)


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> Response:
    return _set_read(db, identity, notification_id, True)


@router.post("/{notification_id}/unread", status_code=status.HTTP_204_NO_CONTENT)
def mark_unread(
    notification_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> Response:
    return _set_read(db, identity, notification_id, False)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> Response:
    """Delete a notification; deleting one that is already gone also succeeds."""

    try:
        delete_notification(db, owner_id=identity.owner_id, notification_id=notification_id)
    except TransientStoreError as exc:
        raise _store_unavailable(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _set_read(db: Session, identity: Identity, notification_id: int, read: bool) -> Response:
    try:
        set_notification_read(
            db, owner_id=identity.owner_id, notification_id=notification_id, read=read
        )
    except TransientStoreError as exc:
        raise _store_unavailable(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _state_frame(center: NotificationCenter) -> dict[str, Any]:
    return {
        "type": "state",
        "status": center.status.value,
        "filter": center.active_filter,
        "unread_count": center.unread_count,
        "items": [serialize_notification(item) for item in center.visible],
    }


async def _handle_message(center: NotificationCenter, message: dict[str, Any]) -> dict[str, Any]:
    """Apply one client command and return the acknowledgement frame."""

    operation = message.get("type")
    if operation in ("mark_read", "mark_unread", "delete"):
        try:
            notification_id = int(message.get("id"))
        except (TypeError, ValueError):
            return {"type": "error", "op": operation, "detail": "A notification id is required"}
        if operation == "mark_read":
            await center.mark_read(notification_id)
        elif operation == "mark_unread":
            await center.mark_unread(notification_id)
        else:
            await center.delete(notification_id)
        return {"type": "ack", "op": operation, "id": notification_id}

    if operation == "mark_all_read":
        affected = await center.mark_all_read()
        return {"type": "ack", "op": operation, "affected": affected}

    if operation == "filter":
        center.filter_by_category(str(message.get("value") or FILTER_ALL))
        return {"type": "ack", "op": operation, "value": center.active_filter}

    if operation == "refresh":
        result = await center.refresh()
        if result is FeedStatus.ERROR:
            return {"type": "error", "op": operation, "detail": center.error}
        return {"type": "ack", "op": operation}

    return {"type": "error", "op": operation, "detail": "Unknown command"}


@router.websocket("/ws")
async def notifications_websocket(websocket: WebSocket) -> None:
    """Websocket endpoint driving a notification center for the authenticated user."""

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=1008)
        return
    try:
        identity = identity_from_token(token)
    except ValueError:
        await websocket.close(code=1008)
        return

    await websocket.accept()

    async def push(notification: Notification) -> None:
        await websocket.send_json(
            {
                "type": "notification",
                "data": serialize_notification(notification),
                "unread_count": center.unread_count,
            }
        )

    center = NotificationCenter(
        identity.owner_id,
        SessionFeedGateway(SessionLocal),
        channel=realtime_channel,
        page_size=get_settings().notification_page_size,
        on_insert=push,
    )
    try:
        if await center.open() is FeedStatus.ERROR:
            await websocket.send_json({"type": "error", "op": "load", "detail": center.error})
        else:
            await websocket.send_json({**_state_frame(center), "type": "init"})

        while True:
            try:
                message = await websocket.receive_json()
            except WebSocketDisconnect:
                raise
            except ValueError:
                continue

            if not isinstance(message, dict):
                continue

            if message.get("type") == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            try:
                reply = await _handle_message(center, message)
            except (TransientStoreError, OperationInProgressError) as exc:
                reply = {"type": "error", "op": message.get("type"), "detail": str(exc)}
            await websocket.send_json(reply)
            await websocket.send_json(_state_frame(center))
    except WebSocketDisconnect:
        logger.debug("Notification websocket closed for %s", identity.owner_id)
    finally:
        center.close()


__all__ = ["router"]
