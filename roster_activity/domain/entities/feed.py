"""Value objects used to page through a notification feed."""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass, field
from datetime import datetime

from .notification import Notification


@dataclass(frozen=True)
class FeedCursor:
    """Position after the last notification of a page.

    The next page contains records strictly older than ``created_at`` or, for
    the same timestamp, with a smaller id.
    """

    created_at: datetime
    notification_id: int

    def encode(self) -> str:
        raw = json.dumps(
            {"created_at": self.created_at.isoformat(), "id": self.notification_id}
        )
        return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii")

    @classmethod
    def decode(cls, token: str) -> "FeedCursor":
        """Parse a token produced by :meth:`encode`; raises ``ValueError`` when malformed."""

        try:
            raw = base64.urlsafe_b64decode(token.encode("ascii"))
            data = json.loads(raw)
            return cls(
                created_at=datetime.fromisoformat(data["created_at"]),
                notification_id=int(data["id"]),
            )
        except (binascii.Error, UnicodeError, KeyError, TypeError, ValueError) as exc:
            raise ValueError("Invalid feed cursor") from exc

    @classmethod
    def after(cls, notification: Notification) -> "FeedCursor":
        if notification.id is None or notification.created_at is None:
            raise ValueError("Only persisted notifications can start a cursor")
        return cls(created_at=notification.created_at, notification_id=notification.id)


@dataclass
class NotificationPage:
    items: list[Notification] = field(default_factory=list)
    next_cursor: FeedCursor | None = None


__all__ = ["FeedCursor", "NotificationPage"]
