from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import RequestKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Notification
from .repository import NotificationRepository

_COLUMNS = "notification_id, recipient_id, kind, message, related_request_id, seen, created_at"


def _to_notification(r: dict) -> Notification:
    return Notification(
        notification_id=int(r["notification_id"]),
        recipient_id=int(r["recipient_id"]),
        kind=RequestKind(r["kind"]),
        message=r["message"],
        related_request_id=int(r["related_request_id"]),
        seen=bool(r.get("seen")),
        created_at=r.get("created_at"),
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, recipient_id: int, kind: RequestKind, message: str, related_request_id: int) -> Notification:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(recipient_id, kind, message, related_request_id)
                VALUES(%s,%s,%s,%s)
                """,
                (int(recipient_id), kind.value, message, int(related_request_id)),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM notifications WHERE notification_id=%s", (int(cur.lastrowid),))
            return _to_notification(fetchone(cur))

    def get_by_id(self, notification_id: int) -> Optional[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM notifications WHERE notification_id=%s", (int(notification_id),))
            r = fetchone(cur)
            return _to_notification(r) if r else None

    def list_for_recipient(self, recipient_id: int, *, unseen_only: bool = True, limit: int = 500) -> Sequence[Notification]:
        where = "recipient_id=%s AND seen=0" if unseen_only else "recipient_id=%s"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM notifications WHERE {where} ORDER BY created_at DESC, notification_id DESC LIMIT %s",
                (int(recipient_id), int(limit)),
            )
            return [_to_notification(r) for r in fetchall(cur)]

    def mark_seen(self, notification_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE notifications SET seen=1 WHERE notification_id=%s", (int(notification_id),))
            return cur.rowcount > 0

    def mark_seen_for_request(self, *, kind: RequestKind, related_request_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE notifications SET seen=1 WHERE kind=%s AND related_request_id=%s AND seen=0",
                (kind.value, int(related_request_id)),
            )
            return int(cur.rowcount)
