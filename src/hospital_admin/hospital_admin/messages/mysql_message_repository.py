from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Message
from .repository import MessageRepository

_COLUMNS = "message_id, sender_id, receiver_id, subject, content, created_at, read_at"


def _row_to_message(r: Dict[str, Any]) -> Message:
    return Message(
        message_id=int(r["message_id"]),
        sender_id=int(r["sender_id"]),
        receiver_id=int(r["receiver_id"]),
        subject=r["subject"],
        content=r["content"],
        created_at=r["created_at"],
        read_at=r.get("read_at"),
    )


class MySQLMessageRepository(MessageRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user(self, user_id: int) -> Sequence[Message]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM messages
                WHERE sender_id=%s OR receiver_id=%s
                ORDER BY created_at DESC, message_id DESC
                """,
                (user_id, user_id),
            )
            return [_row_to_message(r) for r in fetchall(cur)]

    def get_by_id(self, message_id: int) -> Optional[Message]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM messages WHERE message_id=%s", (message_id,))
            row = fetchone(cur)
            return _row_to_message(row) if row else None

    def insert(
        self,
        *,
        sender_id: int,
        receiver_id: int,
        subject: str,
        content: str,
        created_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO messages(sender_id, receiver_id, subject, content, created_at)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (sender_id, receiver_id, subject, content, created_at),
            )
            return int(cur.lastrowid)

    def mark_read(self, *, message_id: int, read_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE messages SET read_at=%s WHERE message_id=%s",
                (read_at, message_id),
            )
            return cur.rowcount > 0

    def list_received_after(self, *, receiver_id: int, after_id: int) -> Sequence[Message]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM messages
                WHERE receiver_id=%s AND message_id > %s
                ORDER BY message_id
                """,
                (receiver_id, after_id),
            )
            return [_row_to_message(r) for r in fetchall(cur)]

    def max_message_id(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COALESCE(MAX(message_id), 0) AS max_id FROM messages")
            row = fetchone(cur)
            return int(row["max_id"]) if row else 0
