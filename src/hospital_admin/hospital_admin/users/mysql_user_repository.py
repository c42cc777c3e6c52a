from __future__ import annotations

from typing import Any, Dict, Iterable, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository


def _row_to_user(r: Dict[str, Any]) -> User:
    return User(
        user_id=int(r["user_id"]),
        email=r.get("email") or "",
        name=r.get("name") or "",
        role=Role(r["role"]),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT user_id, email, name, role FROM users WHERE user_id=%s",
                (user_id,),
            )
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def list_by_roles(self, roles: Iterable[Role]) -> Sequence[User]:
        values = [Role(r).value for r in roles]
        if not values:
            return []
        placeholders = ", ".join(["%s"] * len(values))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT user_id, email, name, role
                FROM users
                WHERE role IN ({placeholders})
                ORDER BY role, user_id
                """,
                tuple(values),
            )
            return [_row_to_user(r) for r in fetchall(cur)]
