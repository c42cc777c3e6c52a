from __future__ import annotations

from typing import Any, Dict, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import StaffMember
from .repository import StaffRepository


def _row_to_staff(r: Dict[str, Any]) -> StaffMember:
    return StaffMember(
        staff_id=str(r["staff_id"]),
        user_id=int(r["user_id"]) if r.get("user_id") is not None else None,
        first_name=r["first_name"],
        last_name=r["last_name"],
        role=Role(r["role"]),
        department=r["department"],
        contact_number=r.get("contact_number") or "",
        email=r.get("email") or "",
        employee_id=r.get("employee_id") or "",
    )


class MySQLStaffRepository(StaffRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[StaffMember]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT staff_id, user_id, first_name, last_name, role, department,
                       contact_number, email, employee_id
                FROM staff
                ORDER BY employee_id, staff_id
                """
            )
            return [_row_to_staff(r) for r in fetchall(cur)]
