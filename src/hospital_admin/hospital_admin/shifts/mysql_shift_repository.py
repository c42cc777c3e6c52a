from __future__ import annotations

from typing import Any, Dict, Sequence

from ..core.enums import ShiftStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, mysql_time_to_hhmm
from .model import ShiftRecord
from .repository import ShiftRepository


def _row_to_shift(r: Dict[str, Any]) -> ShiftRecord:
    return ShiftRecord(
        shift_id=str(r["shift_id"]),
        staff_id=str(r["staff_id"]),
        work_date=r["work_date"],
        start_time=mysql_time_to_hhmm(r["start_time"]),
        end_time=mysql_time_to_hhmm(r["end_time"]),
        status=ShiftStatus(r["status"]),
        shift_type=r.get("shift_type") or "regular",
        department=r.get("department") or "",
    )


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[ShiftRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT shift_id, staff_id, work_date, start_time, end_time, status, shift_type, department
                FROM shifts
                ORDER BY work_date, shift_id
                """
            )
            return [_row_to_shift(r) for r in fetchall(cur)]
