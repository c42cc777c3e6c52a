from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.enums import ShiftStatus


@dataclass(frozen=True)
class ShiftRecord:
    """Domain entity: one shift of one staff member on one calendar date.

    start_time/end_time are zero-padded 24-hour "HH:MM" strings; an end
    earlier than the start means the shift runs past midnight.
    """

    shift_id: str
    staff_id: str
    work_date: date
    start_time: str
    end_time: str
    status: ShiftStatus
    shift_type: str = "regular"
    department: str = ""

    @property
    def is_active(self) -> bool:
        return self.status == ShiftStatus.ACTIVE

    @property
    def is_overnight(self) -> bool:
        return self.end_time < self.start_time
