"""Demo roster: six staff members and a generated week of shifts.

The week starts on Sunday. Shifts before today are completed, today's are
active and later ones are scheduled.
"""
from __future__ import annotations

from datetime import date, timedelta

from ..common.datetime_utils import sunday_index, week_start
from ..core.enums import Role, ShiftStatus
from ..shifts.model import ShiftRecord
from ..staff.model import StaffMember


def mock_staff() -> list[StaffMember]:
    return [
        StaffMember("staff1", "Sarah", "Johnson", Role.DOCTOR, "Cardiology",
                    "555-4321", "dr.sarah@hospital.com", "EMP001", user_id=2),
        StaffMember("staff2", "James", "Wilson", Role.DOCTOR, "Neurology",
                    "555-8642", "dr.wilson@hospital.com", "EMP002", user_id=5),
        StaffMember("staff3", "Robert", "Chen", Role.NURSE, "ICU",
                    "555-7890", "nurse.robert@hospital.com", "EMP003", user_id=3),
        StaffMember("staff4", "Maria", "Rodriguez", Role.NURSE, "Emergency",
                    "555-3456", "nurse.maria@hospital.com", "EMP004", user_id=6),
        StaffMember("staff5", "David", "Kim", Role.TECHNICIAN, "Radiology",
                    "555-6789", "tech.david@hospital.com", "EMP005", user_id=7),
        StaffMember("staff6", "Lisa", "Thompson", Role.NURSE, "Pediatrics",
                    "555-2345", "nurse.lisa@hospital.com", "EMP006", user_id=8),
    ]


def _status_for(day_offset: int, today_offset: int) -> ShiftStatus:
    if day_offset < today_offset:
        return ShiftStatus.COMPLETED
    if day_offset == today_offset:
        return ShiftStatus.ACTIVE
    return ShiftStatus.SCHEDULED


def generate_week_shifts(today: date) -> list[ShiftRecord]:
    start = week_start(today)
    today_offset = sunday_index(today)
    shifts: list[ShiftRecord] = []

    for offset in range(7):
        day = start + timedelta(days=offset)
        status = _status_for(offset, today_offset)

        # Morning
        shifts.append(ShiftRecord(f"shift_{offset}_1", "staff1", day, "07:00", "15:00", status, "regular", "Cardiology"))
        shifts.append(ShiftRecord(f"shift_{offset}_2", "staff3", day, "06:00", "18:00", status, "regular", "ICU"))

        # Overnight, every other day
        if offset % 2 == 0:
            shifts.append(ShiftRecord(f"shift_{offset}_3", "staff4", day, "18:00", "06:00", status, "regular", "Emergency"))

        # Weekend
        if offset in (0, 6):
            shifts.append(ShiftRecord(f"shift_{offset}_4", "staff2", day, "08:00", "20:00", status, "regular", "Neurology"))

    return shifts
