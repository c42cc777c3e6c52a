"""Example: use the service layer directly (no Flask, no database).

Prints who is on duty right now according to the demo roster.
"""

from datetime import datetime

from src.hospital_admin.hospital_admin.roster.service import RosterService
from src.hospital_admin.hospital_admin.shifts.static_shift_repository import StaticShiftRepository
from src.hospital_admin.hospital_admin.staff.static_staff_repository import StaticStaffRepository


def main():
    now = datetime.now()
    service = RosterService(StaticStaffRepository(), StaticShiftRepository(today=now.date()))
    for entry in service.roster(now=now):
        if entry.duty.on_duty:
            print(f"{entry.staff.display_name:<24} until {entry.duty.shift.end_time} ({entry.duty.remaining} remaining)")


if __name__ == "__main__":
    main()
