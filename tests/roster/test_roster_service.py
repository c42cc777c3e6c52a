from __future__ import annotations

from datetime import date

import pytest

from src.hospital_admin.hospital_admin.core.enums import Role, ShiftStatus
from src.hospital_admin.hospital_admin.core.exceptions import AuthorizationError, LoadError, StoreError
from src.hospital_admin.hospital_admin.roster.service import RosterService, ensure_can_view_roster
from src.hospital_admin.hospital_admin.shifts.static_shift_repository import StaticShiftRepository
from src.hospital_admin.hospital_admin.staff.static_staff_repository import StaticStaffRepository

TODAY = date(2026, 3, 4)  # Wednesday


class BrokenStaff:
    def list_all(self):
        raise StoreError("connection refused")


@pytest.fixture
def service() -> RosterService:
    return RosterService(StaticStaffRepository(), StaticShiftRepository(today=TODAY))


def test_roster_marks_on_duty_staff(service, fixed_now):
    entries = {e.staff.staff_id: e for e in service.roster(now=fixed_now)}

    assert len(entries) == 6
    assert entries["staff1"].duty.on_duty is True
    assert str(entries["staff1"].duty.remaining) == "15h 30m"
    assert str(entries["staff3"].duty.remaining) == "18h 30m"
    # Emergency overnight shifts only run on even week days.
    assert entries["staff4"].duty.on_duty is False
    assert entries["staff5"].duty.shift is None


def test_roster_applies_search_and_department(service, fixed_now):
    entries = service.roster(search="nurse", department="ICU", now=fixed_now)
    assert [e.staff.staff_id for e in entries] == ["staff3"]


def test_departments(service):
    assert service.departments() == ["Cardiology", "Neurology", "ICU", "Emergency", "Radiology", "Pediatrics"]


def test_schedule_for_today(service, fixed_now):
    view = service.schedule(TODAY, now=fixed_now)

    assert [i.shift.start_time for i in view.items] == ["06:00", "07:00"]
    assert [i.staff.staff_id for i in view.items] == ["staff3", "staff1"]
    assert str(view.items[0].remaining) == "18h 30m"
    assert (view.summary.on_duty, view.summary.scheduled, view.summary.total) == (2, 0, 2)
    assert [m.staff_id for m, _ in view.coverage["Cardiology"].active_shifts] == ["staff1"]
    assert view.coverage["Radiology"].total_shifts == 0


def test_schedule_for_past_sunday_is_sorted_and_completed(service, fixed_now):
    view = service.schedule(date(2026, 3, 1), now=fixed_now)

    assert [i.shift.start_time for i in view.items] == ["06:00", "07:00", "08:00", "18:00"]
    assert all(i.shift.status == ShiftStatus.COMPLETED for i in view.items)
    assert all(i.remaining is None for i in view.items)
    assert view.summary.total == 4
    assert view.summary.on_duty == 0


def test_schedule_for_future_day_counts_scheduled(service, fixed_now):
    view = service.schedule(date(2026, 3, 7), now=fixed_now)
    assert view.summary.scheduled == 4
    assert view.coverage["Neurology"].total_shifts == 1


def test_week_groups_current_week(service, fixed_now):
    week = service.week(now=fixed_now)
    assert list(week) == ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
    assert [s.start_time for s in week["Sunday"]] == ["06:00", "07:00", "08:00", "18:00"]


def test_load_failure_is_reported_as_load_error(fixed_now):
    service = RosterService(BrokenStaff(), StaticShiftRepository(today=TODAY))
    with pytest.raises(LoadError):
        service.roster(now=fixed_now)


@pytest.mark.parametrize("role", [Role.ADMIN, Role.DOCTOR, Role.NURSE])
def test_medical_staff_can_view_roster(role):
    ensure_can_view_roster(role)


@pytest.mark.parametrize("role", [Role.PATIENT, Role.TECHNICIAN, None])
def test_other_roles_cannot_view_roster(role):
    with pytest.raises(AuthorizationError):
        ensure_can_view_roster(role)
