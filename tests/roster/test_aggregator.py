from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from src.hospital_admin.hospital_admin.core.enums import Role, ShiftStatus
from src.hospital_admin.hospital_admin.roster.aggregator import (
    DutyStatus,
    RemainingTime,
    compute_remaining,
    current_duty_status,
    department_coverage,
    filter_staff,
    group_by_weekday,
    list_departments,
    shifts_for_date,
    sort_by_start_time,
)
from src.hospital_admin.hospital_admin.shifts.model import ShiftRecord
from src.hospital_admin.hospital_admin.staff.model import StaffMember

DAY = date(2026, 3, 4)

STAFF = [
    StaffMember("s1", "Sarah", "Johnson", Role.DOCTOR, "Cardiology"),
    StaffMember("s2", "James", "Wilson", Role.DOCTOR, "Neurology"),
    StaffMember("s3", "Robert", "Chen", Role.NURSE, "ICU"),
    StaffMember("s4", "Maria", "Rodriguez", Role.NURSE, "Emergency"),
    StaffMember("s5", "Lisa", "Thompson", Role.NURSE, "Cardiology"),
]


def _shift(shift_id, staff_id, start, end, status=ShiftStatus.SCHEDULED, department="Cardiology", day=DAY):
    return ShiftRecord(shift_id, staff_id, day, start, end, status, "regular", department)


def test_filter_staff_matches_name_role_and_department_case_insensitively():
    assert [m.staff_id for m in filter_staff(STAFF, "NURSE")] == ["s3", "s4", "s5"]
    assert [m.staff_id for m in filter_staff(STAFF, "cardio")] == ["s1", "s5"]
    assert [m.staff_id for m in filter_staff(STAFF, "sarah johnson")] == ["s1"]


def test_filter_staff_empty_term_returns_everyone_in_order():
    assert filter_staff(STAFF, "", "") == STAFF


def test_filter_staff_department_is_exact_match():
    assert [m.staff_id for m in filter_staff(STAFF, "", "Cardiology")] == ["s1", "s5"]
    assert filter_staff(STAFF, "", "cardiology") == []
    assert [m.staff_id for m in filter_staff(STAFF, "lisa", "Cardiology")] == ["s5"]


def test_filter_staff_no_match_is_empty():
    assert filter_staff(STAFF, "surgeon") == []


def test_filter_staff_term_can_span_fields():
    # "doctor neurology" spans role and department with the joining space.
    assert [m.staff_id for m in filter_staff(STAFF, "doctor neurology")] == ["s2"]


def test_list_departments_first_occurrence_order():
    assert list_departments(STAFF) == ["Cardiology", "Neurology", "ICU", "Emergency"]


def test_shifts_for_date_keeps_order_and_sort_by_start_time():
    shifts = [
        _shift("a", "s1", "18:00", "06:00"),
        _shift("b", "s2", "07:00", "15:00", day=date(2026, 3, 5)),
        _shift("c", "s3", "06:00", "18:00"),
    ]
    todays = shifts_for_date(shifts, DAY)
    assert [s.shift_id for s in todays] == ["a", "c"]
    assert [s.shift_id for s in sort_by_start_time(todays)] == ["c", "a"]


def test_overnight_end_is_next_day():
    remaining = compute_remaining("06:00", datetime(2026, 3, 4, 23, 30))
    assert remaining == RemainingTime(hours=6, minutes=30)
    assert str(remaining) == "6h 30m"


def test_remaining_floors_minutes():
    remaining = compute_remaining("15:00", datetime(2026, 3, 4, 14, 20, 45))
    assert remaining == RemainingTime(hours=0, minutes=39)
    assert str(remaining) == "39m"


def test_remaining_same_day():
    assert str(compute_remaining("15:00", datetime(2026, 3, 4, 7, 0))) == "8h 0m"


def test_end_equal_to_now_is_zero():
    assert str(compute_remaining("15:00", datetime(2026, 3, 4, 15, 0))) == "0m"


def test_remaining_keeps_timezone():
    now = datetime(2026, 3, 4, 23, 0, tzinfo=timezone.utc)
    assert compute_remaining("01:15", now) == RemainingTime(hours=2, minutes=15)


def test_no_active_shift_means_off_duty(fixed_now):
    shifts = [
        _shift("a", "s1", "07:00", "15:00", ShiftStatus.COMPLETED),
        _shift("b", "s2", "07:00", "15:00", ShiftStatus.ACTIVE),
    ]
    assert current_duty_status("s1", shifts, fixed_now) == DutyStatus(on_duty=False, shift=None, remaining=None)
    assert current_duty_status("nobody", shifts, fixed_now).on_duty is False


def test_active_shift_picks_first_match(fixed_now):
    first = _shift("a", "s4", "18:00", "06:00", ShiftStatus.ACTIVE, "Emergency")
    second = _shift("b", "s4", "20:00", "23:45", ShiftStatus.ACTIVE, "Emergency")

    status = current_duty_status("s4", [first, second], fixed_now)

    assert status.on_duty is True
    assert status.shift is first
    assert str(status.remaining) == "6h 30m"


def test_department_coverage_counts_and_resolves_staff():
    shifts = [
        _shift("a", "s1", "07:00", "15:00", ShiftStatus.ACTIVE, "Cardiology"),
        _shift("b", "s5", "15:00", "23:00", ShiftStatus.SCHEDULED, "Cardiology"),
        _shift("c", "ghost", "07:00", "19:00", ShiftStatus.ACTIVE, "Cardiology"),
        _shift("d", "s3", "06:00", "18:00", ShiftStatus.ACTIVE, "ICU"),
        _shift("e", "s2", "08:00", "20:00", ShiftStatus.ACTIVE, "Neurology", day=date(2026, 3, 5)),
    ]

    coverage = department_coverage(shifts, STAFF, DAY)

    assert list(coverage) == ["Cardiology", "Neurology", "ICU", "Emergency"]
    cardio = coverage["Cardiology"]
    assert cardio.total_shifts == 3
    # Active shift for an unknown staff id is dropped, not fatal.
    assert [(m.staff_id, s.shift_id) for m, s in cardio.active_shifts] == [("s1", "a")]
    assert coverage["Neurology"].total_shifts == 0
    assert coverage["ICU"].on_duty == 1
    assert coverage["Emergency"].active_shifts == []


def test_department_coverage_includes_shift_only_departments():
    shifts = [_shift("a", "s1", "07:00", "15:00", ShiftStatus.ACTIVE, "Oncology")]
    coverage = department_coverage(shifts, STAFF, DAY)
    assert list(coverage)[-1] == "Oncology"
    assert coverage["Oncology"].total_shifts == 1


def test_group_by_weekday_sunday_first():
    shifts = [
        _shift("mon", "s1", "07:00", "15:00", day=date(2026, 3, 2)),
        _shift("sun", "s1", "07:00", "15:00", day=date(2026, 3, 1)),
        _shift("sat", "s1", "07:00", "15:00", day=date(2026, 3, 7)),
        _shift("mon2", "s2", "08:00", "16:00", day=date(2026, 3, 2)),
    ]
    grouped = group_by_weekday(shifts)
    assert list(grouped) == ["Sunday", "Monday", "Saturday"]
    assert [s.shift_id for s in grouped["Monday"]] == ["mon", "mon2"]


@pytest.mark.parametrize(
    "role, expected",
    [(Role.DOCTOR, "Dr. Sarah Johnson"), (Role.NURSE, "Sarah Johnson")],
)
def test_display_name(role, expected):
    member = StaffMember("x", "Sarah", "Johnson", role, "Cardiology")
    assert member.display_name == expected
    assert member.initials == "SJ"
