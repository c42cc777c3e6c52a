"""Roster aggregation over in-memory staff and shift collections.

Everything here is a pure function of its arguments. Wall-clock time is
always passed in as `now`, so callers that display remaining time must
re-evaluate on their own schedule.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import parse_hhmm, sunday_index
from ..core.enums import ShiftStatus
from ..shifts.model import ShiftRecord
from ..staff.model import StaffMember

WEEKDAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")


@dataclass(frozen=True)
class RemainingTime:
    hours: int
    minutes: int

    @property
    def total_minutes(self) -> int:
        return self.hours * 60 + self.minutes

    def __str__(self) -> str:
        if self.hours > 0:
            return f"{self.hours}h {self.minutes}m"
        return f"{self.minutes}m"


@dataclass(frozen=True)
class DutyStatus:
    on_duty: bool
    shift: Optional[ShiftRecord] = None
    remaining: Optional[RemainingTime] = None


OFF_DUTY = DutyStatus(on_duty=False)


@dataclass
class DepartmentCoverage:
    department: str
    total_shifts: int = 0
    active_shifts: list[tuple[StaffMember, ShiftRecord]] = field(default_factory=list)

    @property
    def on_duty(self) -> int:
        return len(self.active_shifts)


def list_departments(staff: Iterable[StaffMember]) -> list[str]:
    seen: dict[str, None] = {}
    for member in staff:
        seen.setdefault(member.department, None)
    return list(seen)


def filter_staff(staff: Iterable[StaffMember], search_term: str = "", department: str = "") -> list[StaffMember]:
    needle = (search_term or "").lower()
    return [
        m
        for m in staff
        if needle in m.search_text() and (not department or m.department == department)
    ]


def shifts_for_date(shifts: Iterable[ShiftRecord], work_date: date) -> list[ShiftRecord]:
    return [s for s in shifts if s.work_date == work_date]


def sort_by_start_time(shifts: Iterable[ShiftRecord]) -> list[ShiftRecord]:
    # "HH:MM" is zero-padded, so string order is time order.
    return sorted(shifts, key=lambda s: s.start_time)


def compute_remaining(end_time: str, now: datetime) -> RemainingTime:
    end_at = datetime.combine(now.date(), parse_hhmm(end_time), tzinfo=now.tzinfo)
    if end_at < now:
        end_at += timedelta(days=1)

    seconds = max(0, int((end_at - now).total_seconds()))
    hours, rest = divmod(seconds, 3600)
    return RemainingTime(hours=hours, minutes=rest // 60)


def current_duty_status(staff_id: str, todays_shifts: Iterable[ShiftRecord], now: datetime) -> DutyStatus:
    shift = next(
        (s for s in todays_shifts if s.staff_id == staff_id and s.status == ShiftStatus.ACTIVE),
        None,
    )
    if shift is None:
        return OFF_DUTY
    return DutyStatus(on_duty=True, shift=shift, remaining=compute_remaining(shift.end_time, now))


def department_coverage(
    shifts: Iterable[ShiftRecord],
    staff: Sequence[StaffMember],
    work_date: date,
) -> dict[str, DepartmentCoverage]:
    by_id = {m.staff_id: m for m in staff}
    coverage = {d: DepartmentCoverage(d) for d in list_departments(staff)}

    for shift in shifts_for_date(shifts, work_date):
        group = coverage.setdefault(shift.department, DepartmentCoverage(shift.department))
        group.total_shifts += 1
        if shift.is_active:
            member = by_id.get(shift.staff_id)
            if member is not None:
                group.active_shifts.append((member, shift))

    return coverage


def group_by_weekday(shifts: Iterable[ShiftRecord]) -> dict[str, list[ShiftRecord]]:
    """Group shifts by day of week, Sunday first. Days without shifts are omitted."""
    buckets: dict[int, list[ShiftRecord]] = {}
    for s in shifts:
        buckets.setdefault(sunday_index(s.work_date), []).append(s)
    return {WEEKDAY_NAMES[i]: buckets[i] for i in sorted(buckets)}
