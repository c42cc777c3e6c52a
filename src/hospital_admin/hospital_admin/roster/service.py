from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import now_local, week_start
from ..core.enums import ROSTER_VIEWER_ROLES, Role, ShiftStatus
from ..core.exceptions import AuthorizationError, LoadError, StoreError
from ..shifts.model import ShiftRecord
from ..shifts.repository import ShiftRepository
from ..staff.model import StaffMember
from ..staff.repository import StaffRepository
from .aggregator import (
    DepartmentCoverage,
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

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RosterEntry:
    staff: StaffMember
    duty: DutyStatus


@dataclass(frozen=True)
class ScheduleItem:
    staff: StaffMember
    shift: ShiftRecord
    remaining: Optional[RemainingTime] = None


@dataclass(frozen=True)
class ScheduleSummary:
    on_duty: int
    scheduled: int
    total: int


@dataclass(frozen=True)
class ScheduleView:
    work_date: date
    items: list[ScheduleItem]
    summary: ScheduleSummary
    coverage: dict[str, DepartmentCoverage]


def ensure_can_view_roster(role: Optional[Role]) -> None:
    if role not in ROSTER_VIEWER_ROLES:
        raise AuthorizationError("Only medical staff can view the staff roster")


class RosterService:
    """Use cases behind the staff roster and schedule screens."""

    def __init__(self, staff: StaffRepository, shifts: ShiftRepository):
        self._staff = staff
        self._shifts = shifts

    def _load(self) -> tuple[Sequence[StaffMember], Sequence[ShiftRecord]]:
        try:
            return self._staff.list_all(), self._shifts.list_all()
        except StoreError as e:
            logger.exception("Failed to load roster data")
            raise LoadError("Failed to load staff roster") from e

    def departments(self) -> list[str]:
        staff, _ = self._load()
        return list_departments(staff)

    def roster(self, *, search: str = "", department: str = "", now: datetime | None = None) -> list[RosterEntry]:
        now = now or now_local()
        staff, shifts = self._load()
        todays = shifts_for_date(shifts, now.date())
        return [
            RosterEntry(staff=m, duty=current_duty_status(m.staff_id, todays, now))
            for m in filter_staff(staff, search, department)
        ]

    def schedule(self, work_date: date, *, now: datetime | None = None) -> ScheduleView:
        now = now or now_local()
        staff, shifts = self._load()
        by_id = {m.staff_id: m for m in staff}
        day_shifts = shifts_for_date(shifts, work_date)

        items: list[ScheduleItem] = []
        for shift in sort_by_start_time(day_shifts):
            member = by_id.get(shift.staff_id)
            if member is None:
                continue
            remaining = compute_remaining(shift.end_time, now) if shift.is_active else None
            items.append(ScheduleItem(staff=member, shift=shift, remaining=remaining))

        summary = ScheduleSummary(
            on_duty=sum(1 for s in day_shifts if s.status == ShiftStatus.ACTIVE),
            scheduled=sum(1 for s in day_shifts if s.status == ShiftStatus.SCHEDULED),
            total=len(day_shifts),
        )
        return ScheduleView(
            work_date=work_date,
            items=items,
            summary=summary,
            coverage=department_coverage(day_shifts, staff, work_date),
        )

    def week(self, *, now: datetime | None = None) -> dict[str, list[ShiftRecord]]:
        now = now or now_local()
        _, shifts = self._load()
        start = week_start(now.date())
        end = start + timedelta(days=6)
        in_week = [s for s in shifts if start <= s.work_date <= end]
        return group_by_weekday(sort_by_start_time(in_week))
