from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User/staff roles used for access rules and recipient grouping."""

    ADMIN = "admin"
    DOCTOR = "doctor"
    NURSE = "nurse"
    TECHNICIAN = "technician"
    PATIENT = "patient"


class ShiftStatus(str, Enum):
    """Shift status as assigned by the roster data source."""

    SCHEDULED = "scheduled"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def label(self) -> str:
        if self is ShiftStatus.ACTIVE:
            return "On Duty"
        return self.value.capitalize()


# Recipient selector groups, in display order.
RECIPIENT_ROLES: tuple[Role, ...] = (Role.ADMIN, Role.DOCTOR, Role.NURSE)

# Roles allowed to open the staff roster.
ROSTER_VIEWER_ROLES: frozenset[Role] = frozenset({Role.ADMIN, Role.DOCTOR, Role.NURSE})
