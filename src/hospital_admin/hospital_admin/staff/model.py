from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class StaffMember:
    """Domain entity: a member of the hospital staff.

    Plain data object; immutable for the lifetime of a session.
    """

    staff_id: str
    first_name: str
    last_name: str
    role: Role
    department: str
    contact_number: str = ""
    email: str = ""
    employee_id: str = ""
    user_id: Optional[int] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def display_name(self) -> str:
        prefix = "Dr. " if self.role == Role.DOCTOR else ""
        return prefix + self.full_name

    @property
    def initials(self) -> str:
        return f"{self.first_name[:1]}{self.last_name[:1]}"

    def search_text(self) -> str:
        return f"{self.first_name} {self.last_name} {self.role.value} {self.department}".lower()
