from __future__ import annotations

from typing import Protocol, Sequence

from .model import StaffMember


class StaffRepository(Protocol):
    """Roster data source for staff members (static mock data or MySQL)."""

    def list_all(self) -> Sequence[StaffMember]:
        raise NotImplementedError
