from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ..roster.mock_data import mock_staff
from .model import StaffMember
from .repository import StaffRepository


class StaticStaffRepository(StaffRepository):
    """In-memory staff source backed by a fixed list."""

    def __init__(self, members: Optional[Iterable[StaffMember]] = None):
        self._members = list(members) if members is not None else mock_staff()

    def list_all(self) -> Sequence[StaffMember]:
        return list(self._members)
