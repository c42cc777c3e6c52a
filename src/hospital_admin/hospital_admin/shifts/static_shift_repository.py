from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Sequence

from ..roster.mock_data import generate_week_shifts
from .model import ShiftRecord
from .repository import ShiftRepository


class StaticShiftRepository(ShiftRepository):
    """In-memory shift source.

    Without explicit shifts, generates the demo week around `today` once.
    """

    def __init__(self, shifts: Optional[Iterable[ShiftRecord]] = None, *, today: Optional[date] = None):
        if shifts is None:
            shifts = generate_week_shifts(today or date.today())
        self._shifts = list(shifts)

    def list_all(self) -> Sequence[ShiftRecord]:
        return list(self._shifts)
