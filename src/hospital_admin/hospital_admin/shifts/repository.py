from __future__ import annotations

from typing import Protocol, Sequence

from .model import ShiftRecord


class ShiftRepository(Protocol):
    def list_all(self) -> Sequence[ShiftRecord]:
        raise NotImplementedError
