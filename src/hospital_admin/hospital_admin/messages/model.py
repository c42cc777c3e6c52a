from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Message:
    """Domain entity: a staff message.

    Unread until `read_at` is set; the transition is one way.
    """

    message_id: int
    sender_id: int
    receiver_id: int
    subject: str
    content: str
    created_at: datetime
    read_at: Optional[datetime] = None

    @property
    def read(self) -> bool:
        return self.read_at is not None

    def involves(self, user_id: int) -> bool:
        return user_id in (self.sender_id, self.receiver_id)
