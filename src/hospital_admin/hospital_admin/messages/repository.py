from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import Message


class MessageRepository(Protocol):
    def list_for_user(self, user_id: int) -> Sequence[Message]:
        """Every message sent or received by the user, newest first."""
        raise NotImplementedError

    def get_by_id(self, message_id: int) -> Optional[Message]:
        raise NotImplementedError

    def insert(
        self,
        *,
        sender_id: int,
        receiver_id: int,
        subject: str,
        content: str,
        created_at: datetime,
    ) -> int:
        """Insert an unread message. Returns message_id."""
        raise NotImplementedError

    def mark_read(self, *, message_id: int, read_at: datetime) -> bool:
        raise NotImplementedError

    def list_received_after(self, *, receiver_id: int, after_id: int) -> Sequence[Message]:
        """Messages for the receiver with message_id > after_id, oldest first."""
        raise NotImplementedError

    def max_message_id(self) -> int:
        """Highest message_id in the store (0 when empty)."""
        raise NotImplementedError
