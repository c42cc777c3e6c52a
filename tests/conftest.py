from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, Optional

import pytest

from src.hospital_admin.hospital_admin.core.enums import Role
from src.hospital_admin.hospital_admin.core.exceptions import StoreError
from src.hospital_admin.hospital_admin.messages.model import Message
from src.hospital_admin.hospital_admin.users.model import User


class InMemoryMessages:
    def __init__(self, messages: Iterable[Message] = ()):
        self._rows: dict[int, Message] = {m.message_id: m for m in messages}
        self._id = max(self._rows, default=0)
        self.fail_reads = False
        self.fail_writes = False
        self.inserts = 0

    def list_for_user(self, user_id: int):
        if self.fail_reads:
            raise StoreError("connection lost")
        items = [m for m in self._rows.values() if m.involves(user_id)]
        items.sort(key=lambda m: (m.created_at, m.message_id), reverse=True)
        return items

    def get_by_id(self, message_id: int) -> Optional[Message]:
        if self.fail_reads:
            raise StoreError("connection lost")
        return self._rows.get(message_id)

    def insert(self, *, sender_id, receiver_id, subject, content, created_at) -> int:
        if self.fail_writes:
            raise StoreError("insert rejected")
        self._id += 1
        self.inserts += 1
        self._rows[self._id] = Message(self._id, sender_id, receiver_id, subject, content, created_at)
        return self._id

    def mark_read(self, *, message_id: int, read_at: datetime) -> bool:
        if self.fail_writes:
            raise StoreError("update rejected")
        msg = self._rows.get(message_id)
        if msg is None:
            return False
        self._rows[message_id] = Message(
            msg.message_id, msg.sender_id, msg.receiver_id, msg.subject, msg.content, msg.created_at, read_at
        )
        return True

    def list_received_after(self, *, receiver_id: int, after_id: int):
        if self.fail_reads:
            raise StoreError("connection lost")
        return sorted(
            (m for m in self._rows.values() if m.receiver_id == receiver_id and m.message_id > after_id),
            key=lambda m: m.message_id,
        )

    def max_message_id(self) -> int:
        return max(self._rows, default=0)


class InMemoryUsers:
    def __init__(self, users: Iterable[User] = ()):
        self._users = list(users)
        self.fail_reads = False

    def get_by_id(self, user_id: int) -> Optional[User]:
        return next((u for u in self._users if u.user_id == user_id), None)

    def list_by_roles(self, roles):
        if self.fail_reads:
            raise StoreError("connection lost")
        wanted = set(roles)
        return sorted((u for u in self._users if u.role in wanted), key=lambda u: u.role.value)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 4, 23, 30, 0)


@pytest.fixture
def messages_repo() -> InMemoryMessages:
    return InMemoryMessages(
        [
            Message(1, 1, 2, "Staff meeting", "Friday at 9:00 in room 204", datetime(2026, 3, 1, 8, 15)),
            Message(2, 3, 2, "Follow-up", "Bed 12 asked about discharge", datetime(2026, 3, 2, 10, 40)),
            Message(3, 2, 3, "Lab results", "Ready for review", datetime(2026, 3, 2, 11, 0)),
            Message(4, 3, 1, "Supplies", "Gloves are low on ward B", datetime(2026, 3, 3, 9, 0)),
        ]
    )


@pytest.fixture
def users_repo() -> InMemoryUsers:
    return InMemoryUsers(
        [
            User(1, "admin@hospital.com", "Admin User", Role.ADMIN),
            User(2, "dr.sarah@hospital.com", "Sarah Johnson", Role.DOCTOR),
            User(3, "nurse.robert@hospital.com", "Robert Chen", Role.NURSE),
            User(4, "patient.john@example.com", "John Smith", Role.PATIENT),
            User(5, "dr.wilson@hospital.com", "James Wilson", Role.DOCTOR),
            User(7, "tech.david@hospital.com", "David Kim", Role.TECHNICIAN),
        ]
    )


@pytest.fixture
def busy_inbox_repo() -> InMemoryMessages:
    """601 messages from user 3 to user 2, one minute apart, ids oldest first."""
    start = datetime(2025, 1, 1, 8, 0)
    return InMemoryMessages(
        Message(i, 3, 2, f"Note {i}", "body", start + timedelta(minutes=i)) for i in range(1, 602)
    )
