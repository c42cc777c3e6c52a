from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .common.datetime_utils import now_local
from .database.connection import DBConfig, DatabaseConnection
from .messages.feed import MessageFeed
from .messages.mysql_message_repository import MySQLMessageRepository
from .messages.repository import MessageRepository
from .messages.service import MessageService
from .roster.service import RosterService
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .shifts.repository import ShiftRepository
from .shifts.static_shift_repository import StaticShiftRepository
from .staff.mysql_staff_repository import MySQLStaffRepository
from .staff.repository import StaffRepository
from .staff.static_staff_repository import StaticStaffRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    messages_repo: MessageRepository
    staff_repo: StaffRepository
    shifts_repo: ShiftRepository

    message_feed: MessageFeed
    message_service: MessageService
    roster_service: RosterService


def assemble(
    *,
    users_repo: UserRepository,
    messages_repo: MessageRepository,
    staff_repo: StaffRepository,
    shifts_repo: ShiftRepository,
    conn: Optional[DatabaseConnection] = None,
    now_fn: Callable[[], datetime] = now_local,
) -> Container:
    feed = MessageFeed(messages_repo)
    return Container(
        conn=conn,
        users_repo=users_repo,
        messages_repo=messages_repo,
        staff_repo=staff_repo,
        shifts_repo=shifts_repo,
        message_feed=feed,
        message_service=MessageService(messages_repo, users_repo, feed, now_fn=now_fn),
        roster_service=RosterService(staff_repo, shifts_repo),
    )


def build_container(*, db_config: dict, roster_source: str = "static") -> Container:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))

    if roster_source == "mysql":
        staff_repo: StaffRepository = MySQLStaffRepository(conn)
        shifts_repo: ShiftRepository = MySQLShiftRepository(conn)
    elif roster_source == "static":
        staff_repo = StaticStaffRepository()
        shifts_repo = StaticShiftRepository()
    else:
        raise ValueError(f"Unknown ROSTER_SOURCE: {roster_source!r}")

    return assemble(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        messages_repo=MySQLMessageRepository(conn),
        staff_repo=staff_repo,
        shifts_repo=shifts_repo,
    )
