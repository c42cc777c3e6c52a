from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable, Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty, require_positive_id
from ..core.constants import REPLY_PREFIX
from ..core.enums import RECIPIENT_ROLES, Role
from ..core.exceptions import LoadError, NotFoundError, StoreError, WriteError
from ..users.model import User
from ..users.repository import UserRepository
from .feed import MessageFeed, MessageSubscription
from .model import Message
from .repository import MessageRepository

logger = logging.getLogger(__name__)

NowFn = Callable[[], datetime]


def sort_newest_first(messages: Iterable[Message]) -> list[Message]:
    # sorted() is stable, so equal timestamps keep their incoming order.
    return sorted(messages, key=lambda m: m.created_at, reverse=True)


def filter_by_search(messages: Iterable[Message], term: str) -> list[Message]:
    needle = (term or "").lower()
    return [m for m in messages if needle in m.subject.lower() or needle in m.content.lower()]


def recipient_candidates(users: Iterable[User]) -> dict[Role, list[User]]:
    """Group users for the recipient selector: admin, doctor, nurse; empty groups omitted."""
    groups: dict[Role, list[User]] = {role: [] for role in RECIPIENT_ROLES}
    for user in users:
        if user.role in groups:
            groups[user.role].append(user)
    return {role: members for role, members in groups.items() if members}


class MessageSession:
    """Messaging state for one signed-in user.

    Owns a cache of the user's messages; the store stays the source of
    truth. Cache mutations happen under a lock so concurrent requests apply
    them one at a time. Use as a context manager so the feed subscription is
    always released.
    """

    def __init__(
        self,
        user_id: int,
        messages: MessageRepository,
        feed: MessageFeed,
        *,
        now_fn: NowFn = now_local,
    ):
        self._user_id = int(user_id)
        self._messages = messages
        self._feed = feed
        self._now = now_fn
        self._cache: list[Message] = []
        self._lock = threading.Lock()
        self._subscription: Optional[MessageSubscription] = None

    @property
    def user_id(self) -> int:
        return self._user_id

    @property
    def subscription(self) -> Optional[MessageSubscription]:
        return self._subscription

    def start(self, *, after_id: Optional[int] = None, preload: bool = True) -> "MessageSession":
        # Subscribe before loading; anything inserted in between is de-duplicated.
        self._subscription = self._feed.subscribe(self._user_id, after_id=after_id)
        try:
            if preload:
                self.refresh()
        except Exception:
            self.close()
            raise
        return self

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None

    def __enter__(self) -> "MessageSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _stamp(self) -> datetime:
        # DATETIME columns keep whole seconds.
        return self._now().replace(microsecond=0)

    def refresh(self) -> list[Message]:
        try:
            loaded = list(self._messages.list_for_user(self._user_id))
        except StoreError as e:
            logger.exception("Error fetching messages for user %s", self._user_id)
            raise LoadError("Failed to load messages") from e

        with self._lock:
            self._cache = sort_newest_first(loaded)
            return list(self._cache)

    def list_inbox(self) -> list[Message]:
        with self._lock:
            return sort_newest_first(self._cache)

    def search(self, term: str) -> list[Message]:
        return filter_by_search(self.list_inbox(), term)

    def find(self, message_id: int) -> Message:
        """Cached message by id, else the stored one if this user sent or received it."""
        message_id = int(message_id)
        with self._lock:
            for m in self._cache:
                if m.message_id == message_id:
                    return m

        try:
            stored = self._messages.get_by_id(message_id)
        except StoreError as e:
            logger.exception("Error fetching message %s", message_id)
            raise LoadError("Failed to load message") from e
        if stored is None or not stored.involves(self._user_id):
            raise NotFoundError("Message not found")

        self._prepend(stored)
        return stored

    def _prepend(self, message: Message) -> bool:
        with self._lock:
            if any(m.message_id == message.message_id for m in self._cache):
                return False
            self._cache.insert(0, message)
            return True

    def compose(self, recipient_id, subject: str, content: str) -> Message:
        receiver_id = require_positive_id(recipient_id, "Recipient")
        subject = require_non_empty(subject, "Subject")
        content = require_non_empty(content, "Message")

        created_at = self._stamp()
        try:
            message_id = self._messages.insert(
                sender_id=self._user_id,
                receiver_id=receiver_id,
                subject=subject,
                content=content,
                created_at=created_at,
            )
        except StoreError as e:
            logger.exception("Error sending message from %s to %s", self._user_id, receiver_id)
            raise WriteError("Failed to send message") from e

        message = Message(
            message_id=int(message_id),
            sender_id=self._user_id,
            receiver_id=receiver_id,
            subject=subject,
            content=content,
            created_at=created_at,
        )
        self._prepend(message)
        logger.info("Message %s sent from %s to %s", message.message_id, self._user_id, receiver_id)
        return message

    def open(self, message: Message) -> Message:
        if message.receiver_id != self._user_id or message.read:
            return message

        read_at = self._stamp()
        try:
            ok = self._messages.mark_read(message_id=message.message_id, read_at=read_at)
        except StoreError as e:
            logger.exception("Error marking message %s as read", message.message_id)
            raise WriteError("Failed to mark message as read") from e
        if not ok:
            raise WriteError("Failed to mark message as read")

        updated = replace(message, read_at=read_at)
        with self._lock:
            self._cache = [updated if m.message_id == message.message_id else m for m in self._cache]
        logger.debug("Message %s marked read by %s", message.message_id, self._user_id)
        return updated

    def reply(self, original: Message, content: str) -> Message:
        return self.compose(original.sender_id, REPLY_PREFIX + original.subject, content)

    def apply_insert(self, message: Message) -> bool:
        """Apply one feed insert event. Returns False for messages already cached."""
        return self._prepend(message)

    def pull_updates(self) -> list[Message]:
        if self._subscription is None:
            return []
        return [m for m in self._subscription.poll() if self.apply_insert(m)]


class MessageService:
    """Entry point for the messaging screens."""

    def __init__(
        self,
        messages: MessageRepository,
        users: UserRepository,
        feed: Optional[MessageFeed] = None,
        *,
        now_fn: NowFn = now_local,
    ):
        self._messages = messages
        self._users = users
        self._feed = feed or MessageFeed(messages)
        self._now = now_fn

    def open_session(
        self,
        user_id: int,
        *,
        after_id: Optional[int] = None,
        preload: bool = True,
    ) -> MessageSession:
        session = MessageSession(user_id, self._messages, self._feed, now_fn=self._now)
        return session.start(after_id=after_id, preload=preload)

    def recipients(self) -> dict[Role, list[User]]:
        try:
            users = self._users.list_by_roles(RECIPIENT_ROLES)
        except StoreError as e:
            logger.exception("Error fetching users")
            raise LoadError("Failed to load recipients") from e
        return recipient_candidates(users)
