"""Change feed for newly inserted messages.

A subscription is a cancellable handle: acquire it with
`MessageFeed.subscribe`, drain it with `poll()`, release it with `close()`
(or use it as a context manager). The store has no push channel, so the
feed keeps a message_id cursor and reads inserts past it on every poll.
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from ..core.exceptions import LoadError, StoreError
from .model import Message
from .repository import MessageRepository

logger = logging.getLogger(__name__)


class SubscriptionClosed(RuntimeError):
    pass


class MessageSubscription:
    """Insert events for one receiver, delivered oldest first."""

    def __init__(self, messages: MessageRepository, *, receiver_id: int, after_id: int):
        self._messages = messages
        self._receiver_id = int(receiver_id)
        self._cursor = int(after_id)
        self._closed = False
        self._lock = threading.Lock()

    @property
    def receiver_id(self) -> int:
        return self._receiver_id

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def closed(self) -> bool:
        return self._closed

    def poll(self) -> list[Message]:
        with self._lock:
            if self._closed:
                raise SubscriptionClosed("subscription already closed")
            try:
                inserted = list(
                    self._messages.list_received_after(receiver_id=self._receiver_id, after_id=self._cursor)
                )
            except StoreError as e:
                logger.exception("Polling message feed failed for receiver %s", self._receiver_id)
                raise LoadError("Failed to load new messages") from e

            if inserted:
                self._cursor = max(m.message_id for m in inserted)
            return inserted

    def close(self) -> None:
        with self._lock:
            if not self._closed:
                self._closed = True
                logger.debug("Message feed closed for receiver %s", self._receiver_id)

    def __enter__(self) -> "MessageSubscription":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class MessageFeed:
    """Hands out subscriptions filtered on receiver_id, insert events only."""

    def __init__(self, messages: MessageRepository):
        self._messages = messages

    def subscribe(self, receiver_id: int, *, after_id: Optional[int] = None) -> MessageSubscription:
        if after_id is None:
            try:
                after_id = self._messages.max_message_id()
            except StoreError as e:
                logger.exception("Cannot open message feed for receiver %s", receiver_id)
                raise LoadError("Failed to subscribe to new messages") from e

        logger.debug("Message feed opened for receiver %s at cursor %s", receiver_id, after_id)
        return MessageSubscription(self._messages, receiver_id=receiver_id, after_id=after_id)
