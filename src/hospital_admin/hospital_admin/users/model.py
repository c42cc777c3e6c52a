from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an application user (message sender/recipient)."""

    user_id: int
    email: str
    name: str
    role: Role
