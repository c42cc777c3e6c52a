from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def list_by_roles(self, roles: Iterable[Role]) -> Sequence[User]:
        """Users whose role is in `roles`, ordered by role."""
        raise NotImplementedError
