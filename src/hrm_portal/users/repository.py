from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import Role, UserStatus
from .model import User


class UserRepository(Protocol):
    """Repository interface for users.

    Services depend on this protocol, never on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def find_conflict(self, *, username: Optional[str], email: Optional[str], exclude_user_id: Optional[int] = None) -> Optional[User]:
        """Another account already using ``username`` or ``email``."""
        raise NotImplementedError

    def list_by_ids(self, user_ids: Sequence[int]) -> Sequence[User]:
        raise NotImplementedError

    def list_users(self, *, search: str = "", limit: int = 200) -> Sequence[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        username: str,
        email: str,
        password_hash: str,
        first_name: str,
        last_name: str,
        role: Role,
        status: UserStatus,
        profile: Optional[Mapping[str, Any]] = None,
    ) -> int:
        raise NotImplementedError

    def update_fields(self, user_id: int, fields: Mapping[str, Any]) -> bool:
        """Update the given columns; returns False for an unknown user."""
        raise NotImplementedError

    def update_password(self, user_id: int, password_hash: str) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError

    def add_leave_days_to_active(self, amount: float) -> int:
        """Credit ``amount`` leave days to every active user; returns the count updated."""
        raise NotImplementedError
