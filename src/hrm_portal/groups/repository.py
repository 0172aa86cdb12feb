from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Group


class GroupRepository(Protocol):
    def get_by_id(self, group_id: int) -> Optional[Group]:
        raise NotImplementedError

    def list_groups(self) -> Sequence[Group]:
        """All groups ordered by level, then name."""
        raise NotImplementedError

    def list_children(self, group_id: int) -> Sequence[Group]:
        raise NotImplementedError

    def list_managed_by(self, manager_id: int) -> Sequence[Group]:
        raise NotImplementedError

    def list_member_ids(self, group_id: int) -> Sequence[int]:
        raise NotImplementedError

    def is_member(self, group_id: int, user_id: int) -> bool:
        raise NotImplementedError

    def create_group(
        self,
        *,
        name: str,
        description: Optional[str],
        level: int,
        manager_id: Optional[int],
        parent_group_id: Optional[int],
    ) -> int:
        raise NotImplementedError

    def update_group(self, group_id: int, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def add_member(self, group_id: int, user_id: int) -> bool:
        """False when the user already belongs to the group."""
        raise NotImplementedError

    def remove_member(self, group_id: int, user_id: int) -> bool:
        raise NotImplementedError
