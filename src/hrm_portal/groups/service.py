from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ..common.validators import require_max_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import User
from ..users.repository import UserRepository
from .model import Group, GroupDetail
from .repository import GroupRepository

logger = logging.getLogger(__name__)

GROUP_ADMIN_ROLES = frozenset({Role.ADMIN, Role.LEVEL1, Role.LEVEL2})
GROUP_EDITOR_ROLES = frozenset({Role.ADMIN, Role.LEVEL1})

# Roles allowed to create a group of each level
_CREATE_ROLES = {
    1: GROUP_ADMIN_ROLES,
    2: frozenset({Role.ADMIN, Role.LEVEL1}),
    3: frozenset({Role.ADMIN, Role.LEVEL1, Role.LEVEL2}),
}

# Role handed to the manager of a group at each level
_MANAGER_ROLE = {1: Role.LEVEL1, 2: Role.LEVEL2}


@dataclass(frozen=True)
class NewGroup:
    name: str
    level: int
    description: Optional[str] = None
    manager_id: Optional[int] = None
    parent_group_id: Optional[int] = None


class GroupService:
    def __init__(self, groups: GroupRepository, users: UserRepository):
        self._groups = groups
        self._users = users

    def _require_group(self, group_id: int) -> Group:
        group = self._groups.get_by_id(int(group_id))
        if not group:
            raise NotFoundError("Group not found")
        return group

    def _require_user(self, user_id: int, message: str = "User not found") -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError(message)
        return user

    def _assign_manager(self, group: Group, manager_id: int) -> None:
        fields: dict = {"group_id": group.group_id}
        role = _MANAGER_ROLE.get(group.level)
        if role:
            fields["role"] = role
        self._users.update_fields(manager_id, fields)
        self._groups.add_member(group.group_id, manager_id)

    def _can_edit_members(self, actor: User, group: Group) -> bool:
        if actor.role in GROUP_EDITOR_ROLES:
            return True
        return actor.role == Role.LEVEL2 and group.manager_id == actor.user_id

    def create_group(self, actor: User, data: NewGroup) -> Group:
        if data.level not in _CREATE_ROLES:
            raise ValidationError("Level must be a number between 1 and 3")
        if actor.role not in _CREATE_ROLES[data.level]:
            raise AuthorizationError("Not authorized to create this group level")

        name = require_max_length(require_non_empty(data.name, "name"), "name", 150)

        if data.manager_id is not None:
            self._require_user(data.manager_id, "Manager not found")

        if data.parent_group_id is not None:
            parent = self._groups.get_by_id(data.parent_group_id)
            if not parent:
                raise NotFoundError("Parent group not found")
            if parent.level != data.level - 1:
                raise ValidationError("Parent group must be one level above this group")

        group_id = self._groups.create_group(
            name=name,
            description=(data.description or "").strip() or None,
            level=data.level,
            manager_id=data.manager_id,
            parent_group_id=data.parent_group_id,
        )
        group = self._require_group(group_id)
        if data.manager_id is not None:
            self._assign_manager(group, data.manager_id)

        logger.info("User %s created level-%d group %s (id=%s)", actor.user_id, group.level, group.name, group.group_id)
        return group

    def list_groups(self, actor: User) -> Sequence[Group]:
        if actor.role not in GROUP_ADMIN_ROLES:
            raise AuthorizationError("Not authorized to view all groups")
        return self._groups.list_groups()

    def get_group(self, actor: User, group_id: int) -> GroupDetail:
        group = self._require_group(group_id)
        visible = (
            actor.role in GROUP_ADMIN_ROLES
            or (actor.group_id is not None and actor.group_id in {group.group_id, group.parent_group_id})
            or self._groups.is_member(group.group_id, actor.user_id)
        )
        if not visible:
            raise AuthorizationError("Not authorized to view this group")

        return GroupDetail(
            group=group,
            manager=self._users.get_by_id(group.manager_id) if group.manager_id else None,
            parent=self._groups.get_by_id(group.parent_group_id) if group.parent_group_id else None,
            members=tuple(self._users.list_by_ids(self._groups.list_member_ids(group.group_id))),
            child_groups=tuple(self._groups.list_children(group.group_id)),
        )

    def update_group(
        self,
        actor: User,
        group_id: int,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        manager_id: Optional[int] = None,
    ) -> Group:
        if actor.role not in GROUP_EDITOR_ROLES:
            raise AuthorizationError("Not authorized to update this group")
        group = self._require_group(group_id)

        fields: dict = {}
        if name and name.strip():
            fields["name"] = require_max_length(name.strip(), "name", 150)
        if description and description.strip():
            fields["description"] = description.strip()

        if manager_id is not None and manager_id != group.manager_id:
            self._require_user(manager_id, "Manager not found")
            if group.manager_id:
                # the replaced manager goes back to a regular employee
                self._users.update_fields(group.manager_id, {"role": Role.USER, "group_id": None})
                self._groups.remove_member(group.group_id, group.manager_id)
            fields["manager_id"] = manager_id

        self._groups.update_group(group.group_id, fields)
        updated = self._require_group(group.group_id)
        if "manager_id" in fields:
            self._assign_manager(updated, manager_id)
            logger.info("Group %s manager changed %s -> %s", group.group_id, group.manager_id, manager_id)
        return updated

    def add_member(self, actor: User, group_id: int, user_id: int) -> GroupDetail:
        group = self._require_group(group_id)
        self._require_user(user_id)
        if not self._can_edit_members(actor, group):
            raise AuthorizationError("Not authorized to add members to this group")

        if not self._groups.add_member(group.group_id, user_id):
            raise ValidationError("User is already a member of this group")
        self._users.update_fields(user_id, {"group_id": group.group_id})
        return self.get_group(actor, group.group_id)

    def remove_member(self, actor: User, group_id: int, user_id: int) -> None:
        group = self._require_group(group_id)
        if not self._can_edit_members(actor, group):
            raise AuthorizationError("Not authorized to remove members from this group")
        if group.manager_id == int(user_id):
            raise ValidationError("Cannot remove the group manager")

        self._groups.remove_member(group.group_id, user_id)
        user = self._users.get_by_id(user_id)
        if user and user.group_id == group.group_id:
            self._users.update_fields(user_id, {"group_id": None})

    def managed_member_ids(self, manager_id: int) -> set[int]:
        return managed_member_ids(self._groups, manager_id)


def managed_member_ids(groups: GroupRepository, manager_id: int) -> set[int]:
    """Members of every group ``manager_id`` manages, excluding the manager."""
    ids: set[int] = set()
    for group in groups.list_managed_by(manager_id):
        ids.update(groups.list_member_ids(group.group_id))
    ids.discard(int(manager_id))
    return ids
