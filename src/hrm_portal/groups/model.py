from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Sequence

from ..users.model import User


@dataclass(frozen=True)
class Group:
    """Domain entity: an organizational unit at level 1 (top) to 3."""

    group_id: int
    name: str
    level: int
    description: Optional[str] = None
    manager_id: Optional[int] = None
    parent_group_id: Optional[int] = None
    is_active: bool = True
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class GroupDetail:
    """A group with its manager, members and direct children resolved."""

    group: Group
    manager: Optional[User] = None
    parent: Optional[Group] = None
    members: Sequence[User] = field(default_factory=tuple)
    child_groups: Sequence[Group] = field(default_factory=tuple)
