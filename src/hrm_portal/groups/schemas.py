from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from ..api.payload import ApiModel
from ..users.schemas import UserBriefOut


class GroupCreateIn(ApiModel):
    name: str = Field(min_length=1, max_length=150)
    description: Optional[str] = Field(default=None, max_length=1000)
    level: int = Field(ge=1, le=3)
    manager_id: Optional[int] = Field(default=None, ge=1)
    parent_group_id: Optional[int] = Field(default=None, ge=1)


class GroupUpdateIn(ApiModel):
    name: Optional[str] = Field(default=None, max_length=150)
    description: Optional[str] = Field(default=None, max_length=1000)
    manager_id: Optional[int] = Field(default=None, ge=1)


class MemberIn(ApiModel):
    user_id: int = Field(ge=1)


class GroupOut(ApiModel):
    id: int = Field(validation_alias="group_id")
    name: str
    description: Optional[str] = None
    level: int
    manager_id: Optional[int] = None
    parent_group_id: Optional[int] = None
    is_active: bool
    created_at: Optional[datetime] = None


class GroupDetailOut(ApiModel):
    group: GroupOut
    manager: Optional[UserBriefOut] = None
    parent: Optional[GroupOut] = None
    members: list[UserBriefOut]
    child_groups: list[GroupOut]
