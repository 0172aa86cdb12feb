from __future__ import annotations

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import Field

from ..api.payload import ApiModel
from ..core.enums import Role, UserStatus


class RegisterIn(ApiModel):
    username: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=6)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    employee_id: Optional[str] = Field(default=None, max_length=50)
    gender: Optional[Literal[0, 1]] = None
    date_of_birth: Optional[date] = None
    phone_number: Optional[str] = Field(default=None, max_length=50)
    address: Optional[str] = Field(default=None, max_length=255)
    position: Optional[str] = Field(default=None, max_length=100)
    department: Optional[str] = Field(default=None, max_length=100)

    def profile(self) -> dict:
        return self.model_dump(
            exclude={"username", "email", "password", "first_name", "last_name"},
            exclude_none=True,
        )


class LoginIn(ApiModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class ProfileIn(ApiModel):
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    phone_number: Optional[str] = Field(default=None, max_length=50)
    address: Optional[str] = Field(default=None, max_length=255)
    position: Optional[str] = Field(default=None, max_length=100)
    department: Optional[str] = Field(default=None, max_length=100)
    gender: Optional[Literal[0, 1]] = None
    date_of_birth: Optional[date] = None
    email: Optional[str] = Field(default=None, max_length=255)


class ChangePasswordIn(ApiModel):
    current_password: str
    new_password: str
    confirm_password: str


class AccountCreateIn(ApiModel):
    username: str = Field(min_length=1, max_length=100)
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=6)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    role: Role = Role.USER


class AccountUpdateIn(ApiModel):
    username: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=255)
    first_name: Optional[str] = Field(default=None, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    role: Optional[Role] = None
    status: Optional[UserStatus] = None


class UserBriefOut(ApiModel):
    id: int = Field(validation_alias="user_id")
    username: str
    email: str
    first_name: str
    last_name: str
    role: Role


class UserOut(UserBriefOut):
    full_name: str
    employee_id: Optional[str] = None
    gender: Optional[int] = None
    date_of_birth: Optional[date] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    position: Optional[str] = None
    department: Optional[str] = None
    status: UserStatus
    is_active: bool
    group_id: Optional[int] = None
    leave_days: float
    start_date: Optional[date] = None
    created_at: Optional[datetime] = None
