from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import MANAGER_ROLES, Role, UserStatus


@dataclass(frozen=True)
class User:
    """Domain entity: an employee account.

    Plain data object; persistence lives in the repositories.
    """

    user_id: int
    username: str
    email: str
    password_hash: str
    first_name: str
    last_name: str
    role: Role = Role.USER
    status: UserStatus = UserStatus.ACTIVE
    is_active: bool = True
    employee_id: Optional[str] = None
    gender: Optional[int] = None
    date_of_birth: Optional[date] = None
    phone_number: Optional[str] = None
    address: Optional[str] = None
    position: Optional[str] = None
    department: Optional[str] = None
    group_id: Optional[int] = None
    leave_days: float = 0.0
    start_date: Optional[date] = None
    created_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_manager(self) -> bool:
        return self.role in MANAGER_ROLES

    @property
    def can_sign_in(self) -> bool:
        return self.is_active and self.status == UserStatus.ACTIVE


# API field name -> users column, for the fields an employee may edit on their own profile
PROFILE_FIELDS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "phoneNumber": "phone_number",
    "address": "address",
    "position": "position",
    "department": "department",
    "gender": "gender",
    "dateOfBirth": "date_of_birth",
    "email": "email",
}
