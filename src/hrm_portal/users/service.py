from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH, MONTHLY_LEAVE_ACCRUAL
from ..core.enums import Role, UserStatus
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .model import PROFILE_FIELDS, User
from .repository import UserRepository
from .tokens import TokenService

logger = logging.getLogger(__name__)

_ACCOUNT_FIELDS = {"username", "email", "first_name", "last_name", "role", "status"}


@dataclass(frozen=True)
class NewAccount:
    username: str
    email: str
    password: str
    first_name: str
    last_name: str
    profile: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AuthSession:
    """What a client receives after register/login."""

    token: str
    user: User


def _verify_password(password_hash: str, password: str) -> bool:
    try:
        return check_password_hash(password_hash, password or "")
    except ValueError:
        # placeholder or corrupted hashes
        return False


class _AccountWriter:
    def __init__(self, users: UserRepository):
        self._users = users

    def _require_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def _ensure_unique(self, *, username: Optional[str], email: Optional[str], exclude_user_id: Optional[int] = None) -> None:
        if self._users.find_conflict(username=username, email=email, exclude_user_id=exclude_user_id):
            raise ValidationError("Account already exists")

    def _insert(self, account: NewAccount, *, role: Role) -> User:
        username = require_non_empty(account.username, "username")
        email = require_non_empty(account.email, "email").lower()
        require_min_length(account.password or "", "password", MIN_PASSWORD_LENGTH)
        self._ensure_unique(username=username, email=email)

        user_id = self._users.create_user(
            username=username,
            email=email,
            password_hash=generate_password_hash(account.password),
            first_name=require_non_empty(account.first_name, "firstName"),
            last_name=require_non_empty(account.last_name, "lastName"),
            role=role,
            status=UserStatus.ACTIVE,
            profile=dict(account.profile),
        )
        return self._require_user(user_id)


class AuthService(_AccountWriter):
    """Use cases: self-service registration, login, profile and password."""

    def __init__(self, users: UserRepository, tokens: TokenService):
        super().__init__(users)
        self._tokens = tokens

    def register(self, account: NewAccount) -> AuthSession:
        user = self._insert(account, role=Role.USER)
        logger.info("Registered user %s (id=%s)", user.username, user.user_id)
        return AuthSession(token=self._tokens.issue(user.user_id), user=user)

    def login(self, username: str, password: str) -> AuthSession:
        user = self._users.get_by_username((username or "").strip())
        if not user or not _verify_password(user.password_hash, password):
            raise AuthenticationError("Invalid username or password")
        if not user.can_sign_in:
            raise AuthorizationError("Account is deactivated")

        return AuthSession(token=self._tokens.issue(user.user_id), user=user)

    def resolve_token(self, token: str) -> User:
        """The active user a bearer token belongs to."""
        user = self._users.get_by_id(self._tokens.decode(token))
        if not user:
            raise AuthenticationError("Invalid token or user no longer exists")
        if not user.can_sign_in:
            raise AuthorizationError("Account is deactivated")
        return user

    def get_profile(self, user_id: int) -> User:
        return self._require_user(user_id)

    def update_profile(self, user: User, changes: Mapping[str, Any]) -> User:
        allowed = set(PROFILE_FIELDS.values())
        fields = {k: v for k, v in changes.items() if k in allowed}
        if not fields:
            raise ValidationError("No valid fields to update")

        for name in ("first_name", "last_name"):
            if name in fields:
                fields[name] = require_non_empty(fields[name], name)
        if "email" in fields:
            fields["email"] = require_non_empty(fields["email"], "email").lower()
            self._ensure_unique(username=None, email=fields["email"], exclude_user_id=user.user_id)

        if not self._users.update_fields(user.user_id, fields):
            raise NotFoundError("User not found")
        return self._require_user(user.user_id)

    def change_password(self, user: User, *, current_password: str, new_password: str, confirm_password: str) -> None:
        if not _verify_password(user.password_hash, current_password):
            raise ValidationError("Current password is incorrect")
        require_min_length(new_password or "", "newPassword", MIN_PASSWORD_LENGTH)
        if new_password != confirm_password:
            raise ValidationError("Password confirmation does not match")

        self._users.update_password(user.user_id, generate_password_hash(new_password))
        logger.info("Password changed for user id=%s", user.user_id)


class AccountService(_AccountWriter):
    """Use cases: administrator account management."""

    def list_accounts(self, *, search: str = "") -> Sequence[User]:
        return self._users.list_users(search=search)

    def get_account(self, user_id: int) -> User:
        return self._require_user(user_id)

    def create_account(self, account: NewAccount, *, role: Role = Role.USER) -> User:
        user = self._insert(account, role=role)
        logger.info("Admin created account %s (id=%s, role=%s)", user.username, user.user_id, user.role.value)
        return user

    def update_account(self, user_id: int, changes: Mapping[str, Any]) -> User:
        self._require_user(user_id)
        fields = {k: v for k, v in changes.items() if k in _ACCOUNT_FIELDS and v not in (None, "")}

        if "email" in fields:
            fields["email"] = str(fields["email"]).strip().lower()
        if "username" in fields or "email" in fields:
            self._ensure_unique(
                username=fields.get("username"),
                email=fields.get("email"),
                exclude_user_id=user_id,
            )
        if "status" in fields:
            status = UserStatus(fields["status"])
            fields["status"] = status
            fields["is_active"] = status == UserStatus.ACTIVE
        if "role" in fields:
            fields["role"] = Role(fields["role"])

        self._users.update_fields(user_id, fields)
        return self._require_user(user_id)

    def delete_account(self, actor: User, user_id: int) -> None:
        if actor.user_id == int(user_id):
            raise ValidationError("You cannot delete your own account")
        if not self._users.delete_by_id(int(user_id)):
            raise NotFoundError("User not found")
        logger.info("Admin %s deleted account id=%s", actor.user_id, user_id)


class LeaveAccrualService:
    """Monthly job: every active employee earns one leave day."""

    def __init__(self, users: UserRepository, *, amount: float = MONTHLY_LEAVE_ACCRUAL):
        self._users = users
        self._amount = amount

    def add_monthly_leave_days(self) -> int:
        try:
            updated = self._users.add_leave_days_to_active(self._amount)
        except Exception:
            logger.exception("Monthly leave accrual failed")
            raise
        logger.info("Added %s leave day(s) to %d active users", self._amount, updated)
        return updated
