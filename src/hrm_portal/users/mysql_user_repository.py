from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..core.enums import Role, UserStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, like
from .model import User
from .repository import UserRepository

_USER_COLUMNS = """
    user_id, username, email, password_hash, first_name, last_name, employee_id, gender,
    date_of_birth, phone_number, address, position, department, role, status, group_id,
    is_active, leave_days, start_date, created_at
"""

_UPDATABLE = {
    "username",
    "email",
    "first_name",
    "last_name",
    "employee_id",
    "gender",
    "date_of_birth",
    "phone_number",
    "address",
    "position",
    "department",
    "role",
    "status",
    "group_id",
    "is_active",
    "leave_days",
    "start_date",
}


def _to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        username=row["username"],
        email=row["email"],
        password_hash=row["password_hash"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        role=Role(row["role"]),
        status=UserStatus(row["status"]),
        is_active=bool(row.get("is_active", True)),
        employee_id=row.get("employee_id"),
        gender=row.get("gender"),
        date_of_birth=row.get("date_of_birth"),
        phone_number=row.get("phone_number"),
        address=row.get("address"),
        position=row.get("position"),
        department=row.get("department"),
        group_id=row.get("group_id"),
        leave_days=float(row.get("leave_days") or 0),
        start_date=row.get("start_date"),
        created_at=row.get("created_at"),
    )


def _db_value(value: Any) -> Any:
    if isinstance(value, (Role, UserStatus)):
        return value.value
    return value


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (user_id,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_username(self, username: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE username=%s", (username,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def find_conflict(self, *, username: Optional[str], email: Optional[str], exclude_user_id: Optional[int] = None) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_USER_COLUMNS}
                FROM users
                WHERE (username=%s OR email=%s) AND user_id <> %s
                LIMIT 1
                """,
                (username, email, int(exclude_user_id or 0)),
            )
            row = fetchone(cur)
            return _to_user(row) if row else None

    def list_by_ids(self, user_ids: Sequence[int]) -> Sequence[User]:
        if not user_ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_USER_COLUMNS} FROM users WHERE user_id IN ({in_clause(user_ids)}) ORDER BY first_name, last_name",
                tuple(int(x) for x in user_ids),
            )
            return [_to_user(r) for r in fetchall(cur)]

    def list_users(self, *, search: str = "", limit: int = 200) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            if search:
                term = like(search)
                cur.execute(
                    f"""
                    SELECT {_USER_COLUMNS}
                    FROM users
                    WHERE username LIKE %s OR email LIKE %s OR first_name LIKE %s OR last_name LIKE %s
                    ORDER BY user_id DESC
                    LIMIT %s
                    """,
                    (term, term, term, term, int(limit)),
                )
            else:
                cur.execute(f"SELECT {_USER_COLUMNS} FROM users ORDER BY user_id DESC LIMIT %s", (int(limit),))
            return [_to_user(r) for r in fetchall(cur)]

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
        columns = {
            "username": username,
            "email": email,
            "password_hash": password_hash,
            "first_name": first_name,
            "last_name": last_name,
            "role": role.value,
            "status": status.value,
            "is_active": 1 if status == UserStatus.ACTIVE else 0,
        }
        for key, value in (profile or {}).items():
            if key in _UPDATABLE and key not in columns:
                columns[key] = _db_value(value)

        names = ", ".join(columns)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO users ({names}) VALUES ({in_clause(list(columns))})",
                tuple(columns.values()),
            )
            return int(cur.lastrowid)

    def update_fields(self, user_id: int, fields: Mapping[str, Any]) -> bool:
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Not updatable: {sorted(unknown)}")
        if not fields:
            return self.get_by_id(user_id) is not None

        assignments = ", ".join(f"{name}=%s" for name in fields)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE users SET {assignments} WHERE user_id=%s",
                (*[_db_value(v) for v in fields.values()], user_id),
            )
            if cur.rowcount > 0:
                return True
            # MySQL reports 0 affected rows when the values did not change
            cur.execute("SELECT 1 FROM users WHERE user_id=%s", (user_id,))
            return fetchone(cur) is not None

    def update_password(self, user_id: int, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET password_hash=%s WHERE user_id=%s", (password_hash, user_id))
            return cur.rowcount > 0

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (user_id,))
            return cur.rowcount > 0

    def add_leave_days_to_active(self, amount: float) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET leave_days = leave_days + %s WHERE status=%s",
                (amount, UserStatus.ACTIVE.value),
            )
            return int(cur.rowcount)
