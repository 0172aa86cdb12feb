from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key
from .model import Group
from .repository import GroupRepository

_GROUP_COLUMNS = "group_id, name, description, level, manager_id, parent_group_id, is_active, created_at"
_UPDATABLE = {"name", "description", "manager_id", "is_active"}


def _to_group(r: dict) -> Group:
    return Group(
        group_id=int(r["group_id"]),
        name=r["name"],
        level=int(r["level"]),
        description=r.get("description"),
        manager_id=r.get("manager_id"),
        parent_group_id=r.get("parent_group_id"),
        is_active=bool(r.get("is_active", True)),
        created_at=r.get("created_at"),
    )


class MySQLGroupRepository(GroupRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, group_id: int) -> Optional[Group]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_GROUP_COLUMNS} FROM `groups` WHERE group_id=%s", (group_id,))
            r = fetchone(cur)
            return _to_group(r) if r else None

    def list_groups(self) -> Sequence[Group]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_GROUP_COLUMNS} FROM `groups` ORDER BY level, name")
            return [_to_group(r) for r in fetchall(cur)]

    def list_children(self, group_id: int) -> Sequence[Group]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_GROUP_COLUMNS} FROM `groups` WHERE parent_group_id=%s ORDER BY name",
                (group_id,),
            )
            return [_to_group(r) for r in fetchall(cur)]

    def list_managed_by(self, manager_id: int) -> Sequence[Group]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_GROUP_COLUMNS} FROM `groups` WHERE manager_id=%s ORDER BY level, name",
                (manager_id,),
            )
            return [_to_group(r) for r in fetchall(cur)]

    def list_member_ids(self, group_id: int) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT user_id FROM group_members WHERE group_id=%s ORDER BY user_id", (group_id,))
            return [int(r["user_id"]) for r in fetchall(cur)]

    def is_member(self, group_id: int, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 AS found FROM group_members WHERE group_id=%s AND user_id=%s",
                (group_id, user_id),
            )
            return fetchone(cur) is not None

    def create_group(
        self,
        *,
        name: str,
        description: Optional[str],
        level: int,
        manager_id: Optional[int],
        parent_group_id: Optional[int],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO `groups`(name, description, level, manager_id, parent_group_id)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (name, description, int(level), manager_id, parent_group_id),
            )
            return int(cur.lastrowid)

    def update_group(self, group_id: int, fields: Mapping[str, Any]) -> bool:
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Not updatable: {sorted(unknown)}")
        if not fields:
            return True
        assignments = ", ".join(f"{name}=%s" for name in fields)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE `groups` SET {assignments} WHERE group_id=%s",
                (*fields.values(), group_id),
            )
            return cur.rowcount > 0

    def add_member(self, group_id: int, user_id: int) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO group_members(group_id, user_id) VALUES(%s,%s)",
                    (group_id, user_id),
                )
                return True
        except IntegrityError as exc:
            if is_duplicate_key(exc):
                return False
            raise

    def remove_member(self, group_id: int, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM group_members WHERE group_id=%s AND user_id=%s", (group_id, user_id))
            return cur.rowcount > 0
