from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..common.pagination import PageQuery
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, like, order_clause, where
from .model import DeviceType
from .repository import DeviceTypeRepository

_COLUMNS = "device_type_id, name, code, description, is_active, created_at"
_SORTABLE = {"name": "name", "code": "code", "createdAt": "created_at"}
_UPDATABLE = {"name", "code", "description", "is_active"}


def _to_type(r: dict) -> DeviceType:
    return DeviceType(
        device_type_id=int(r["device_type_id"]),
        name=r["name"],
        code=r["code"],
        description=r.get("description"),
        is_active=bool(r.get("is_active", True)),
        created_at=r.get("created_at"),
    )


class MySQLDeviceTypeRepository(DeviceTypeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, device_type_id: int) -> Optional[DeviceType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM device_types WHERE device_type_id=%s", (device_type_id,))
            r = fetchone(cur)
            return _to_type(r) if r else None

    def find_conflict(self, *, name: str, code: str, exclude_id: Optional[int] = None) -> Optional[DeviceType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM device_types
                WHERE (name=%s OR code=%s) AND device_type_id <> %s
                LIMIT 1
                """,
                (name, code, int(exclude_id or 0)),
            )
            r = fetchone(cur)
            return _to_type(r) if r else None

    def list_active(self) -> Sequence[DeviceType]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM device_types WHERE is_active=1 ORDER BY name")
            return [_to_type(r) for r in fetchall(cur)]

    def search(self, query: PageQuery) -> tuple[Sequence[DeviceType], int]:
        clauses: list[str] = []
        params: list = []
        if query.search:
            term = like(query.search)
            clauses.append("(name LIKE %s OR code LIKE %s)")
            params.extend([term, term])

        order = order_clause(query.sort, _SORTABLE, default="name", descending=query.descending)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM device_types {where(clauses)}", tuple(params))
            total = int(fetchone(cur)["total"])
            cur.execute(
                f"SELECT {_COLUMNS} FROM device_types {where(clauses)} ORDER BY {order} LIMIT %s OFFSET %s",
                (*params, query.limit, query.offset),
            )
            return [_to_type(r) for r in fetchall(cur)], total

    def create_device_type(self, *, name: str, code: str, description: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO device_types(name, code, description) VALUES(%s,%s,%s)",
                (name, code, description),
            )
            return int(cur.lastrowid)

    def update_device_type(self, device_type_id: int, fields: Mapping[str, Any]) -> bool:
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Not updatable: {sorted(unknown)}")
        if not fields:
            return True
        assignments = ", ".join(f"{name}=%s" for name in fields)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE device_types SET {assignments} WHERE device_type_id=%s",
                (*fields.values(), device_type_id),
            )
            return cur.rowcount > 0

    def delete_by_id(self, device_type_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM device_types WHERE device_type_id=%s", (device_type_id,))
            return cur.rowcount > 0
