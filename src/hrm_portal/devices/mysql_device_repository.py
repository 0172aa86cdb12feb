from __future__ import annotations

from typing import Optional, Sequence

from ..common.pagination import PageQuery
from ..core.enums import ContractStatus, ContractType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, like, order_clause, where
from .model import Device
from .repository import DeviceRepository

_COLUMNS = "d.device_id, d.code, d.type_code, d.description, d.note, d.created_at"

_SORTABLE = {
    "createdAt": "d.created_at",
    "code": "d.code",
    "typeCode": "d.type_code",
    "description": "d.description",
}

# A completed assignment of this device to c.user_id with no completed recovery after it
_HELD_SQL = """
    SELECT 1 FROM contracts c
    WHERE c.device_id = d.device_id
      AND c.type = %s AND c.status = %s
      AND NOT EXISTS (
          SELECT 1 FROM contracts r
          WHERE r.device_id = c.device_id AND r.type = %s AND r.status = %s
            AND r.contract_id > c.contract_id
      )
"""
_HELD_PARAMS = (
    ContractType.ASSIGNMENT.value,
    ContractStatus.COMPLETED.value,
    ContractType.RECOVERY.value,
    ContractStatus.COMPLETED.value,
)


def _to_device(r: dict) -> Device:
    return Device(
        device_id=int(r["device_id"]),
        code=r["code"],
        type_code=r["type_code"],
        description=r["description"],
        note=r.get("note") or "",
        created_at=r.get("created_at"),
    )


class MySQLDeviceRepository(DeviceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, device_id: int) -> Optional[Device]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM devices d WHERE d.device_id=%s", (device_id,))
            r = fetchone(cur)
            return _to_device(r) if r else None

    def find_by_code(self, code: str, type_code: str, *, exclude_id: Optional[int] = None) -> Optional[Device]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM devices d WHERE d.code=%s AND d.type_code=%s AND d.device_id <> %s",
                (code, type_code, int(exclude_id or 0)),
            )
            r = fetchone(cur)
            return _to_device(r) if r else None

    def list_simple(self, *, unassigned_only: bool = False) -> Sequence[Device]:
        with db_cursor(self._conn_factory) as (_, cur):
            if unassigned_only:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM devices d WHERE NOT EXISTS ({_HELD_SQL}) ORDER BY d.code",
                    _HELD_PARAMS,
                )
            else:
                cur.execute(f"SELECT {_COLUMNS} FROM devices d ORDER BY d.code")
            return [_to_device(r) for r in fetchall(cur)]

    def search(self, query: PageQuery, *, type_code: Optional[str] = None) -> tuple[Sequence[Device], int]:
        clauses: list[str] = []
        params: list = []
        if query.search:
            term = like(query.search)
            clauses.append("(d.code LIKE %s OR d.description LIKE %s OR d.note LIKE %s)")
            params.extend([term, term, term])
        if type_code:
            clauses.append("d.type_code = %s")
            params.append(type_code.upper())

        order = order_clause(query.sort, _SORTABLE, default="createdAt", descending=query.descending)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM devices d {where(clauses)}", tuple(params))
            total = int(fetchone(cur)["total"])
            cur.execute(
                f"SELECT {_COLUMNS} FROM devices d {where(clauses)} ORDER BY {order} LIMIT %s OFFSET %s",
                (*params, query.limit, query.offset),
            )
            return [_to_device(r) for r in fetchall(cur)], total

    def list_held_by(self, user_id: int) -> Sequence[Device]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM devices d
                WHERE EXISTS ({_HELD_SQL} AND c.user_id = %s)
                ORDER BY d.code
                """,
                (*_HELD_PARAMS, user_id),
            )
            return [_to_device(r) for r in fetchall(cur)]

    def create_device(self, *, code: str, type_code: str, description: str, note: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO devices(code, type_code, description, note) VALUES(%s,%s,%s,%s)",
                (code, type_code, description, note),
            )
            return int(cur.lastrowid)

    def update_device(self, device_id: int, *, code: str, type_code: str, description: str, note: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE devices SET code=%s, type_code=%s, description=%s, note=%s WHERE device_id=%s",
                (code, type_code, description, note, device_id),
            )
            return cur.rowcount > 0

    def delete_by_id(self, device_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM devices WHERE device_id=%s", (device_id,))
            return cur.rowcount > 0
