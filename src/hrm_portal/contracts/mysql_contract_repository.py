from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..common.pagination import PageQuery
from ..core.enums import ContractStatus, ContractType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, like, order_clause, where
from .model import Contract
from .repository import ContractRepository

_COLUMNS = "contract_id, device_id, user_id, type, status, note, created_at, updated_at"

_SORTABLE = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "type": "type",
    "status": "status",
}
_UPDATABLE = {"device_id", "user_id", "type", "note"}


def _to_contract(r: dict) -> Contract:
    return Contract(
        contract_id=int(r["contract_id"]),
        device_id=int(r["device_id"]),
        user_id=int(r["user_id"]),
        type=ContractType(r["type"]),
        status=ContractStatus(r["status"]),
        note=r.get("note") or "",
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLContractRepository(ContractRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, contract_id: int) -> Optional[Contract]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM contracts WHERE contract_id=%s", (contract_id,))
            r = fetchone(cur)
            return _to_contract(r) if r else None

    def create_contract(self, *, device_id: int, user_id: int, type: ContractType, note: str) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO contracts(device_id, user_id, type, status, note) VALUES(%s,%s,%s,%s,%s)",
                (device_id, user_id, type.value, ContractStatus.PENDING.value, note),
            )
            return int(cur.lastrowid)

    def update_fields(self, contract_id: int, fields: Mapping[str, Any]) -> bool:
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Not updatable: {sorted(unknown)}")
        if not fields:
            return True
        values = [v.value if isinstance(v, ContractType) else v for v in fields.values()]
        assignments = ", ".join(f"{name}=%s" for name in fields)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE contracts SET {assignments} WHERE contract_id=%s", (*values, contract_id))
            return cur.rowcount > 0

    def delete_by_id(self, contract_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM contracts WHERE contract_id=%s", (contract_id,))
            return cur.rowcount > 0

    def search(
        self,
        query: PageQuery,
        *,
        type: Optional[ContractType] = None,
        status: Optional[ContractStatus] = None,
        user_id: Optional[int] = None,
    ) -> tuple[Sequence[Contract], int]:
        clauses: list[str] = []
        params: list = []
        if query.search:
            clauses.append("note LIKE %s")
            params.append(like(query.search))
        if type is not None:
            clauses.append("type = %s")
            params.append(type.value)
        if status is not None:
            clauses.append("status = %s")
            params.append(status.value)
        if user_id is not None:
            clauses.append("user_id = %s")
            params.append(user_id)

        order = order_clause(query.sort, _SORTABLE, default="createdAt", descending=query.descending)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM contracts {where(clauses)}", tuple(params))
            total = int(fetchone(cur)["total"])
            cur.execute(
                f"SELECT {_COLUMNS} FROM contracts {where(clauses)} ORDER BY {order}, contract_id DESC LIMIT %s OFFSET %s",
                (*params, query.limit, query.offset),
            )
            return [_to_contract(r) for r in fetchall(cur)], total

    def has_open_assignment(self, device_id: int, *, exclude_id: Optional[int] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT 1 FROM contracts
                WHERE device_id=%s AND type=%s AND status IN (%s, %s) AND contract_id <> %s
                LIMIT 1
                """,
                (
                    device_id,
                    ContractType.ASSIGNMENT.value,
                    ContractStatus.PENDING.value,
                    ContractStatus.CONFIRMED.value,
                    int(exclude_id or 0),
                ),
            )
            return fetchone(cur) is not None

    def count_for_device(self, device_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM contracts WHERE device_id=%s", (device_id,))
            return int(fetchone(cur)["total"])

    def transition(self, contract_id: int, *, from_status: ContractStatus, to_status: ContractStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE contracts SET status=%s WHERE contract_id=%s AND status=%s",
                (to_status.value, contract_id, from_status.value),
            )
            return cur.rowcount > 0
