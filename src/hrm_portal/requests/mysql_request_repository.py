from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import RequestStatus, RequestType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, where
from .model import Decision, Request
from .repository import RequestRepository

_REQUEST_COLUMNS = """
    request_id, user_id, type, start_time, end_time, reason, leave_days, status,
    approved_by, approved_at, approved_comment,
    rejected_by, rejected_at, rejected_comment,
    cancelled_by, cancelled_at, cancelled_reason,
    created_at
"""

# Target status -> (actor column, timestamp column, comment column)
_DECISION_COLUMNS = {
    RequestStatus.APPROVED: ("approved_by", "approved_at", "approved_comment"),
    RequestStatus.REJECTED: ("rejected_by", "rejected_at", "rejected_comment"),
    RequestStatus.CANCELLED: ("cancelled_by", "cancelled_at", "cancelled_reason"),
}


def _decision(r: dict, by: str, at: str, comment: str) -> Optional[Decision]:
    if r.get(by) is None:
        return None
    return Decision(user_id=int(r[by]), at=r[at], comment=r.get(comment))


def _to_request(r: dict) -> Request:
    return Request(
        request_id=int(r["request_id"]),
        user_id=int(r["user_id"]),
        type=RequestType(r["type"]),
        start_time=r["start_time"],
        end_time=r["end_time"],
        reason=r["reason"],
        status=RequestStatus(int(r["status"])),
        leave_days=float(r.get("leave_days") or 0),
        approved_by=_decision(r, *_DECISION_COLUMNS[RequestStatus.APPROVED]),
        rejected_by=_decision(r, *_DECISION_COLUMNS[RequestStatus.REJECTED]),
        cancelled_by=_decision(r, *_DECISION_COLUMNS[RequestStatus.CANCELLED]),
        created_at=r.get("created_at"),
    )


class MySQLRequestRepository(RequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_request(
        self,
        *,
        user_id: int,
        type: RequestType,
        start_time: datetime,
        end_time: datetime,
        reason: str,
        leave_days: float,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO requests(user_id, type, start_time, end_time, reason, leave_days, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (user_id, type.value, start_time, end_time, reason, leave_days, int(RequestStatus.PENDING)),
            )
            return int(cur.lastrowid)

    def get_by_id(self, request_id: int) -> Optional[Request]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_REQUEST_COLUMNS} FROM requests WHERE request_id=%s", (request_id,))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_for_user(
        self,
        user_id: int,
        *,
        status: Optional[RequestStatus] = None,
        type: Optional[RequestType] = None,
    ) -> Sequence[Request]:
        clauses = ["user_id = %s"]
        params: list = [user_id]
        if status is not None:
            clauses.append("status = %s")
            params.append(int(status))
        if type is not None:
            clauses.append("type = %s")
            params.append(type.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_REQUEST_COLUMNS} FROM requests {where(clauses)} ORDER BY created_at DESC, request_id DESC",
                tuple(params),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def list_pending(self, *, user_ids: Optional[Sequence[int]] = None) -> Sequence[Request]:
        if user_ids is not None and not user_ids:
            return []
        clauses = ["status = %s"]
        params: list = [int(RequestStatus.PENDING)]
        if user_ids is not None:
            clauses.append(f"user_id IN ({in_clause(user_ids)})")
            params.extend(int(x) for x in user_ids)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_REQUEST_COLUMNS} FROM requests {where(clauses)} ORDER BY created_at DESC, request_id DESC",
                tuple(params),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        decided_by: int,
        decided_at: datetime,
        comment: Optional[str] = None,
    ) -> bool:
        by, at, note = _DECISION_COLUMNS[status]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                UPDATE requests
                SET status=%s, {by}=%s, {at}=%s, {note}=%s
                WHERE request_id=%s AND status=%s
                """,
                (int(status), decided_by, decided_at, comment, request_id, int(RequestStatus.PENDING)),
            )
            return cur.rowcount > 0
