from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..attendance.model import TimeCorrection
from ..core.enums import CorrectionStatus, CorrectionType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, where
from .model import Approval, AttendanceRequest
from .repository import AttendanceRequestRepository

_COLUMNS = """
    request_id, user_id, attendance_id, request_type, current_check_in, current_check_out,
    requested_check_in, requested_check_out, reason, status,
    level2_by, level2_at, level2_comment, level1_by, level1_at, level1_comment, created_at
"""


def _approval(r: dict, level: str) -> Optional[Approval]:
    if r.get(f"{level}_by") is None:
        return None
    return Approval(user_id=int(r[f"{level}_by"]), at=r[f"{level}_at"], comment=r.get(f"{level}_comment"))


def _to_request(r: dict) -> AttendanceRequest:
    return AttendanceRequest(
        request_id=int(r["request_id"]),
        user_id=int(r["user_id"]),
        attendance_id=int(r["attendance_id"]),
        request_type=CorrectionType(r["request_type"]),
        reason=r["reason"],
        status=CorrectionStatus(r["status"]),
        current_check_in=r.get("current_check_in"),
        current_check_out=r.get("current_check_out"),
        requested_check_in=r.get("requested_check_in"),
        requested_check_out=r.get("requested_check_out"),
        approval_level2=_approval(r, "level2"),
        approval_level1=_approval(r, "level1"),
        created_at=r.get("created_at"),
    )


class MySQLAttendanceRequestRepository(AttendanceRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_request(
        self,
        *,
        user_id: int,
        attendance_id: int,
        request_type: CorrectionType,
        current_check_in: Optional[datetime],
        current_check_out: Optional[datetime],
        requested_check_in: Optional[datetime],
        requested_check_out: Optional[datetime],
        reason: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_requests(
                    user_id, attendance_id, request_type, current_check_in, current_check_out,
                    requested_check_in, requested_check_out, reason, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    user_id,
                    attendance_id,
                    request_type.value,
                    current_check_in,
                    current_check_out,
                    requested_check_in,
                    requested_check_out,
                    reason,
                    CorrectionStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, request_id: int) -> Optional[AttendanceRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_requests WHERE request_id=%s", (request_id,))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_for_user(self, user_id: int, *, status: Optional[CorrectionStatus] = None) -> Sequence[AttendanceRequest]:
        clauses = ["user_id = %s"]
        params: list = [user_id]
        if status is not None:
            clauses.append("status = %s")
            params.append(status.value)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_requests {where(clauses)} ORDER BY created_at DESC, request_id DESC",
                tuple(params),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def list_by_status(
        self,
        status: CorrectionStatus,
        *,
        user_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[AttendanceRequest]:
        if user_ids is not None and not user_ids:
            return []
        clauses = ["status = %s"]
        params: list = [status.value]
        if user_ids is not None:
            clauses.append(f"user_id IN ({in_clause(user_ids)})")
            params.extend(int(x) for x in user_ids)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_requests {where(clauses)} ORDER BY created_at DESC, request_id DESC",
                tuple(params),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def _decide(
        self,
        cur,
        *,
        level: str,
        expected: CorrectionStatus,
        request_id: int,
        status: CorrectionStatus,
        decided_by: int,
        decided_at: datetime,
        comment: Optional[str],
    ) -> bool:
        cur.execute(
            f"""
            UPDATE attendance_requests
            SET status=%s, {level}_by=%s, {level}_at=%s, {level}_comment=%s
            WHERE request_id=%s AND status=%s
            """,
            (status.value, decided_by, decided_at, comment, request_id, expected.value),
        )
        return cur.rowcount > 0

    def decide_level2(
        self,
        *,
        request_id: int,
        status: CorrectionStatus,
        decided_by: int,
        decided_at: datetime,
        comment: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._decide(
                cur,
                level="level2",
                expected=CorrectionStatus.PENDING,
                request_id=request_id,
                status=status,
                decided_by=decided_by,
                decided_at=decided_at,
                comment=comment,
            )

    def decide_level1(
        self,
        *,
        request_id: int,
        status: CorrectionStatus,
        decided_by: int,
        decided_at: datetime,
        comment: Optional[str] = None,
        correction: Optional[TimeCorrection] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            decided = self._decide(
                cur,
                level="level1",
                expected=CorrectionStatus.APPROVED_LEVEL2,
                request_id=request_id,
                status=status,
                decided_by=decided_by,
                decided_at=decided_at,
                comment=comment,
            )
            if decided and correction is not None:
                cur.execute(
                    """
                    UPDATE attendance_records
                    SET check_in_time=%s, check_out_time=%s, total_hours=%s
                    WHERE attendance_id=%s
                    """,
                    (
                        correction.check_in_time,
                        correction.check_out_time,
                        correction.total_hours,
                        correction.attendance_id,
                    ),
                )
            return decided
