from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause, is_duplicate_key, where
from .model import AttendanceRecord, AttendanceReportRow
from .repository import AttendanceRepository, DuplicateAttendanceError

_RECORD_COLUMNS = """
    a.attendance_id, a.user_id, a.work_date, a.check_in_time, a.check_in_note,
    a.check_out_time, a.check_out_note, a.status, a.total_hours
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        check_in_time=r["check_in_time"],
        status=AttendanceStatus(r["status"]),
        check_in_note=r.get("check_in_note"),
        check_out_time=r.get("check_out_time"),
        check_out_note=r.get("check_out_note"),
        total_hours=float(r.get("total_hours") or 0),
    )


def _date_filters(start_date: Optional[date], end_date: Optional[date]) -> tuple[list[str], list]:
    clauses: list[str] = []
    params: list = []
    if start_date:
        clauses.append("a.work_date >= %s")
        params.append(start_date)
    if end_date:
        clauses.append("a.work_date <= %s")
        params.append(end_date)
    return clauses, params


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance_records a WHERE a.attendance_id=%s",
                (attendance_id,),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance_records a WHERE a.user_id=%s AND a.work_date=%s",
                (user_id, work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create_check_in(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
        note: Optional[str],
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(user_id, work_date, check_in_time, check_in_note, status)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (user_id, work_date, check_in_time, note, status.value),
                )
                return int(cur.lastrowid)
        except IntegrityError as exc:
            if is_duplicate_key(exc):
                raise DuplicateAttendanceError(f"user {user_id} already has a record for {work_date}") from exc
            raise

    def record_check_out(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        note: Optional[str],
        total_hours: float,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, check_out_note=%s, total_hours=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (check_out_time, note, total_hours, attendance_id),
            )
            return cur.rowcount > 0

    def list_for_user(
        self,
        user_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses, params = _date_filters(start_date, end_date)
        clauses.insert(0, "a.user_id = %s")
        params.insert(0, user_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance_records a {where(clauses)} ORDER BY a.work_date DESC",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_with_users(
        self,
        *,
        user_ids: Optional[Sequence[int]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceReportRow]:
        if user_ids is not None and not user_ids:
            return []

        clauses, params = _date_filters(start_date, end_date)
        if user_ids is not None:
            clauses.append(f"a.user_id IN ({in_clause(user_ids)})")
            params.extend(int(x) for x in user_ids)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}, u.username, u.first_name, u.last_name, u.email
                FROM attendance_records a
                JOIN users u ON u.user_id = a.user_id
                {where(clauses)}
                ORDER BY a.work_date DESC, u.first_name, u.last_name
                """,
                tuple(params),
            )
            return [
                AttendanceReportRow(
                    attendance_id=int(r["attendance_id"]),
                    user_id=int(r["user_id"]),
                    username=r["username"],
                    first_name=r["first_name"],
                    last_name=r["last_name"],
                    email=r["email"],
                    work_date=r["work_date"],
                    check_in_time=r["check_in_time"],
                    status=AttendanceStatus(r["status"]),
                    check_out_time=r.get("check_out_time"),
                    total_hours=float(r.get("total_hours") or 0),
                    check_in_note=r.get("check_in_note"),
                    check_out_note=r.get("check_out_note"),
                )
                for r in fetchall(cur)
            ]
