from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, AttendanceReportRow


class DuplicateAttendanceError(Exception):
    """The (user, day) pair already has a record."""


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_check_in(
        self,
        *,
        user_id: int,
        work_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
        note: Optional[str],
    ) -> int:
        """Insert the day's record; raises DuplicateAttendanceError if one exists."""
        raise NotImplementedError

    def record_check_out(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        note: Optional[str],
        total_hours: float,
    ) -> bool:
        """Set the check-out only while none is recorded."""
        raise NotImplementedError

    def list_for_user(
        self,
        user_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_with_users(
        self,
        *,
        user_ids: Optional[Sequence[int]] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceReportRow]:
        """Records joined with their owners; ``user_ids=None`` means everyone."""
        raise NotImplementedError
