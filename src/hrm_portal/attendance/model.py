from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one calendar day."""

    attendance_id: int
    user_id: int
    work_date: date
    check_in_time: datetime
    status: AttendanceStatus
    check_in_note: Optional[str] = None
    check_out_time: Optional[datetime] = None
    check_out_note: Optional[str] = None
    total_hours: float = 0.0

    @property
    def is_checked_out(self) -> bool:
        return self.check_out_time is not None


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read model joining a record with its owner, for team views and reports."""

    attendance_id: int
    user_id: int
    username: str
    first_name: str
    last_name: str
    email: str
    work_date: date
    check_in_time: datetime
    status: AttendanceStatus
    check_out_time: Optional[datetime] = None
    total_hours: float = 0.0
    check_in_note: Optional[str] = None
    check_out_note: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class TimeCorrection:
    """New timestamps and worked hours to write onto an attendance record."""

    attendance_id: int
    check_in_time: datetime
    check_out_time: Optional[datetime]
    total_hours: float
