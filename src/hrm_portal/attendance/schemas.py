from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import Field

from ..api.payload import ApiModel
from ..core.enums import AttendanceStatus


class AttendanceNoteIn(ApiModel):
    note: Optional[str] = Field(default=None, max_length=500)


class AttendanceOut(ApiModel):
    id: int = Field(validation_alias="attendance_id")
    user_id: int
    work_date: date
    check_in_time: datetime
    check_in_note: Optional[str] = None
    check_out_time: Optional[datetime] = None
    check_out_note: Optional[str] = None
    status: AttendanceStatus
    total_hours: float


class AttendanceRowOut(AttendanceOut):
    username: str
    first_name: str
    last_name: str
    full_name: str
    email: str


class UserSummaryOut(ApiModel):
    user_id: int
    full_name: str
    username: str
    days_present: int
    days_late: int
    total_hours: float


class AttendanceReportOut(ApiModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    rows: list[AttendanceRowOut]
    summary: list[UserSummaryOut]
