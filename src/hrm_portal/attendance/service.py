from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import hours_between, now_local
from ..core.constants import DEFAULT_LATE_GRACE_MINUTES
from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..groups.repository import GroupRepository
from ..users.model import User
from ..users.repository import UserRepository
from .model import AttendanceRecord, AttendanceReportRow, TimeCorrection
from .network import OfficeNetworkPolicy
from .repository import AttendanceRepository, DuplicateAttendanceError

logger = logging.getLogger(__name__)

TEAM_VIEW_ROLES = frozenset({Role.ADMIN, Role.MANAGER, Role.LEVEL1, Role.LEVEL2})


@dataclass(frozen=True)
class UserAttendanceSummary:
    user_id: int
    full_name: str
    username: str
    days_present: int
    days_late: int
    total_hours: float


@dataclass(frozen=True)
class AttendanceReport:
    start_date: Optional[date]
    end_date: Optional[date]
    rows: Sequence[AttendanceReportRow]
    summary: Sequence[UserAttendanceSummary]


def _check_range(start_date: Optional[date], end_date: Optional[date]) -> None:
    if start_date and end_date and end_date < start_date:
        raise ValidationError("endDate must not be before startDate")


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        groups: GroupRepository,
        *,
        work_start: time = time(8, 30),
        grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
        network: OfficeNetworkPolicy | None = None,
    ):
        self._attendance = attendance
        self._users = users
        self._groups = groups
        self._work_start = work_start
        self._grace = timedelta(minutes=int(grace_minutes))
        self._network = network or OfficeNetworkPolicy(enabled=False)

    def _require_office_network(self, client_ip: str) -> None:
        if not self._network.is_allowed(client_ip):
            raise AuthorizationError("Attendance can only be recorded from the office network")

    def status_for(self, check_in_time: datetime) -> AttendanceStatus:
        deadline = datetime.combine(check_in_time.date(), self._work_start) + self._grace
        return AttendanceStatus.LATE if check_in_time > deadline else AttendanceStatus.PRESENT

    def check_in(
        self,
        user_id: int,
        *,
        note: Optional[str] = None,
        client_ip: str = "",
        now: datetime | None = None,
    ) -> AttendanceRecord:
        self._require_office_network(client_ip)
        now = now or now_local()
        today = now.date()

        if self._attendance.get_for_user_and_date(user_id, today):
            raise ValidationError("You have already checked in today")

        status = self.status_for(now)
        try:
            attendance_id = self._attendance.create_check_in(
                user_id=user_id,
                work_date=today,
                check_in_time=now,
                status=status,
                note=(note or "").strip() or None,
            )
        except DuplicateAttendanceError:
            # lost a race against a concurrent check-in for the same day
            raise ValidationError("You have already checked in today")

        logger.info("User %s checked in at %s (%s)", user_id, now.isoformat(timespec="seconds"), status.value)
        return self._attendance.get_by_id(attendance_id)

    def check_out(
        self,
        user_id: int,
        *,
        note: Optional[str] = None,
        client_ip: str = "",
        now: datetime | None = None,
    ) -> AttendanceRecord:
        self._require_office_network(client_ip)
        now = now or now_local()

        record = self._attendance.get_for_user_and_date(user_id, now.date())
        if not record:
            raise ValidationError("You need to check in first")
        if record.is_checked_out:
            raise ValidationError("You have already checked out today")

        updated = self._attendance.record_check_out(
            attendance_id=record.attendance_id,
            check_out_time=now,
            note=(note or "").strip() or None,
            total_hours=hours_between(record.check_in_time, now),
        )
        if not updated:
            raise ValidationError("You have already checked out today")

        logger.info("User %s checked out at %s", user_id, now.isoformat(timespec="seconds"))
        return self._attendance.get_by_id(record.attendance_id)

    def my_history(
        self,
        user_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        _check_range(start_date, end_date)
        return self._attendance.list_for_user(user_id, start_date=start_date, end_date=end_date)

    def today(self, user_id: int, *, now: datetime | None = None) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_user_and_date(user_id, (now or now_local()).date())

    def team_attendance(
        self,
        actor: User,
        *,
        group_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceReportRow]:
        if actor.role not in TEAM_VIEW_ROLES:
            raise AuthorizationError("Not authorized to access team attendance")
        _check_range(start_date, end_date)

        user_ids = None
        if group_id is not None:
            if not self._groups.get_by_id(group_id):
                raise NotFoundError("Group not found")
            user_ids = list(self._groups.list_member_ids(group_id))

        return self._attendance.list_with_users(user_ids=user_ids, start_date=start_date, end_date=end_date)

    def user_attendance(
        self,
        user_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceReportRow]:
        if not self._users.get_by_id(user_id):
            raise NotFoundError("User not found")
        _check_range(start_date, end_date)
        return self._attendance.list_with_users(user_ids=[user_id], start_date=start_date, end_date=end_date)

    def report(
        self,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        user_id: Optional[int] = None,
    ) -> AttendanceReport:
        """Rows plus a per-employee summary of days and worked hours."""
        _check_range(start_date, end_date)
        rows = self._attendance.list_with_users(
            user_ids=[user_id] if user_id is not None else None,
            start_date=start_date,
            end_date=end_date,
        )

        buckets: "OrderedDict[int, list[AttendanceReportRow]]" = OrderedDict()
        for row in sorted(rows, key=lambda r: (r.full_name.lower(), r.user_id)):
            buckets.setdefault(row.user_id, []).append(row)

        summary = [
            UserAttendanceSummary(
                user_id=uid,
                full_name=items[0].full_name,
                username=items[0].username,
                days_present=len(items),
                days_late=sum(1 for r in items if r.status == AttendanceStatus.LATE),
                total_hours=round(sum(r.total_hours for r in items), 2),
            )
            for uid, items in buckets.items()
        ]
        return AttendanceReport(start_date=start_date, end_date=end_date, rows=rows, summary=summary)

    def correction_for(
        self,
        record: AttendanceRecord,
        *,
        check_in_time: Optional[datetime],
        check_out_time: Optional[datetime],
    ) -> TimeCorrection:
        """Merge requested timestamps over ``record`` and recompute worked hours.

        Nothing is written; the caller persists the result together with the
        approval that triggered it.
        """
        new_in = check_in_time or record.check_in_time
        new_out = check_out_time or record.check_out_time
        if new_out and new_out < new_in:
            raise ValidationError("Check-out time must be after check-in time")
        return TimeCorrection(
            attendance_id=record.attendance_id,
            check_in_time=new_in,
            check_out_time=new_out,
            total_hours=hours_between(new_in, new_out),
        )
