from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..attendance.model import TimeCorrection
from ..core.enums import CorrectionStatus, CorrectionType
from .model import AttendanceRequest


class AttendanceRequestRepository(Protocol):
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
        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[AttendanceRequest]:
        raise NotImplementedError

    def list_for_user(self, user_id: int, *, status: Optional[CorrectionStatus] = None) -> Sequence[AttendanceRequest]:
        raise NotImplementedError

    def list_by_status(
        self,
        status: CorrectionStatus,
        *,
        user_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[AttendanceRequest]:
        raise NotImplementedError

    def decide_level2(
        self,
        *,
        request_id: int,
        status: CorrectionStatus,
        decided_by: int,
        decided_at: datetime,
        comment: Optional[str] = None,
    ) -> bool:
        """Only applies while the request is still ``pending``."""
        raise NotImplementedError

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
        """Only applies while the request is ``approved-level2``.

        A ``correction`` is written to the attendance record in the same
        transaction, so the status and the record change together or not at all.
        """
        raise NotImplementedError
