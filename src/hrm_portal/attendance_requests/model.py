from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import CorrectionStatus, CorrectionType


@dataclass(frozen=True)
class Approval:
    user_id: int
    at: datetime
    comment: Optional[str] = None


@dataclass(frozen=True)
class AttendanceRequest:
    """Domain entity: a request to correct an attendance record's timestamps.

    Goes through the group's level-2 manager first, then level 1 (or an admin).
    """

    request_id: int
    user_id: int
    attendance_id: int
    request_type: CorrectionType
    reason: str
    status: CorrectionStatus = CorrectionStatus.PENDING
    current_check_in: Optional[datetime] = None
    current_check_out: Optional[datetime] = None
    requested_check_in: Optional[datetime] = None
    requested_check_out: Optional[datetime] = None
    approval_level2: Optional[Approval] = None
    approval_level1: Optional[Approval] = None
    created_at: Optional[datetime] = None
