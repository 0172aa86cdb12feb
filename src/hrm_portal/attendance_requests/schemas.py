from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from ..api.payload import ApiModel, LocalDateTime
from ..core.enums import CorrectionStatus, CorrectionType, RequestAction


class AttendanceRequestCreateIn(ApiModel):
    attendance_id: int = Field(ge=1)
    request_type: CorrectionType
    requested_check_in: Optional[LocalDateTime] = None
    requested_check_out: Optional[LocalDateTime] = None
    reason: str = Field(min_length=1, max_length=1000)


class ApprovalIn(ApiModel):
    action: RequestAction
    comment: Optional[str] = Field(default=None, max_length=1000)


class ApprovalOut(ApiModel):
    user_id: int
    at: datetime
    comment: Optional[str] = None


class AttendanceRequestOut(ApiModel):
    id: int = Field(validation_alias="request_id")
    user_id: int
    attendance_id: int
    request_type: CorrectionType
    reason: str
    status: CorrectionStatus
    current_check_in: Optional[datetime] = None
    current_check_out: Optional[datetime] = None
    requested_check_in: Optional[datetime] = None
    requested_check_out: Optional[datetime] = None
    approval_level2: Optional[ApprovalOut] = None
    approval_level1: Optional[ApprovalOut] = None
    created_at: Optional[datetime] = None
