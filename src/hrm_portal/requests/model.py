from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import RequestStatus, RequestType


@dataclass(frozen=True)
class Decision:
    """Who moved a request out of PENDING, when, and with what comment."""

    user_id: int
    at: datetime
    comment: Optional[str] = None


@dataclass(frozen=True)
class Request:
    """Domain entity: a work-time, leave, WFH or overtime request."""

    request_id: int
    user_id: int
    type: RequestType
    start_time: datetime
    end_time: datetime
    reason: str
    status: RequestStatus = RequestStatus.PENDING
    leave_days: float = 0.0
    approved_by: Optional[Decision] = None
    rejected_by: Optional[Decision] = None
    cancelled_by: Optional[Decision] = None
    created_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING
