from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field, computed_field

from ..api.payload import ApiModel, LocalDateTime
from ..core.enums import RequestAction, RequestStatus, RequestType


class RequestCreateIn(ApiModel):
    type: RequestType
    start_time: LocalDateTime
    end_time: LocalDateTime
    reason: str = Field(min_length=1, max_length=1000)


class RequestProcessIn(ApiModel):
    action: RequestAction
    comment: Optional[str] = Field(default=None, max_length=1000)


class RequestCancelIn(ApiModel):
    reason: Optional[str] = Field(default=None, max_length=1000)


class LeaveDaysQuery(ApiModel):
    start_time: LocalDateTime
    end_time: LocalDateTime


class DecisionOut(ApiModel):
    user_id: int
    at: datetime
    comment: Optional[str] = None


class RequestOut(ApiModel):
    id: int = Field(validation_alias="request_id")
    user_id: int
    type: RequestType
    start_time: datetime
    end_time: datetime
    reason: str
    status: RequestStatus
    leave_days: float
    approved_by: Optional[DecisionOut] = None
    rejected_by: Optional[DecisionOut] = None
    cancelled_by: Optional[DecisionOut] = None
    created_at: Optional[datetime] = None

    @computed_field
    @property
    def status_text(self) -> str:
        return self.status.text
