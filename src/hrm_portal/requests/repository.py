from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus, RequestType
from .model import Request


class RequestRepository(Protocol):
    def create_request(
        self,
        *,
        user_id: int,
        type: RequestType,
        start_time: datetime,
        end_time: datetime,
        reason: str,
        leave_days: float,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[Request]:
        raise NotImplementedError

    def list_for_user(
        self,
        user_id: int,
        *,
        status: Optional[RequestStatus] = None,
        type: Optional[RequestType] = None,
    ) -> Sequence[Request]:
        raise NotImplementedError

    def list_pending(self, *, user_ids: Optional[Sequence[int]] = None) -> Sequence[Request]:
        """Pending requests, newest first; ``user_ids=None`` means everyone."""
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        decided_by: int,
        decided_at: datetime,
        comment: Optional[str] = None,
    ) -> bool:
        """Move a PENDING request to ``status``.

        Conditional on the row still being PENDING; returns False otherwise,
        leaving the row untouched.
        """
        raise NotImplementedError
