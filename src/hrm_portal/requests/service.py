from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local, to_local_naive
from ..common.leave_calculator import calculate_leave_days
from ..common.validators import require_max_length, require_non_empty
from ..core.constants import MAX_LEAVE_DAYS, MIN_LEAVE_DAYS
from ..core.enums import APPROVER_ROLES, MANAGER_ROLES, RequestAction, RequestStatus, RequestType, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..groups.repository import GroupRepository
from ..groups.service import managed_member_ids
from ..users.model import User
from .model import Request
from .repository import RequestRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewRequest:
    type: RequestType
    start_time: datetime
    end_time: datetime
    reason: str


def leave_days_for(start_time: datetime, end_time: datetime) -> float:
    """Leave days a request would consume; validated against the allowed range."""
    start_time, end_time = to_local_naive(start_time), to_local_naive(end_time)
    if end_time < start_time:
        raise ValidationError("End time must be after start time")
    days = calculate_leave_days(start_time, end_time)
    if days < MIN_LEAVE_DAYS or days > MAX_LEAVE_DAYS:
        raise ValidationError(f"Leave must be between {MIN_LEAVE_DAYS} and {MAX_LEAVE_DAYS} days")
    if (days * 2) != int(days * 2):
        raise ValidationError("Leave must be taken in half-day steps")
    return float(days)


class RequestService:
    """Use cases: submit, list, approve/reject and cancel employee requests."""

    def __init__(self, requests: RequestRepository, groups: GroupRepository):
        self._requests = requests
        self._groups = groups

    def _require_request(self, request_id: int) -> Request:
        req = self._requests.get_by_id(int(request_id))
        if not req:
            raise NotFoundError("Request not found")
        return req

    def create(self, user: User, data: NewRequest) -> Request:
        reason = require_max_length(require_non_empty(data.reason, "reason"), "reason", 1000)
        start_time, end_time = to_local_naive(data.start_time), to_local_naive(data.end_time)
        if end_time < start_time:
            raise ValidationError("End time must be after start time")

        leave_days = 0.0
        if data.type == RequestType.LEAVE:
            leave_days = leave_days_for(start_time, end_time)

        request_id = self._requests.create_request(
            user_id=user.user_id,
            type=data.type,
            start_time=start_time,
            end_time=end_time,
            reason=reason,
            leave_days=leave_days,
        )
        logger.info("User %s submitted %s request %s", user.user_id, data.type.value, request_id)
        return self._require_request(request_id)

    def list_mine(
        self,
        user: User,
        *,
        status: Optional[RequestStatus] = None,
        type: Optional[RequestType] = None,
    ) -> Sequence[Request]:
        return self._requests.list_for_user(user.user_id, status=status, type=type)

    def list_pending(self, actor: User) -> Sequence[Request]:
        if actor.role == Role.ADMIN:
            return self._requests.list_pending()
        if actor.role in MANAGER_ROLES:
            if not self._groups.list_managed_by(actor.user_id):
                raise NotFoundError("No groups found for this manager")
            return self._requests.list_pending(user_ids=sorted(managed_member_ids(self._groups, actor.user_id)))
        raise AuthorizationError("Not authorized to view pending requests")

    def process(
        self,
        actor: User,
        request_id: int,
        *,
        action: RequestAction,
        comment: Optional[str] = None,
        now: datetime | None = None,
    ) -> Request:
        if actor.role not in APPROVER_ROLES:
            raise AuthorizationError("Not authorized to process this request")

        req = self._require_request(request_id)
        if not req.is_pending:
            raise ValidationError("This request has already been processed")
        if actor.role in MANAGER_ROLES and req.user_id not in managed_member_ids(self._groups, actor.user_id):
            raise AuthorizationError("You do not manage this user")

        status = RequestStatus.APPROVED if action == RequestAction.APPROVE else RequestStatus.REJECTED
        decided = self._requests.decide(
            request_id=req.request_id,
            status=status,
            decided_by=actor.user_id,
            decided_at=now or now_local(),
            comment=(comment or "").strip(),
        )
        if not decided:
            raise ValidationError("This request has already been processed")

        logger.info("Request %s %s by user %s", req.request_id, status.text, actor.user_id)
        return self._require_request(req.request_id)

    def cancel(
        self,
        actor: User,
        request_id: int,
        *,
        reason: Optional[str] = None,
        now: datetime | None = None,
    ) -> Request:
        req = self._require_request(request_id)
        if req.user_id != actor.user_id:
            raise AuthorizationError("Not authorized to cancel this request")
        if not req.is_pending:
            raise ValidationError("Only pending requests can be cancelled")

        cancelled = self._requests.decide(
            request_id=req.request_id,
            status=RequestStatus.CANCELLED,
            decided_by=actor.user_id,
            decided_at=now or now_local(),
            comment=(reason or "").strip() or None,
        )
        if not cancelled:
            raise ValidationError("Only pending requests can be cancelled")

        logger.info("Request %s cancelled by its owner %s", req.request_id, actor.user_id)
        return self._require_request(req.request_id)
