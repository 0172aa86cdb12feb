from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..attendance.service import AttendanceService
from ..common.datetime_utils import now_local, to_local_naive
from ..common.validators import require_max_length, require_non_empty
from ..core.enums import CorrectionStatus, CorrectionType, RequestAction, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..groups.repository import GroupRepository
from ..groups.service import managed_member_ids
from ..users.model import User
from .model import AttendanceRequest
from .repository import AttendanceRequestRepository

logger = logging.getLogger(__name__)

LEVEL1_ROLES = frozenset({Role.ADMIN, Role.LEVEL1})
REVIEWER_ROLES = LEVEL1_ROLES | {Role.LEVEL2}


@dataclass(frozen=True)
class NewAttendanceRequest:
    attendance_id: int
    request_type: CorrectionType
    reason: str
    requested_check_in: Optional[datetime] = None
    requested_check_out: Optional[datetime] = None


class AttendanceRequestService:
    """Use cases: attendance corrections with level-2 then level-1 approval."""

    def __init__(
        self,
        requests: AttendanceRequestRepository,
        attendance: AttendanceRepository,
        attendance_service: AttendanceService,
        groups: GroupRepository,
    ):
        self._requests = requests
        self._attendance = attendance
        self._attendance_service = attendance_service
        self._groups = groups

    def _require_request(self, request_id: int) -> AttendanceRequest:
        req = self._requests.get_by_id(int(request_id))
        if not req:
            raise NotFoundError("Request not found")
        return req

    def create(self, user: User, data: NewAttendanceRequest) -> AttendanceRequest:
        record = self._attendance.get_by_id(int(data.attendance_id))
        if not record or record.user_id != user.user_id:
            raise NotFoundError("Attendance record not found")

        reason = require_max_length(require_non_empty(data.reason, "reason"), "reason", 1000)
        kind = data.request_type
        requested_in = data.requested_check_in if kind.touches_check_in else None
        requested_out = data.requested_check_out if kind.touches_check_out else None
        if requested_in is not None:
            requested_in = to_local_naive(requested_in)
        if requested_out is not None:
            requested_out = to_local_naive(requested_out)
        if kind.touches_check_in and requested_in is None:
            raise ValidationError("requestedCheckIn is required")
        if kind.touches_check_out and requested_out is None:
            raise ValidationError("requestedCheckOut is required")

        request_id = self._requests.create_request(
            user_id=user.user_id,
            attendance_id=record.attendance_id,
            request_type=kind,
            current_check_in=record.check_in_time,
            current_check_out=record.check_out_time,
            requested_check_in=requested_in,
            requested_check_out=requested_out,
            reason=reason,
        )
        logger.info("User %s requested %s correction for attendance %s", user.user_id, kind.value, record.attendance_id)
        return self._require_request(request_id)

    def list_mine(self, user: User, *, status: Optional[CorrectionStatus] = None) -> Sequence[AttendanceRequest]:
        return self._requests.list_for_user(user.user_id, status=status)

    def list_pending(self, actor: User) -> Sequence[AttendanceRequest]:
        if actor.role in LEVEL1_ROLES:
            return self._requests.list_by_status(CorrectionStatus.APPROVED_LEVEL2)
        if actor.role == Role.LEVEL2:
            if not self._groups.list_managed_by(actor.user_id):
                raise NotFoundError("Group not found for this manager")
            return self._requests.list_by_status(
                CorrectionStatus.PENDING,
                user_ids=sorted(managed_member_ids(self._groups, actor.user_id)),
            )
        raise AuthorizationError("Not authorized to access pending requests")

    def process_level2(
        self,
        actor: User,
        request_id: int,
        *,
        action: RequestAction,
        comment: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceRequest:
        if actor.role != Role.LEVEL2:
            raise AuthorizationError("Not authorized to process this request")

        req = self._require_request(request_id)
        if req.status != CorrectionStatus.PENDING:
            raise ValidationError("Request has already been processed")
        if req.user_id not in managed_member_ids(self._groups, actor.user_id):
            raise AuthorizationError("Not authorized to process this user's request")

        status = CorrectionStatus.APPROVED_LEVEL2 if action == RequestAction.APPROVE else CorrectionStatus.REJECTED_LEVEL2
        if not self._requests.decide_level2(
            request_id=req.request_id,
            status=status,
            decided_by=actor.user_id,
            decided_at=now or now_local(),
            comment=(comment or "").strip(),
        ):
            raise ValidationError("Request has already been processed")

        logger.info("Attendance request %s -> %s by level-2 manager %s", req.request_id, status.value, actor.user_id)
        return self._require_request(req.request_id)

    def process_level1(
        self,
        actor: User,
        request_id: int,
        *,
        action: RequestAction,
        comment: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceRequest:
        if actor.role not in LEVEL1_ROLES:
            raise AuthorizationError("Not authorized to process this request")

        req = self._require_request(request_id)
        if req.status != CorrectionStatus.APPROVED_LEVEL2:
            raise ValidationError("Request must be approved by level2 manager first")

        approve = action == RequestAction.APPROVE
        correction = None
        if approve:
            record = self._attendance.get_by_id(req.attendance_id)
            if not record:
                raise NotFoundError("Attendance record not found")
            correction = self._attendance_service.correction_for(
                record,
                check_in_time=req.requested_check_in if req.request_type.touches_check_in else None,
                check_out_time=req.requested_check_out if req.request_type.touches_check_out else None,
            )

        status = CorrectionStatus.APPROVED if approve else CorrectionStatus.REJECTED_LEVEL1
        if not self._requests.decide_level1(
            request_id=req.request_id,
            status=status,
            decided_by=actor.user_id,
            decided_at=now or now_local(),
            comment=(comment or "").strip(),
            correction=correction,
        ):
            raise ValidationError("Request must be approved by level2 manager first")

        logger.info("Attendance request %s -> %s by %s", req.request_id, status.value, actor.user_id)
        if correction is not None:
            logger.info(
                "Attendance %s corrected (in=%s, out=%s)",
                correction.attendance_id,
                correction.check_in_time,
                correction.check_out_time,
            )
        return self._require_request(req.request_id)
