from __future__ import annotations

from flask import Flask, jsonify, request

from ..api.auth import current_user, roles_required, token_required
from ..api.payload import dump, dump_many, parse_body
from ..core.enums import CorrectionStatus, Role
from ..core.exceptions import ValidationError
from .schemas import ApprovalIn, AttendanceRequestCreateIn, AttendanceRequestOut
from .service import LEVEL1_ROLES, REVIEWER_ROLES, NewAttendanceRequest


def register(app: Flask, container) -> None:
    prefix = f"{app.config['API_PREFIX']}/attendance-requests"

    @app.route(prefix, methods=["POST"], endpoint="attendance_requests_create")
    @token_required
    def attendance_requests_create():
        body = parse_body(AttendanceRequestCreateIn)
        req = container.attendance_request_service.create(
            current_user(),
            NewAttendanceRequest(
                attendance_id=body.attendance_id,
                request_type=body.request_type,
                reason=body.reason,
                requested_check_in=body.requested_check_in,
                requested_check_out=body.requested_check_out,
            ),
        )
        return jsonify(dump(AttendanceRequestOut, req)), 201

    @app.route(f"{prefix}/my", methods=["GET"], endpoint="attendance_requests_my")
    @token_required
    def attendance_requests_my():
        raw = (request.args.get("status") or "").strip()
        try:
            status = CorrectionStatus(raw) if raw else None
        except ValueError:
            raise ValidationError(f"Unknown status: {raw}")
        reqs = container.attendance_request_service.list_mine(current_user(), status=status)
        return jsonify(dump_many(AttendanceRequestOut, reqs))

    @app.route(f"{prefix}/pending", methods=["GET"], endpoint="attendance_requests_pending")
    @roles_required(*REVIEWER_ROLES)
    def attendance_requests_pending():
        reqs = container.attendance_request_service.list_pending(current_user())
        return jsonify(dump_many(AttendanceRequestOut, reqs))

    @app.route(f"{prefix}/level2/<int:request_id>", methods=["PUT"], endpoint="attendance_requests_level2")
    @roles_required(Role.LEVEL2)
    def attendance_requests_level2(request_id: int):
        body = parse_body(ApprovalIn)
        req = container.attendance_request_service.process_level2(
            current_user(), request_id, action=body.action, comment=body.comment
        )
        return jsonify(dump(AttendanceRequestOut, req))

    @app.route(f"{prefix}/level1/<int:request_id>", methods=["PUT"], endpoint="attendance_requests_level1")
    @roles_required(*LEVEL1_ROLES)
    def attendance_requests_level1(request_id: int):
        body = parse_body(ApprovalIn)
        req = container.attendance_request_service.process_level1(
            current_user(), request_id, action=body.action, comment=body.comment
        )
        return jsonify(dump(AttendanceRequestOut, req))
