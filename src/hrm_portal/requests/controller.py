from __future__ import annotations

from flask import Flask, jsonify, request

from ..api.auth import current_user, roles_required, token_required
from ..api.payload import dump, dump_many, parse_args, parse_body
from ..common.leave_calculator import calculate_leave_days
from ..core.enums import APPROVER_ROLES, RequestStatus, RequestType
from ..core.exceptions import ValidationError
from .schemas import LeaveDaysQuery, RequestCancelIn, RequestCreateIn, RequestOut, RequestProcessIn
from .service import NewRequest


def _status_filter():
    raw = (request.args.get("status") or "").strip()
    if not raw:
        return None
    try:
        return RequestStatus.parse(raw)
    except ValueError:
        raise ValidationError(f"Unknown status: {raw}")


def _type_filter():
    raw = (request.args.get("type") or "").strip()
    if not raw:
        return None
    try:
        return RequestType(raw)
    except ValueError:
        raise ValidationError(f"Unknown request type: {raw}")


def register(app: Flask, container) -> None:
    prefix = app.config["API_PREFIX"]

    @app.route(f"{prefix}/requests", methods=["POST"], endpoint="requests_create")
    @token_required
    def requests_create():
        body = parse_body(RequestCreateIn)
        req = container.request_service.create(
            current_user(),
            NewRequest(type=body.type, start_time=body.start_time, end_time=body.end_time, reason=body.reason),
        )
        return jsonify(dump(RequestOut, req)), 201

    @app.route(f"{prefix}/requests/my", methods=["GET"], endpoint="requests_my")
    @token_required
    def requests_my():
        reqs = container.request_service.list_mine(current_user(), status=_status_filter(), type=_type_filter())
        return jsonify(dump_many(RequestOut, reqs))

    @app.route(f"{prefix}/requests/pending", methods=["GET"], endpoint="requests_pending")
    @roles_required(*APPROVER_ROLES)
    def requests_pending():
        return jsonify(dump_many(RequestOut, container.request_service.list_pending(current_user())))

    @app.route(f"{prefix}/requests/leave-days", methods=["GET"], endpoint="requests_leave_days")
    @token_required
    def requests_leave_days():
        query = parse_args(LeaveDaysQuery)
        if query.end_time < query.start_time:
            raise ValidationError("End time must be after start time")
        return jsonify({"leaveDays": calculate_leave_days(query.start_time, query.end_time)})

    @app.route(f"{prefix}/requests/<int:request_id>", methods=["PUT"], endpoint="requests_process")
    @roles_required(*APPROVER_ROLES)
    def requests_process(request_id: int):
        body = parse_body(RequestProcessIn)
        req = container.request_service.process(current_user(), request_id, action=body.action, comment=body.comment)
        return jsonify(dump(RequestOut, req))

    @app.route(f"{prefix}/requests/cancel/<int:request_id>", methods=["PUT"], endpoint="requests_cancel")
    @token_required
    def requests_cancel(request_id: int):
        body = parse_body(RequestCancelIn)
        req = container.request_service.cancel(current_user(), request_id, reason=body.reason)
        return jsonify(dump(RequestOut, req))
