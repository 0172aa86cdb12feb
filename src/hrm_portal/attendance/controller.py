from __future__ import annotations

from flask import Flask, jsonify, request

from ..api.auth import current_user, roles_required, token_required
from ..api.payload import dump, dump_many, parse_body
from ..common.datetime_utils import parse_optional_date
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .network import client_ip
from .schemas import AttendanceNoteIn, AttendanceOut, AttendanceReportOut, AttendanceRowOut
from .service import TEAM_VIEW_ROLES


def _date_range():
    return (
        parse_optional_date(request.args.get("startDate"), "startDate"),
        parse_optional_date(request.args.get("endDate"), "endDate"),
    )


def _optional_int(name: str):
    raw = (request.args.get(name) or "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def register(app: Flask, container) -> None:
    prefix = app.config["API_PREFIX"]

    @app.route(f"{prefix}/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @token_required
    def attendance_check_in():
        body = parse_body(AttendanceNoteIn)
        record = container.attendance_service.check_in(
            current_user().user_id,
            note=body.note,
            client_ip=client_ip(request.headers, request.remote_addr),
        )
        return jsonify(dump(AttendanceOut, record)), 201

    @app.route(f"{prefix}/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @token_required
    def attendance_check_out():
        body = parse_body(AttendanceNoteIn)
        record = container.attendance_service.check_out(
            current_user().user_id,
            note=body.note,
            client_ip=client_ip(request.headers, request.remote_addr),
        )
        return jsonify(dump(AttendanceOut, record))

    @app.route(f"{prefix}/attendance/my", methods=["GET"], endpoint="attendance_my")
    @token_required
    def attendance_my():
        start_date, end_date = _date_range()
        records = container.attendance_service.my_history(
            current_user().user_id, start_date=start_date, end_date=end_date
        )
        return jsonify(dump_many(AttendanceOut, records))

    @app.route(f"{prefix}/attendance/today", methods=["GET"], endpoint="attendance_today")
    @token_required
    def attendance_today():
        record = container.attendance_service.today(current_user().user_id)
        if not record:
            return jsonify({"message": "No attendance record for today"})
        return jsonify(dump(AttendanceOut, record))

    @app.route(f"{prefix}/attendance/team", methods=["GET"], endpoint="attendance_team")
    @roles_required(*TEAM_VIEW_ROLES)
    def attendance_team():
        start_date, end_date = _date_range()
        rows = container.attendance_service.team_attendance(
            current_user(),
            group_id=_optional_int("groupId"),
            start_date=start_date,
            end_date=end_date,
        )
        return jsonify(dump_many(AttendanceRowOut, rows))

    @app.route(f"{prefix}/attendance/admin-view", methods=["GET"], endpoint="attendance_admin_view")
    @roles_required(Role.ADMIN)
    def attendance_admin_view():
        user_id = _optional_int("userId")
        if user_id is None:
            raise ValidationError("userId is required")
        start_date, end_date = _date_range()
        rows = container.attendance_service.user_attendance(user_id, start_date=start_date, end_date=end_date)
        return jsonify(dump_many(AttendanceRowOut, rows))

    @app.route(f"{prefix}/attendance/report", methods=["GET"], endpoint="attendance_report")
    @roles_required(Role.ADMIN)
    def attendance_report():
        start_date, end_date = _date_range()
        report = container.attendance_service.report(
            start_date=start_date,
            end_date=end_date,
            user_id=_optional_int("userId"),
        )
        return jsonify(dump(AttendanceReportOut, report))
