from __future__ import annotations

from datetime import date, datetime

import pytest

from hrm_portal.core.enums import AttendanceStatus, ContractStatus, Role, UserStatus


@pytest.fixture
def admin(repos):
    return repos.users.add("root", role=Role.ADMIN)


@pytest.fixture
def alice(repos):
    return repos.users.add("alice")


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok"}


def test_unknown_route_is_json_404(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert "message" in resp.get_json()


def test_register_then_me(client):
    resp = client.post(
        "/api/auth/register",
        json={
            "username": "newbie",
            "email": "newbie@example.com",
            "password": "pa55word",
            "firstName": "New",
            "lastName": "Bie",
            "phoneNumber": "0123",
        },
    )
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["user"]["username"] == "newbie"

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.status_code == 200
    assert me.get_json()["phoneNumber"] == "0123"
    assert me.get_json()["role"] == "user"


def test_register_payload_errors_are_listed(client):
    resp = client.post("/api/auth/register", json={"username": "x"})
    assert resp.status_code == 400
    assert resp.get_json()["errors"]


def test_login_status_codes(repos, client, password):
    repos.users.add("alice")
    repos.users.add("frozen", status=UserStatus.INACTIVE)

    assert client.post("/api/auth/login", json={"username": "alice", "password": password}).status_code == 200
    assert client.post("/api/auth/login", json={"username": "alice", "password": "bad"}).status_code == 401
    assert client.post("/api/auth/login", json={"username": "frozen", "password": password}).status_code == 403


def test_missing_or_bad_token(client):
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me", headers={"Authorization": "Bearer junk"}).status_code == 401


def test_admin_routes_need_admin(client, login, alice):
    resp = client.get("/api/admin/accounts", headers=login(alice))
    assert resp.status_code == 403


def test_admin_account_crud(client, login, admin):
    headers = login(admin)
    created = client.post(
        "/api/admin/accounts",
        json={
            "username": "bob",
            "email": "bob@example.com",
            "password": "pa55word",
            "firstName": "Bob",
            "lastName": "Tran",
            "role": "manager",
        },
        headers=headers,
    )
    assert created.status_code == 201
    bob_id = created.get_json()["id"]

    dup = client.post(
        "/api/admin/accounts",
        json={"username": "bob", "email": "x@example.com", "password": "pa55word", "firstName": "B", "lastName": "T"},
        headers=headers,
    )
    assert dup.status_code == 400

    updated = client.put(f"/api/admin/accounts/{bob_id}", json={"status": "suspended"}, headers=headers)
    assert updated.get_json()["isActive"] is False

    assert client.delete(f"/api/admin/accounts/{admin.user_id}", headers=headers).status_code == 400
    assert client.delete(f"/api/admin/accounts/{bob_id}", headers=headers).status_code == 200
    assert client.delete(f"/api/admin/accounts/{bob_id}", headers=headers).status_code == 404


def test_check_in_and_out(client, login, alice):
    headers = login(alice)

    first = client.post("/api/attendance/check-in", json={"note": "morning"}, headers=headers)
    assert first.status_code == 201
    assert first.get_json()["checkInNote"] == "morning"

    again = client.post("/api/attendance/check-in", json={}, headers=headers)
    assert again.status_code == 400
    assert again.get_json()["message"] == "You have already checked in today"

    out = client.post("/api/attendance/check-out", json={}, headers=headers)
    assert out.status_code == 200
    assert out.get_json()["checkOutTime"] is not None

    assert client.post("/api/attendance/check-out", json={}, headers=headers).status_code == 400
    assert len(client.get("/api/attendance/my", headers=headers).get_json()) == 1


def test_check_out_before_check_in(client, login, alice):
    resp = client.post("/api/attendance/check-out", json={}, headers=login(alice))
    assert resp.status_code == 400


def test_attendance_report_is_admin_only(client, login, admin, alice):
    client.post("/api/attendance/check-in", json={}, headers=login(alice))

    assert client.get("/api/attendance/report", headers=login(alice)).status_code == 403
    report = client.get("/api/attendance/report", headers=login(admin)).get_json()
    assert report["summary"][0]["username"] == "alice"

    assert client.get("/api/attendance/admin-view", headers=login(admin)).status_code == 400
    view = client.get(f"/api/attendance/admin-view?userId={alice.user_id}", headers=login(admin))
    assert len(view.get_json()) == 1


def test_request_flow_over_http(repos, client, login, admin, alice):
    created = client.post(
        "/api/requests",
        json={
            "type": "leave-request",
            "startTime": "2026-03-02T08:00:00",
            "endTime": "2026-03-02T12:00:00",
            "reason": "dentist",
        },
        headers=login(alice),
    )
    assert created.status_code == 201
    body = created.get_json()
    assert body["status"] == 1
    assert body["statusText"] == "pending"
    assert body["leaveDays"] == 0.5

    rid = body["id"]
    approved = client.put(f"/api/requests/{rid}", json={"action": "approve"}, headers=login(admin))
    assert approved.get_json()["status"] == 3

    again = client.put(f"/api/requests/{rid}", json={"action": "reject"}, headers=login(admin))
    assert again.status_code == 400
    cancel = client.put(f"/api/requests/cancel/{rid}", json={}, headers=login(alice))
    assert cancel.status_code == 400

    mine = client.get("/api/requests/my?status=approved", headers=login(alice)).get_json()
    assert [r["id"] for r in mine] == [rid]


def test_leave_days_preview(client, login, alice):
    resp = client.get(
        "/api/requests/leave-days?startTime=2026-03-06T08:00:00&endTime=2026-03-09T17:00:00",
        headers=login(alice),
    )
    assert resp.get_json() == {"leaveDays": 2}


def test_leave_days_preview_reads_utc_as_local_time(server_tz, client, login, alice):
    resp = client.get(
        "/api/requests/leave-days?startTime=2026-03-02T01:00:00Z&endTime=2026-03-02T10:00:00Z",
        headers=login(alice),
    )
    assert resp.status_code == 200
    assert resp.get_json() == {"leaveDays": 1}


def test_leave_days_preview_with_offset_start_and_naive_end(server_tz, client, login, alice):
    resp = client.get(
        "/api/requests/leave-days",
        query_string={"startTime": "2026-03-02T08:00:00+07:00", "endTime": "2026-03-03T17:00:00"},
        headers=login(alice),
    )
    assert resp.status_code == 200
    assert resp.get_json() == {"leaveDays": 2}


def test_leave_request_with_utc_start_and_naive_end(server_tz, client, login, alice):
    resp = client.post(
        "/api/requests",
        json={
            "type": "leave-request",
            "startTime": "2026-03-02T01:00:00Z",
            "endTime": "2026-03-03T17:00:00",
            "reason": "family trip",
        },
        headers=login(alice),
    )
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["startTime"] == "2026-03-02T08:00:00"
    assert body["leaveDays"] == 2


def test_utc_end_before_local_start_is_a_validation_error(server_tz, client, login, alice):
    resp = client.post(
        "/api/requests",
        json={
            "type": "leave-request",
            "startTime": "2026-03-02T08:00:00",
            "endTime": "2026-03-02T00:30:00Z",
            "reason": "oops",
        },
        headers=login(alice),
    )
    assert resp.status_code == 400


def test_correction_with_utc_times_is_applied_in_local_time(server_tz, repos, client, login, alice):
    lead = repos.users.add("lead", role=Role.LEVEL2)
    director = repos.users.add("director", role=Role.LEVEL1)
    gid = repos.groups.create_group(
        name="Dev", description=None, level=2, manager_id=lead.user_id, parent_group_id=None
    )
    repos.groups.add_member(gid, lead.user_id)
    repos.groups.add_member(gid, alice.user_id)
    attendance_id = repos.attendance.create_check_in(
        user_id=alice.user_id,
        work_date=date(2026, 3, 2),
        check_in_time=datetime(2026, 3, 2, 9, 40),
        status=AttendanceStatus.LATE,
        note=None,
    )
    repos.attendance.record_check_out(
        attendance_id=attendance_id, check_out_time=datetime(2026, 3, 2, 17, 0), note=None, total_hours=7.33
    )

    created = client.post(
        "/api/attendance-requests",
        json={
            "attendanceId": attendance_id,
            "requestType": "check-in",
            "requestedCheckIn": "2026-03-02T01:30:00Z",
            "reason": "badge reader was down",
        },
        headers=login(alice),
    )
    assert created.status_code == 201
    assert created.get_json()["requestedCheckIn"] == "2026-03-02T08:30:00"

    rid = created.get_json()["id"]
    step2 = client.put(f"/api/attendance-requests/level2/{rid}", json={"action": "approve"}, headers=login(lead))
    assert step2.status_code == 200
    step1 = client.put(f"/api/attendance-requests/level1/{rid}", json={"action": "approve"}, headers=login(director))
    assert step1.status_code == 200
    assert step1.get_json()["status"] == "approved"

    record = repos.attendance.get_by_id(attendance_id)
    assert record.check_in_time == datetime(2026, 3, 2, 8, 30)
    assert record.total_hours == 8.5


def test_device_and_contract_lifecycle(client, login, admin, alice):
    admin_headers = login(admin)
    device = client.post(
        "/api/devices",
        json={"code": "lt-01", "typeCode": "laptop", "description": "ThinkPad"},
        headers=admin_headers,
    )
    assert device.status_code == 201
    device_id = device.get_json()["id"]
    assert device.get_json()["code"] == "LT-01"

    assert client.post("/api/devices", json={"code": "x", "typeCode": "laptop", "description": "d"}, headers=admin_headers).status_code == 400

    contract = client.post(
        "/api/contracts",
        json={"deviceId": device_id, "userId": alice.user_id, "type": "ASSIGNMENT"},
        headers=admin_headers,
    )
    assert contract.status_code == 201
    contract_id = contract.get_json()["id"]

    duplicate = client.post(
        "/api/contracts",
        json={"deviceId": device_id, "userId": admin.user_id, "type": "ASSIGNMENT"},
        headers=admin_headers,
    )
    assert duplicate.status_code == 400

    assert client.put(f"/api/contracts/{contract_id}/confirm", headers=admin_headers).status_code == 404
    assert client.put(f"/api/contracts/user/{contract_id}/confirm", headers=admin_headers).status_code == 403

    confirmed = client.put(f"/api/contracts/user/{contract_id}/confirm", headers=login(alice))
    assert confirmed.get_json()["status"] == ContractStatus.CONFIRMED.value
    completed = client.put(f"/api/contracts/{contract_id}/complete", headers=admin_headers)
    assert completed.get_json()["status"] == ContractStatus.COMPLETED.value

    held = client.get(f"/api/devices/user/{alice.user_id}", headers=login(alice)).get_json()
    assert [d["code"] for d in held] == ["LT-01"]
    free = client.get("/api/devices/all?unassignedOnly=true", headers=login(alice)).get_json()
    assert free == []

    assert client.delete(f"/api/devices/{device_id}", headers=admin_headers).status_code == 400

    mine = client.get("/api/contracts/user/my", headers=login(alice)).get_json()
    assert mine["pagination"]["total"] == 1
    assert mine["contracts"][0]["id"] == contract_id


def test_device_search_pagination(client, login, admin):
    headers = login(admin)
    for n in range(3):
        client.post(
            "/api/devices",
            json={"code": f"MN-0{n}", "typeCode": "monitor", "description": "Dell"},
            headers=headers,
        )
    page = client.get("/api/devices?page=1&limit=2&typeCode=monitor", headers=headers).get_json()
    assert len(page["devices"]) == 2
    assert page["pagination"] == {"total": 3, "page": 1, "totalPages": 2, "limit": 2}


def test_device_types(client, login, admin):
    headers = login(admin)
    created = client.post("/api/device-types", json={"name": "Laptop", "code": "lt"}, headers=headers)
    assert created.status_code == 201
    assert created.get_json()["code"] == "LT"
    assert client.post("/api/device-types", json={"name": "Laptop", "code": "nb"}, headers=headers).status_code == 400

    type_id = created.get_json()["id"]
    client.put(f"/api/device-types/{type_id}", json={"isActive": False}, headers=headers)
    assert client.get("/api/device-types/all", headers=headers).get_json() == []


def test_groups_over_http(client, login, admin, alice):
    headers = login(admin)
    group = client.post("/api/groups", json={"name": "Dev", "level": 2}, headers=headers)
    assert group.status_code == 201
    gid = group.get_json()["id"]

    added = client.post(f"/api/groups/{gid}/members", json={"userId": alice.user_id}, headers=headers)
    assert [m["username"] for m in added.get_json()["members"]] == ["alice"]
    assert client.post(f"/api/groups/{gid}/members", json={"userId": alice.user_id}, headers=headers).status_code == 400

    assert client.get(f"/api/groups/{gid}", headers=login(alice)).status_code == 200
    assert client.get("/api/groups", headers=login(alice)).status_code == 403


def test_news_is_public_to_read(client, login, admin, alice):
    created = client.post(
        "/api/news",
        json={"title": "Welcome", "content": "Hello all", "tags": "hr, onboarding"},
        headers=login(admin),
    )
    assert created.status_code == 201
    news_id = created.get_json()["id"]
    assert created.get_json()["tags"] == ["hr", "onboarding"]

    listing = client.get("/api/news").get_json()
    assert listing["pagination"]["total"] == 1
    assert client.get(f"/api/news/{news_id}").status_code == 200

    assert client.post("/api/news", json={"title": "x", "content": "y"}, headers=login(alice)).status_code == 403
    assert client.delete(f"/api/news/{news_id}", headers=login(alice)).status_code == 403
    assert client.delete(f"/api/news/{news_id}", headers=login(admin)).status_code == 200


def test_accrue_leave_days_command(app, repos):
    user = repos.users.add("alice")
    result = app.test_cli_runner().invoke(args=["accrue-leave-days"])

    assert "Added leave days to 1 active users" in result.output
    assert repos.users.get_by_id(user.user_id).leave_days == 1
