from __future__ import annotations

import importlib
import os
import time
from dataclasses import replace
from datetime import datetime

import pytest
from werkzeug.security import generate_password_hash

from hrm_portal import create_app
from hrm_portal.attendance.model import AttendanceRecord, AttendanceReportRow
from hrm_portal.attendance.repository import DuplicateAttendanceError
from hrm_portal.attendance_requests.model import Approval, AttendanceRequest
from hrm_portal.container import Repositories, assemble
from hrm_portal.contracts.model import Contract
from hrm_portal.core.enums import (
    ContractStatus,
    ContractType,
    CorrectionStatus,
    RequestStatus,
    Role,
    UserStatus,
)
from hrm_portal.devices.model import Device, DeviceType
from hrm_portal.groups.model import Group
from hrm_portal.news.model import News
from hrm_portal.requests.model import Decision, Request
from hrm_portal.users.model import User

PASSWORD = "secret123"
# Cheap hash so fixtures stay fast
PASSWORD_HASH = generate_password_hash(PASSWORD, method="pbkdf2:sha256:1000")

CREATED_AT = datetime(2026, 3, 1, 9, 0, 0)


def _page(items, query):
    items = list(items)
    return items[query.offset: query.offset + query.limit], len(items)


class FakeUserRepo:
    def __init__(self):
        self._next_id = 1
        self.users: dict[int, User] = {}

    def add(self, username, *, role=Role.USER, status=UserStatus.ACTIVE, **extra) -> User:
        uid = self._next_id
        self._next_id += 1
        user = User(
            user_id=uid,
            username=username,
            email=extra.pop("email", f"{username}@example.com"),
            password_hash=PASSWORD_HASH,
            first_name=extra.pop("first_name", username.title()),
            last_name=extra.pop("last_name", "Tester"),
            role=role,
            status=status,
            is_active=status == UserStatus.ACTIVE,
            **extra,
        )
        self.users[uid] = user
        return user

    def get_by_id(self, user_id):
        return self.users.get(int(user_id)) if user_id is not None else None

    def get_by_username(self, username):
        return next((u for u in self.users.values() if u.username == username), None)

    def find_conflict(self, *, username, email, exclude_user_id=None):
        for u in self.users.values():
            if u.user_id == exclude_user_id:
                continue
            if (username and u.username == username) or (email and u.email == email):
                return u
        return None

    def list_by_ids(self, user_ids):
        return [self.users[i] for i in user_ids if i in self.users]

    def list_users(self, *, search="", limit=200):
        users = [u for u in self.users.values() if not search or search in u.username or search in u.email]
        return users[:limit]

    def create_user(self, *, username, email, password_hash, first_name, last_name, role, status, profile=None):
        user = self.add(username, role=role, status=status, email=email, first_name=first_name, last_name=last_name)
        fields = dict(profile or {})
        user = replace(user, password_hash=password_hash, **fields)
        self.users[user.user_id] = user
        return user.user_id

    def update_fields(self, user_id, fields):
        user = self.users.get(int(user_id))
        if not user:
            return False
        self.users[user.user_id] = replace(user, **dict(fields))
        return True

    def update_password(self, user_id, password_hash):
        return self.update_fields(user_id, {"password_hash": password_hash})

    def delete_by_id(self, user_id):
        return self.users.pop(int(user_id), None) is not None

    def add_leave_days_to_active(self, amount):
        count = 0
        for uid, u in list(self.users.items()):
            if u.status == UserStatus.ACTIVE:
                self.users[uid] = replace(u, leave_days=u.leave_days + amount)
                count += 1
        return count


class FakeAttendanceRepo:
    def __init__(self, users: FakeUserRepo):
        self._users = users
        self._next_id = 1
        self.records: dict[int, AttendanceRecord] = {}

    def get_by_id(self, attendance_id):
        return self.records.get(int(attendance_id))

    def get_for_user_and_date(self, user_id, work_date):
        return next(
            (r for r in self.records.values() if r.user_id == user_id and r.work_date == work_date),
            None,
        )

    def create_check_in(self, *, user_id, work_date, check_in_time, status, note):
        # unique (user_id, work_date)
        if any(r.user_id == user_id and r.work_date == work_date for r in self.records.values()):
            raise DuplicateAttendanceError(user_id, work_date)
        rid = self._next_id
        self._next_id += 1
        self.records[rid] = AttendanceRecord(
            attendance_id=rid,
            user_id=user_id,
            work_date=work_date,
            check_in_time=check_in_time,
            status=status,
            check_in_note=note,
        )
        return rid

    def record_check_out(self, *, attendance_id, check_out_time, note, total_hours):
        record = self.records.get(int(attendance_id))
        if not record or record.check_out_time is not None:
            return False
        self.records[record.attendance_id] = replace(
            record, check_out_time=check_out_time, check_out_note=note, total_hours=total_hours
        )
        return True

    def _in_range(self, r, start_date, end_date):
        return (start_date is None or r.work_date >= start_date) and (end_date is None or r.work_date <= end_date)

    def list_for_user(self, user_id, *, start_date=None, end_date=None):
        return [r for r in self.records.values() if r.user_id == user_id and self._in_range(r, start_date, end_date)]

    def list_with_users(self, *, user_ids=None, start_date=None, end_date=None):
        rows = []
        for r in self.records.values():
            if user_ids is not None and r.user_id not in user_ids:
                continue
            if not self._in_range(r, start_date, end_date):
                continue
            u = self._users.get_by_id(r.user_id)
            rows.append(
                AttendanceReportRow(
                    attendance_id=r.attendance_id,
                    user_id=r.user_id,
                    username=u.username,
                    first_name=u.first_name,
                    last_name=u.last_name,
                    email=u.email,
                    work_date=r.work_date,
                    check_in_time=r.check_in_time,
                    status=r.status,
                    check_out_time=r.check_out_time,
                    total_hours=r.total_hours,
                )
            )
        return rows


_DECISION_FIELD = {
    RequestStatus.APPROVED: "approved_by",
    RequestStatus.REJECTED: "rejected_by",
    RequestStatus.CANCELLED: "cancelled_by",
}


class FakeRequestRepo:
    def __init__(self):
        self._next_id = 1
        self.requests: dict[int, Request] = {}

    def create_request(self, *, user_id, type, start_time, end_time, reason, leave_days):
        rid = self._next_id
        self._next_id += 1
        self.requests[rid] = Request(
            request_id=rid,
            user_id=user_id,
            type=type,
            start_time=start_time,
            end_time=end_time,
            reason=reason,
            leave_days=leave_days,
            created_at=CREATED_AT,
        )
        return rid

    def get_by_id(self, request_id):
        return self.requests.get(int(request_id))

    def list_for_user(self, user_id, *, status=None, type=None):
        return [
            r
            for r in self.requests.values()
            if r.user_id == user_id and (status is None or r.status == status) and (type is None or r.type == type)
        ]

    def list_pending(self, *, user_ids=None):
        return [
            r
            for r in self.requests.values()
            if r.status == RequestStatus.PENDING and (user_ids is None or r.user_id in user_ids)
        ]

    def decide(self, *, request_id, status, decided_by, decided_at, comment=None):
        req = self.requests.get(int(request_id))
        if not req or req.status != RequestStatus.PENDING:
            return False
        decision = Decision(user_id=decided_by, at=decided_at, comment=comment)
        self.requests[req.request_id] = replace(req, status=status, **{_DECISION_FIELD[status]: decision})
        return True


class FakeAttendanceRequestRepo:
    def __init__(self, attendance: FakeAttendanceRepo):
        self._attendance = attendance
        self._next_id = 1
        self.requests: dict[int, AttendanceRequest] = {}

    def create_request(
        self,
        *,
        user_id,
        attendance_id,
        request_type,
        current_check_in,
        current_check_out,
        requested_check_in,
        requested_check_out,
        reason,
    ):
        rid = self._next_id
        self._next_id += 1
        self.requests[rid] = AttendanceRequest(
            request_id=rid,
            user_id=user_id,
            attendance_id=attendance_id,
            request_type=request_type,
            reason=reason,
            current_check_in=current_check_in,
            current_check_out=current_check_out,
            requested_check_in=requested_check_in,
            requested_check_out=requested_check_out,
            created_at=CREATED_AT,
        )
        return rid

    def get_by_id(self, request_id):
        return self.requests.get(int(request_id))

    def list_for_user(self, user_id, *, status=None):
        return [r for r in self.requests.values() if r.user_id == user_id and (status is None or r.status == status)]

    def list_by_status(self, status, *, user_ids=None):
        return [
            r for r in self.requests.values() if r.status == status and (user_ids is None or r.user_id in user_ids)
        ]

    def _decide(self, field, expected, request_id, status, decided_by, decided_at, comment):
        req = self.requests.get(int(request_id))
        if not req or req.status != expected:
            return False
        approval = Approval(user_id=decided_by, at=decided_at, comment=comment)
        self.requests[req.request_id] = replace(req, status=status, **{field: approval})
        return True

    def decide_level2(self, *, request_id, status, decided_by, decided_at, comment=None):
        return self._decide(
            "approval_level2", CorrectionStatus.PENDING, request_id, status, decided_by, decided_at, comment
        )

    def decide_level1(self, *, request_id, status, decided_by, decided_at, comment=None, correction=None):
        req = self.requests.get(int(request_id))
        if not req or req.status != CorrectionStatus.APPROVED_LEVEL2:
            return False
        if correction is not None:
            record = self._attendance.records[correction.attendance_id]
            self._attendance.records[record.attendance_id] = replace(
                record,
                check_in_time=correction.check_in_time,
                check_out_time=correction.check_out_time,
                total_hours=correction.total_hours,
            )
        return self._decide(
            "approval_level1", CorrectionStatus.APPROVED_LEVEL2, request_id, status, decided_by, decided_at, comment
        )


class FakeGroupRepo:
    def __init__(self):
        self._next_id = 1
        self.groups: dict[int, Group] = {}
        self.members: set[tuple[int, int]] = set()

    def get_by_id(self, group_id):
        return self.groups.get(int(group_id)) if group_id is not None else None

    def list_groups(self):
        return list(self.groups.values())

    def list_children(self, group_id):
        return [g for g in self.groups.values() if g.parent_group_id == group_id]

    def list_managed_by(self, manager_id):
        return [g for g in self.groups.values() if g.manager_id == manager_id]

    def list_member_ids(self, group_id):
        return sorted(uid for gid, uid in self.members if gid == group_id)

    def is_member(self, group_id, user_id):
        return (group_id, user_id) in self.members

    def create_group(self, *, name, description, level, manager_id, parent_group_id):
        gid = self._next_id
        self._next_id += 1
        self.groups[gid] = Group(
            group_id=gid,
            name=name,
            level=level,
            description=description,
            manager_id=manager_id,
            parent_group_id=parent_group_id,
            created_at=CREATED_AT,
        )
        return gid

    def update_group(self, group_id, fields):
        self.groups[group_id] = replace(self.groups[group_id], **dict(fields))
        return True

    def add_member(self, group_id, user_id):
        key = (int(group_id), int(user_id))
        if key in self.members:
            return False
        self.members.add(key)
        return True

    def remove_member(self, group_id, user_id):
        key = (int(group_id), int(user_id))
        if key not in self.members:
            return False
        self.members.discard(key)
        return True


class FakeContractRepo:
    def __init__(self):
        self._next_id = 1
        self.contracts: dict[int, Contract] = {}

    def get_by_id(self, contract_id):
        return self.contracts.get(int(contract_id))

    def create_contract(self, *, device_id, user_id, type, note):
        cid = self._next_id
        self._next_id += 1
        self.contracts[cid] = Contract(
            contract_id=cid, device_id=device_id, user_id=user_id, type=type, note=note, created_at=CREATED_AT
        )
        return cid

    def update_fields(self, contract_id, fields):
        self.contracts[contract_id] = replace(self.contracts[contract_id], **dict(fields))
        return True

    def delete_by_id(self, contract_id):
        return self.contracts.pop(int(contract_id), None) is not None

    def search(self, query, *, type=None, status=None, user_id=None):
        items = [
            c
            for c in sorted(self.contracts.values(), key=lambda c: c.contract_id, reverse=True)
            if (not query.search or query.search in c.note)
            and (type is None or c.type == type)
            and (status is None or c.status == status)
            and (user_id is None or c.user_id == user_id)
        ]
        return _page(items, query)

    def has_open_assignment(self, device_id, *, exclude_id=None):
        return any(
            c.device_id == device_id and c.is_open_assignment and c.contract_id != exclude_id
            for c in self.contracts.values()
        )

    def count_for_device(self, device_id):
        return sum(1 for c in self.contracts.values() if c.device_id == device_id)

    def transition(self, contract_id, *, from_status, to_status):
        contract = self.contracts.get(int(contract_id))
        if not contract or contract.status != from_status:
            return False
        self.contracts[contract.contract_id] = replace(contract, status=to_status)
        return True

    def holder_of(self, device_id):
        """User holding the device through a completed assignment not recovered since."""
        completed = [
            c
            for c in sorted(self.contracts.values(), key=lambda c: c.contract_id)
            if c.device_id == device_id and c.status == ContractStatus.COMPLETED
        ]
        holder = None
        for c in completed:
            holder = c.user_id if c.type == ContractType.ASSIGNMENT else None
        return holder


class FakeDeviceRepo:
    def __init__(self, contracts: FakeContractRepo):
        self._contracts = contracts
        self._next_id = 1
        self.devices: dict[int, Device] = {}

    def get_by_id(self, device_id):
        return self.devices.get(int(device_id))

    def find_by_code(self, code, type_code, *, exclude_id=None):
        return next(
            (
                d
                for d in self.devices.values()
                if d.code == code and d.type_code == type_code and d.device_id != exclude_id
            ),
            None,
        )

    def list_simple(self, *, unassigned_only=False):
        devices = sorted(self.devices.values(), key=lambda d: d.code)
        if unassigned_only:
            devices = [d for d in devices if self._contracts.holder_of(d.device_id) is None]
        return devices

    def search(self, query, *, type_code=None):
        items = [
            d
            for d in self.devices.values()
            if (not query.search or query.search in d.code or query.search in d.description)
            and (type_code is None or d.type_code == type_code.upper())
        ]
        return _page(items, query)

    def list_held_by(self, user_id):
        return [d for d in self.list_simple() if self._contracts.holder_of(d.device_id) == user_id]

    def create_device(self, *, code, type_code, description, note):
        did = self._next_id
        self._next_id += 1
        self.devices[did] = Device(
            device_id=did, code=code, type_code=type_code, description=description, note=note, created_at=CREATED_AT
        )
        return did

    def update_device(self, device_id, *, code, type_code, description, note):
        self.devices[device_id] = replace(
            self.devices[device_id], code=code, type_code=type_code, description=description, note=note
        )
        return True

    def delete_by_id(self, device_id):
        return self.devices.pop(int(device_id), None) is not None


class FakeDeviceTypeRepo:
    def __init__(self):
        self._next_id = 1
        self.types: dict[int, DeviceType] = {}

    def get_by_id(self, device_type_id):
        return self.types.get(int(device_type_id))

    def find_conflict(self, *, name, code, exclude_id=None):
        return next(
            (
                t
                for t in self.types.values()
                if (t.name == name or t.code == code) and t.device_type_id != exclude_id
            ),
            None,
        )

    def list_active(self):
        return [t for t in self.types.values() if t.is_active]

    def search(self, query):
        items = [t for t in self.types.values() if not query.search or query.search in t.name]
        return _page(items, query)

    def create_device_type(self, *, name, code, description):
        tid = self._next_id
        self._next_id += 1
        self.types[tid] = DeviceType(
            device_type_id=tid, name=name, code=code, description=description, created_at=CREATED_AT
        )
        return tid

    def update_device_type(self, device_type_id, fields):
        self.types[device_type_id] = replace(self.types[device_type_id], **dict(fields))
        return True

    def delete_by_id(self, device_type_id):
        return self.types.pop(int(device_type_id), None) is not None


class FakeNewsRepo:
    def __init__(self):
        self._next_id = 1
        self.news: dict[int, News] = {}
        self.created_at = CREATED_AT

    def get_by_id(self, news_id):
        return self.news.get(int(news_id))

    def search(self, query):
        items = [
            n
            for n in sorted(self.news.values(), key=lambda n: n.news_id, reverse=True)
            if not query.search or query.search in n.title or query.search in n.content
        ]
        return _page(items, query)

    def create_news(self, *, title, content, thumbnail, tags, created_by):
        nid = self._next_id
        self._next_id += 1
        self.news[nid] = News(
            news_id=nid,
            title=title,
            content=content,
            thumbnail=thumbnail,
            tags=tuple(tags),
            created_by=created_by,
            created_at=self.created_at,
        )
        return nid

    def update_fields(self, news_id, fields):
        fields = dict(fields)
        if "tags" in fields:
            fields["tags"] = tuple(fields["tags"])
        self.news[news_id] = replace(self.news[news_id], **fields)
        return True

    def delete_by_id(self, news_id):
        return self.news.pop(int(news_id), None) is not None


@pytest.fixture
def fixed_now():
    # Monday
    return datetime(2026, 3, 2, 8, 15, 0)


@pytest.fixture
def server_tz():
    """Run with the server clock at UTC+7 (no DST), as a deployment in Vietnam would."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    original = os.environ.get("TZ")
    os.environ["TZ"] = "ICT-7"
    time.tzset()
    yield
    if original is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = original
    time.tzset()


@pytest.fixture
def settings(monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    return importlib.import_module("hrm_portal.config.testing")


@pytest.fixture
def repos():
    users = FakeUserRepo()
    attendance = FakeAttendanceRepo(users)
    contracts = FakeContractRepo()
    return Repositories(
        users=users,
        attendance=attendance,
        requests=FakeRequestRepo(),
        attendance_requests=FakeAttendanceRequestRepo(attendance),
        groups=FakeGroupRepo(),
        devices=FakeDeviceRepo(contracts),
        device_types=FakeDeviceTypeRepo(),
        contracts=contracts,
        news=FakeNewsRepo(),
    )


@pytest.fixture
def container(repos, settings):
    return assemble(repos, settings)


@pytest.fixture
def app(container):
    app = create_app(container=container)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(container):
    def _login(user: User) -> dict:
        token = container.auth_service.login(user.username, PASSWORD).token
        return {"Authorization": f"Bearer {token}"}

    return _login


@pytest.fixture
def password():
    return PASSWORD
