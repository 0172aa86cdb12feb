from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.network import OfficeNetworkPolicy
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .attendance_requests.mysql_attendance_request_repository import MySQLAttendanceRequestRepository
from .attendance_requests.repository import AttendanceRequestRepository
from .attendance_requests.service import AttendanceRequestService
from .common.datetime_utils import parse_hhmm
from .contracts.mysql_contract_repository import MySQLContractRepository
from .contracts.repository import ContractRepository
from .contracts.service import ContractService
from .core.constants import DEFAULT_JWT_EXPIRATION_HOURS, DEFAULT_LATE_GRACE_MINUTES, DEFAULT_WORK_START
from .database.connection import DBConfig, DatabaseConnection
from .devices.mysql_device_repository import MySQLDeviceRepository
from .devices.mysql_device_type_repository import MySQLDeviceTypeRepository
from .devices.repository import DeviceRepository, DeviceTypeRepository
from .devices.service import DeviceService, DeviceTypeService
from .groups.mysql_group_repository import MySQLGroupRepository
from .groups.repository import GroupRepository
from .groups.service import GroupService
from .news.mysql_news_repository import MySQLNewsRepository
from .news.repository import NewsRepository
from .news.service import NewsService
from .requests.mysql_request_repository import MySQLRequestRepository
from .requests.repository import RequestRepository
from .requests.service import RequestService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AccountService, AuthService, LeaveAccrualService
from .users.tokens import TokenService


@dataclass(frozen=True)
class Repositories:
    users: UserRepository
    attendance: AttendanceRepository
    requests: RequestRepository
    attendance_requests: AttendanceRequestRepository
    groups: GroupRepository
    devices: DeviceRepository
    device_types: DeviceTypeRepository
    contracts: ContractRepository
    news: NewsRepository


@dataclass(frozen=True)
class Container:
    repos: Repositories

    auth_service: AuthService
    account_service: AccountService
    leave_accrual_service: LeaveAccrualService
    attendance_service: AttendanceService
    request_service: RequestService
    attendance_request_service: AttendanceRequestService
    group_service: GroupService
    device_service: DeviceService
    device_type_service: DeviceTypeService
    contract_service: ContractService
    news_service: NewsService

    conn: Optional[DatabaseConnection] = None


def mysql_repositories(conn: DatabaseConnection) -> Repositories:
    return Repositories(
        users=MySQLUserRepository(conn),
        attendance=MySQLAttendanceRepository(conn),
        requests=MySQLRequestRepository(conn),
        attendance_requests=MySQLAttendanceRequestRepository(conn),
        groups=MySQLGroupRepository(conn),
        devices=MySQLDeviceRepository(conn),
        device_types=MySQLDeviceTypeRepository(conn),
        contracts=MySQLContractRepository(conn),
        news=MySQLNewsRepository(conn),
    )


def assemble(repos: Repositories, settings: Any, *, conn: Optional[DatabaseConnection] = None) -> Container:
    """Wire services on top of ``repos`` using values from a settings module."""
    tokens = TokenService(
        getattr(settings, "JWT_SECRET"),
        expiration_hours=int(getattr(settings, "JWT_EXPIRATION_HOURS", DEFAULT_JWT_EXPIRATION_HOURS)),
    )
    network = OfficeNetworkPolicy(
        enabled=bool(getattr(settings, "ENABLE_IP_RESTRICTION", False)),
        allowed_ips=getattr(settings, "ALLOWED_IPS", ()),
        allowed_subnets=getattr(settings, "ALLOWED_SUBNETS", ()),
    )
    attendance_service = AttendanceService(
        repos.attendance,
        repos.users,
        repos.groups,
        work_start=parse_hhmm(getattr(settings, "WORK_START_TIME", DEFAULT_WORK_START)),
        grace_minutes=int(getattr(settings, "LATE_GRACE_MINUTES", DEFAULT_LATE_GRACE_MINUTES)),
        network=network,
    )

    return Container(
        repos=repos,
        auth_service=AuthService(repos.users, tokens),
        account_service=AccountService(repos.users),
        leave_accrual_service=LeaveAccrualService(repos.users),
        attendance_service=attendance_service,
        request_service=RequestService(repos.requests, repos.groups),
        attendance_request_service=AttendanceRequestService(
            repos.attendance_requests,
            repos.attendance,
            attendance_service,
            repos.groups,
        ),
        group_service=GroupService(repos.groups, repos.users),
        device_service=DeviceService(repos.devices, repos.contracts),
        device_type_service=DeviceTypeService(repos.device_types),
        contract_service=ContractService(repos.contracts, repos.devices, repos.users),
        news_service=NewsService(repos.news),
        conn=conn,
    )


def build_container(*, db_config: dict, settings: Any) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return assemble(mysql_repositories(conn), settings, conn=conn)
