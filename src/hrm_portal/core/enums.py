from __future__ import annotations

from enum import Enum, IntEnum


class Role(str, Enum):
    """User roles used for authorization."""

    ADMIN = "admin"
    USER = "user"
    MANAGER = "manager"
    LEVEL1 = "level1"
    LEVEL2 = "level2"


MANAGER_ROLES = frozenset({Role.MANAGER, Role.LEVEL1, Role.LEVEL2})
APPROVER_ROLES = frozenset({Role.ADMIN}) | MANAGER_ROLES


class UserStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class AttendanceStatus(str, Enum):
    """Daily attendance status stored with each record."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"
    HALF_DAY = "half-day"


class RequestType(str, Enum):
    WORK_TIME = "work-time"
    LEAVE = "leave-request"
    WFH = "wfh-request"
    OVERTIME = "overtime"


class RequestStatus(IntEnum):
    """Request workflow status. Stored and serialized as its integer code."""

    PENDING = 1
    CONFIRMED = 2
    APPROVED = 3
    REJECTED = 4
    CANCELLED = 5

    @property
    def text(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, value) -> "RequestStatus":
        """Accept an integer code or a case-insensitive name."""

        if isinstance(value, cls):
            return value
        if isinstance(value, int) or (isinstance(value, str) and value.strip().isdigit()):
            return cls(int(value))
        if isinstance(value, str) and value.strip().upper() in cls.__members__:
            return cls[value.strip().upper()]
        raise ValueError(f"Unknown request status: {value!r}")


class RequestAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


class CorrectionType(str, Enum):
    """Which attendance timestamps an attendance request wants to change."""

    CHECK_IN = "check-in"
    CHECK_OUT = "check-out"
    BOTH = "both"

    @property
    def touches_check_in(self) -> bool:
        return self in {CorrectionType.CHECK_IN, CorrectionType.BOTH}

    @property
    def touches_check_out(self) -> bool:
        return self in {CorrectionType.CHECK_OUT, CorrectionType.BOTH}


class CorrectionStatus(str, Enum):
    PENDING = "pending"
    APPROVED_LEVEL2 = "approved-level2"
    APPROVED = "approved"
    REJECTED_LEVEL2 = "rejected-level2"
    REJECTED_LEVEL1 = "rejected-level1"


class ContractType(str, Enum):
    ASSIGNMENT = "ASSIGNMENT"
    RECOVERY = "RECOVERY"


class ContractStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    REJECTED = "REJECTED"
