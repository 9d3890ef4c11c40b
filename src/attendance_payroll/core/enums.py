from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles used for route authorization."""

    ADMIN = "admin"
    HR = "hr"
    EMPLOYEE = "employee"


class AttendanceStatus(str, Enum):
    """Canonical attendance status stored in the database."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    HALF_DAY = "half-day"
    LEAVE = "leave"
    EARLY_LEAVE = "early-leave"

    @classmethod
    def parse(cls, value: str) -> "AttendanceStatus":
        """Accept canonical values plus the legacy spellings seen in older clients.

        `halfday`, `HALF_DAY`, `half_day` and `Half-Day` all map to HALF_DAY.
        """

        key = (value or "").strip().lower().replace("_", "-")
        if key == "halfday":
            key = "half-day"
        elif key == "earlyleave":
            key = "early-leave"
        return cls(key)


class SalaryType(str, Enum):
    MONTHLY = "monthly"
    HOURLY = "hourly"


class EmploymentStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    TERMINATED = "terminated"
    ON_LEAVE = "on-leave"


class PaidStatus(str, Enum):
    """Salary row lifecycle: pending -> paid; overdue only via direct edit."""

    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"


class LeaveStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class LeaveType(str, Enum):
    SICK = "sick"
    VACATION = "vacation"
    PERSONAL = "personal"
    EMERGENCY = "emergency"
    MATERNITY = "maternity"
    PATERNITY = "paternity"
