from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.serialization import iso
from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class LeaveRequest:
    leave_id: int
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    days: int
    reason: str
    status: LeaveStatus
    created_at: Optional[datetime] = None
    comments: Optional[str] = None
    decided_by: Optional[int] = None
    decided_at: Optional[datetime] = None
    employee_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.leave_id,
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "leave_type": self.leave_type.value,
            "start_date": iso(self.start_date),
            "end_date": iso(self.end_date),
            "days": self.days,
            "reason": self.reason,
            "status": self.status.value,
            "comments": self.comments,
            "decided_by": self.decided_by,
            "decided_at": iso(self.decided_at),
            "created_at": iso(self.created_at),
        }
