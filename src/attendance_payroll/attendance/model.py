from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal
from typing import Optional

from ..common.serialization import iso, money
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance row per (employee, work date)."""

    attendance_id: int
    employee_id: int
    work_date: date
    in_time: Optional[time]
    out_time: Optional[time]
    hours_worked: Optional[Decimal]
    status: AttendanceStatus
    notes: Optional[str] = None
    employee_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "date": iso(self.work_date),
            "in_time": iso(self.in_time),
            "out_time": iso(self.out_time),
            "hours_worked": money(self.hours_worked),
            "status": self.status.value,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class AttendanceFields:
    """Validated writable fields for mark/update."""

    employee_id: int
    work_date: date
    in_time: Optional[time]
    out_time: Optional[time]
    hours_worked: Optional[Decimal]
    status: AttendanceStatus
    notes: Optional[str] = None
