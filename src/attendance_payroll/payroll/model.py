from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..common.serialization import iso, money
from ..core.enums import PaidStatus, SalaryType


@dataclass(frozen=True)
class AttendanceSummary:
    total_days: int
    present_days: int
    half_days: int
    absent_days: int
    leave_days: int
    working_days: Decimal

    def to_dict(self) -> dict:
        return {
            "total_days": self.total_days,
            "present_days": self.present_days,
            "half_days": self.half_days,
            "absent_days": self.absent_days,
            "leave_days": self.leave_days,
            "working_days": float(self.working_days),
        }


@dataclass(frozen=True)
class SalaryBreakdown:
    """Result of one payroll calculation; monetary fields are already rounded."""

    basic_salary: Decimal
    bonus: Decimal
    deductions: Decimal
    overtime_hours: Decimal
    overtime_pay: Decimal
    net_salary: Decimal
    attendance_summary: AttendanceSummary

    def to_dict(self) -> dict:
        return {
            "basic_salary": money(self.basic_salary),
            "bonus": money(self.bonus),
            "deductions": money(self.deductions),
            "overtime_hours": money(self.overtime_hours),
            "overtime_pay": money(self.overtime_pay),
            "net_salary": money(self.net_salary),
            "attendance_summary": self.attendance_summary.to_dict(),
        }


@dataclass(frozen=True)
class SalaryRecord:
    """Domain entity: one salary row per (employee, month)."""

    salary_id: int
    employee_id: int
    month: str
    basic_salary: Decimal
    bonus: Decimal
    deductions: Decimal
    overtime_hours: Decimal
    overtime_pay: Decimal
    net_salary: Decimal
    paid_status: PaidStatus = PaidStatus.PENDING
    paid_date: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    employee_name: Optional[str] = None
    base_salary: Optional[Decimal] = None
    salary_type: Optional[SalaryType] = None

    def to_dict(self) -> dict:
        return {
            "id": self.salary_id,
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "month": self.month,
            "basic_salary": money(self.basic_salary),
            "bonus": money(self.bonus),
            "deductions": money(self.deductions),
            "overtime_hours": money(self.overtime_hours),
            "overtime_pay": money(self.overtime_pay),
            "net_salary": money(self.net_salary),
            "paid_status": self.paid_status.value,
            "paid_date": iso(self.paid_date),
            "base_salary": money(self.base_salary),
            "salary_type": self.salary_type.value if self.salary_type else None,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }


@dataclass(frozen=True)
class SalaryAmounts:
    """Writable money columns of a salary row."""

    basic_salary: Decimal
    bonus: Decimal
    deductions: Decimal
    overtime_hours: Decimal
    overtime_pay: Decimal
    net_salary: Decimal

    @classmethod
    def from_breakdown(cls, b: SalaryBreakdown) -> "SalaryAmounts":
        return cls(
            basic_salary=b.basic_salary,
            bonus=b.bonus,
            deductions=b.deductions,
            overtime_hours=b.overtime_hours,
            overtime_pay=b.overtime_pay,
            net_salary=b.net_salary,
        )
