from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..common.serialization import iso, money
from ..core.enums import EmploymentStatus, SalaryType


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee on the payroll.

    Note: Plain data object (no DB access code).
    """

    employee_id: int
    full_name: str
    email: Optional[str]
    phone: Optional[str]
    department: Optional[str]
    position: Optional[str]
    hire_date: Optional[date]
    base_salary: Decimal
    salary_type: SalaryType
    status: EmploymentStatus = EmploymentStatus.ACTIVE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == EmploymentStatus.ACTIVE

    def to_dict(self) -> dict:
        return {
            "id": self.employee_id,
            "full_name": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "department": self.department,
            "position": self.position,
            "hire_date": iso(self.hire_date),
            "base_salary": money(self.base_salary),
            "salary_type": self.salary_type.value,
            "status": self.status.value,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }


@dataclass(frozen=True)
class EmployeeFields:
    """Validated writable fields for create/update."""

    full_name: str
    email: Optional[str]
    phone: Optional[str]
    department: Optional[str]
    position: Optional[str]
    hire_date: Optional[date]
    base_salary: Decimal
    salary_type: SalaryType
    status: EmploymentStatus
