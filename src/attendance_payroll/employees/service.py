from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Optional

from ..common.pagination import Page
from ..common.validators import parse_date, parse_decimal, require_enum, require_non_empty
from ..core.enums import EmploymentStatus, SalaryType
from ..core.exceptions import ConflictError, NotFoundError
from .model import Employee, EmployeeFields
from .repository import EmployeeRepository


def _optional_str(data: Mapping[str, Any], key: str, fallback: Optional[str] = None) -> Optional[str]:
    if key not in data:
        return fallback
    value = data.get(key)
    if value is None:
        return None
    return str(value).strip() or None


class EmployeeService:
    """Use cases: HR management of employee records."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def get(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found", code="EMPLOYEE_NOT_FOUND")
        return employee

    def list(
        self,
        *,
        page: Page,
        search: Optional[str] = None,
        department: Optional[str] = None,
        status: Optional[str] = None,
    ):
        status_enum = require_enum(EmploymentStatus, status, "status") if status else None
        return self._employees.list_page(
            offset=page.offset,
            limit=page.limit,
            search=(search or "").strip() or None,
            department=(department or "").strip() or None,
            status=status_enum,
        )

    def list_active(self):
        return self._employees.list_active()

    def _build_fields(self, data: Mapping[str, Any], current: Optional[Employee] = None) -> EmployeeFields:
        if current is None or "full_name" in data:
            full_name = require_non_empty(data.get("full_name"), "full_name")
        else:
            full_name = current.full_name

        if "hire_date" in data:
            hire_date = parse_date(data["hire_date"], "hire_date") if data["hire_date"] else None
        else:
            hire_date = current.hire_date if current else None

        if "base_salary" in data:
            base_salary = parse_decimal(data["base_salary"], "base_salary", minimum=Decimal("0"))
        else:
            base_salary = current.base_salary if current else Decimal("0")

        if "salary_type" in data:
            salary_type = require_enum(SalaryType, data["salary_type"], "salary_type")
        else:
            salary_type = current.salary_type if current else SalaryType.MONTHLY

        if "status" in data:
            status = require_enum(EmploymentStatus, data["status"], "status")
        else:
            status = current.status if current else EmploymentStatus.ACTIVE

        return EmployeeFields(
            full_name=full_name,
            email=_optional_str(data, "email", current.email if current else None),
            phone=_optional_str(data, "phone", current.phone if current else None),
            department=_optional_str(data, "department", current.department if current else None),
            position=_optional_str(data, "position", current.position if current else None),
            hire_date=hire_date,
            base_salary=base_salary,
            salary_type=salary_type,
            status=status,
        )

    def _ensure_email_free(self, email: Optional[str], *, employee_id: Optional[int] = None) -> None:
        if not email:
            return
        other = self._employees.get_by_email(email)
        if other and other.employee_id != employee_id:
            raise ConflictError("Email is already used by another employee", code="EMPLOYEE_EXISTS")

    def create(self, data: Mapping[str, Any]) -> Employee:
        fields = self._build_fields(data)
        self._ensure_email_free(fields.email)
        employee_id = self._employees.create(fields)
        return self.get(employee_id)

    def update(self, employee_id: int, data: Mapping[str, Any]) -> Employee:
        current = self.get(employee_id)
        fields = self._build_fields(data, current)
        self._ensure_email_free(fields.email, employee_id=current.employee_id)
        self._employees.update(current.employee_id, fields)
        return self.get(current.employee_id)

    def delete(self, employee_id: int) -> None:
        if not self._employees.delete_by_id(int(employee_id)):
            raise NotFoundError("Employee not found", code="EMPLOYEE_NOT_FOUND")

    def stats(self) -> dict:
        counts = self._employees.count_by_status()
        by_status = {s.value: int(counts.get(s.value, 0)) for s in EmploymentStatus}
        return {"total": sum(by_status.values()), "by_status": by_status}
