from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Mapping, Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import today_utc
from ..common.pagination import Page
from ..common.serialization import iso, money
from ..common.validators import (
    parse_date,
    parse_decimal,
    parse_month_key,
    parse_month_year,
    require_enum,
    require_positive_int,
)
from ..core.enums import PaidStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator, summarize
from .model import SalaryAmounts, SalaryRecord
from .repository import SalaryRepository

logger = logging.getLogger(__name__)

EXPORT_FIELDS = [
    "employee_id",
    "employee_name",
    "month",
    "basic_salary",
    "bonus",
    "deductions",
    "overtime_hours",
    "overtime_pay",
    "net_salary",
    "paid_status",
    "paid_date",
]

_ZERO = Decimal("0")


@dataclass(frozen=True)
class SalaryExport:
    month: str
    rows: list[dict]


def _month_filter(month: Any, year: Any) -> tuple[Optional[str], Optional[int]]:
    """Resolve list filters: ``month=YYYY-MM``, ``month=M&year=Y``, or just ``year``."""

    month = str(month).strip() if month not in (None, "") else None
    year = str(year).strip() if year not in (None, "") else None

    if month and "-" in month:
        month_key = parse_month_key(month)
        if year and month_key[:4] != parse_month_year(1, year)[:4]:
            raise ValidationError("month and year do not agree")
        return month_key, None
    if month and year:
        return parse_month_year(month, year), None
    if month:
        raise ValidationError("month must be YYYY-MM, or be combined with year")
    if year:
        return None, int(parse_month_year(1, year)[:4])
    return None, None


class PayrollService:
    def __init__(
        self,
        salaries: SalaryRepository,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
        today: Callable[[], date] = today_utc,
    ):
        self._salaries = salaries
        self._employees = employees
        self._attendance = attendance
        self._calculator = calculator or StandardPayrollCalculator()
        self._today = today

    def _calculate(self, employee: Employee, month_key: str) -> dict:
        records = self._attendance.list_for_month(employee.employee_id, month_key)
        breakdown = self._calculator.calculate(
            base_salary=employee.base_salary,
            salary_type=employee.salary_type,
            records=records,
            month_year=month_key,
        )
        salary = self._salaries.upsert(
            employee_id=employee.employee_id,
            month=month_key,
            amounts=SalaryAmounts.from_breakdown(breakdown),
        )
        return {"salary": salary, "calculation": breakdown, "records": records}

    def calculate_for_employee(self, employee_id: int, month: Any, year: Any) -> dict:
        """Compute and persist one employee's salary for a month.

        Calling it again for the same month recomputes and overwrites the same row.
        """

        month_key = parse_month_year(month, year)
        employee = self._employees.get_by_id(require_positive_int(employee_id, "employee_id"))
        if not employee:
            raise NotFoundError("Employee not found", code="EMPLOYEE_NOT_FOUND")

        out = self._calculate(employee, month_key)
        records = out["records"]
        summary = summarize(records, total_days=len(records))
        logger.info("Salary calculated for employee %s (%s)", employee.employee_id, month_key)
        return {
            "salary": out["salary"].to_dict(),
            "calculation": out["calculation"].to_dict(),
            "attendance_summary": {
                "total_days": summary.total_days,
                "present_days": summary.present_days,
                "absent_days": summary.absent_days,
                "half_days": summary.half_days,
                "leave_days": summary.leave_days,
            },
        }

    def generate_payroll(self, month: Any, year: Any) -> dict:
        """Run the calculation for every active employee, one at a time.

        A failure for one employee becomes an ``error`` entry and the loop continues.
        """

        month_key = parse_month_year(month, year)
        results: list[dict] = []

        for employee in self._employees.list_active():
            try:
                out = self._calculate(employee, month_key)
            except Exception as exc:
                logger.exception("Payroll failed for employee %s (%s)", employee.employee_id, month_key)
                results.append(
                    {
                        "employee_id": employee.employee_id,
                        "employee_name": employee.full_name,
                        "error": str(exc) or exc.__class__.__name__,
                    }
                )
                continue

            results.append(
                {
                    "employee_id": employee.employee_id,
                    "employee_name": employee.full_name,
                    "salary": out["salary"].to_dict(),
                    "calculation": out["calculation"].to_dict(),
                }
            )

        failed = sum(1 for r in results if "error" in r)
        logger.info("Payroll %s generated: %s ok, %s failed", month_key, len(results) - failed, failed)
        return {"message": "Payroll generated successfully", "month": month_key, "results": results}

    def get(self, salary_id: int) -> SalaryRecord:
        salary = self._salaries.get_by_id(int(salary_id))
        if not salary:
            raise NotFoundError("Salary record not found", code="SALARY_NOT_FOUND")
        return salary

    def list(
        self,
        *,
        page: Page,
        employee_id: Optional[int] = None,
        month: Any = None,
        year: Any = None,
    ):
        month_key, year_only = _month_filter(month, year)
        return self._salaries.list_page(
            offset=page.offset,
            limit=page.limit,
            employee_id=employee_id,
            month=month_key,
            year=year_only,
        )

    def list_for_employee(self, employee_id: int, *, page: Page, month: Any = None, year: Any = None):
        if not self._employees.get_by_id(int(employee_id)):
            raise NotFoundError("Employee not found", code="EMPLOYEE_NOT_FOUND")
        return self.list(page=page, employee_id=int(employee_id), month=month, year=year)

    def update(self, salary_id: int, data: Mapping[str, Any]) -> SalaryRecord:
        """Direct edit of a salary row. Only the supplied fields change."""

        current = self.get(salary_id)

        def amount(field: str, value: Decimal, minimum: Optional[Decimal] = _ZERO) -> Decimal:
            if field not in data or data[field] is None:
                return value
            return parse_decimal(data[field], field, minimum=minimum)

        amounts = SalaryAmounts(
            basic_salary=amount("basic_salary", current.basic_salary),
            bonus=amount("bonus", current.bonus),
            deductions=amount("deductions", current.deductions),
            overtime_hours=amount("overtime_hours", current.overtime_hours),
            overtime_pay=amount("overtime_pay", current.overtime_pay),
            net_salary=amount("net_salary", current.net_salary, minimum=None),
        )

        paid_status = current.paid_status
        if data.get("paid_status"):
            paid_status = require_enum(PaidStatus, data["paid_status"], "paid_status")

        paid_date = current.paid_date
        if "paid_date" in data:
            paid_date = parse_date(data["paid_date"], "paid_date") if data["paid_date"] else None

        self._salaries.update(current.salary_id, amounts=amounts, paid_status=paid_status, paid_date=paid_date)
        return self.get(current.salary_id)

    def mark_paid(self, salary_id: int, paid_date: Any = None) -> SalaryRecord:
        when = parse_date(paid_date, "paid_date") if paid_date else self._today()
        current = self.get(salary_id)
        self._salaries.mark_paid(current.salary_id, when)
        logger.info("Salary %s marked paid on %s", current.salary_id, when)
        return self.get(current.salary_id)

    def delete(self, salary_id: int) -> None:
        if not self._salaries.delete_by_id(int(salary_id)):
            raise NotFoundError("Salary record not found", code="SALARY_NOT_FOUND")

    def stats(self, *, month: Any = None, year: Any = None) -> dict:
        month_key, year_only = _month_filter(month, year)
        scope = {"month": month_key, "year": year_only}
        counts = self._salaries.count_by_status(**scope)
        by_status = {s.value: int(counts.get(s.value, 0)) for s in PaidStatus}
        return {
            "month": month_key,
            "year": year_only,
            "total_records": sum(by_status.values()),
            "by_status": by_status,
            "total_net": money(self._salaries.total_net(**scope)),
            "total_paid": money(self._salaries.total_net(paid_status=PaidStatus.PAID, **scope)),
            "total_pending": money(self._salaries.total_net(paid_status=PaidStatus.PENDING, **scope)),
        }

    def build_export(self, month: Any, year: Any) -> SalaryExport:
        month_key = parse_month_year(month, year)
        rows = []
        for s in self._salaries.list_for_month(month_key):
            rows.append(
                {
                    "employee_id": s.employee_id,
                    "employee_name": s.employee_name or "",
                    "month": s.month,
                    "basic_salary": f"{s.basic_salary:.2f}",
                    "bonus": f"{s.bonus:.2f}",
                    "deductions": f"{s.deductions:.2f}",
                    "overtime_hours": f"{s.overtime_hours:.2f}",
                    "overtime_pay": f"{s.overtime_pay:.2f}",
                    "net_salary": f"{s.net_salary:.2f}",
                    "paid_status": s.paid_status.value,
                    "paid_date": iso(s.paid_date) or "",
                }
            )
        return SalaryExport(month=month_key, rows=rows)
