from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import PaidStatus, SalaryType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetch_count, fetchall, fetchone, to_decimal
from .model import SalaryAmounts, SalaryRecord
from .repository import SalaryRepository

_SELECT = """
    SELECT s.salary_id, s.employee_id, s.month, s.basic_salary, s.bonus, s.deductions,
           s.overtime_hours, s.overtime_pay, s.net_salary, s.paid_status, s.paid_date,
           s.created_at, s.updated_at,
           e.full_name AS employee_name, e.base_salary, e.salary_type
    FROM salaries s
    JOIN employees e ON e.employee_id = s.employee_id
"""

_ZERO = Decimal("0")


def _row_to_salary(r: dict) -> SalaryRecord:
    return SalaryRecord(
        salary_id=int(r["salary_id"]),
        employee_id=int(r["employee_id"]),
        month=str(r["month"]),
        basic_salary=to_decimal(r.get("basic_salary")) or _ZERO,
        bonus=to_decimal(r.get("bonus")) or _ZERO,
        deductions=to_decimal(r.get("deductions")) or _ZERO,
        overtime_hours=to_decimal(r.get("overtime_hours")) or _ZERO,
        overtime_pay=to_decimal(r.get("overtime_pay")) or _ZERO,
        net_salary=to_decimal(r.get("net_salary")) or _ZERO,
        paid_status=PaidStatus(r["paid_status"]),
        paid_date=r.get("paid_date"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
        employee_name=r.get("employee_name"),
        base_salary=to_decimal(r.get("base_salary")),
        salary_type=SalaryType(r["salary_type"]) if r.get("salary_type") else None,
    )


def _amount_params(a: SalaryAmounts) -> tuple:
    return (a.basic_salary, a.bonus, a.deductions, a.overtime_hours, a.overtime_pay, a.net_salary)


def _month_clauses(month: Optional[str], year: Optional[int], *, prefix: str = "") -> tuple[list[str], list[object]]:
    clauses: list[str] = []
    params: list[object] = []
    if month:
        clauses.append(f"{prefix}month=%s")
        params.append(month)
    if year is not None:
        clauses.append(f"{prefix}month LIKE %s")
        params.append(f"{int(year):04d}-%")
    return clauses, params


class MySQLSalaryRepository(SalaryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(self, *, employee_id: int, month: str, amounts: SalaryAmounts) -> SalaryRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO salaries(employee_id, month, basic_salary, bonus, deductions,
                                     overtime_hours, overtime_pay, net_salary)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s) AS new
                ON DUPLICATE KEY UPDATE
                    basic_salary=new.basic_salary,
                    bonus=new.bonus,
                    deductions=new.deductions,
                    overtime_hours=new.overtime_hours,
                    overtime_pay=new.overtime_pay,
                    net_salary=new.net_salary
                """,
                (int(employee_id), month) + _amount_params(amounts),
            )
            cur.execute(f"{_SELECT} WHERE s.employee_id=%s AND s.month=%s", (int(employee_id), month))
            return _row_to_salary(fetchone(cur))

    def get_by_id(self, salary_id: int) -> Optional[SalaryRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE s.salary_id=%s", (int(salary_id),))
            r = fetchone(cur)
            return _row_to_salary(r) if r else None

    def list_page(
        self,
        *,
        offset: int,
        limit: int,
        employee_id: Optional[int] = None,
        month: Optional[str] = None,
        year: Optional[int] = None,
    ) -> tuple[Sequence[SalaryRecord], int]:
        clauses = ["1=1"]
        params: list[object] = []

        if employee_id is not None:
            clauses.append("s.employee_id=%s")
            params.append(int(employee_id))
        month_clauses, month_params = _month_clauses(month, year, prefix="s.")
        clauses += month_clauses
        params += month_params

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM salaries s WHERE {where}", tuple(params))
            total = fetch_count(cur)
            cur.execute(
                f"{_SELECT} WHERE {where} ORDER BY s.month DESC, s.employee_id LIMIT %s OFFSET %s",
                tuple(params) + (int(limit), int(offset)),
            )
            return [_row_to_salary(r) for r in fetchall(cur)], total

    def list_for_month(self, month: str) -> Sequence[SalaryRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE s.month=%s ORDER BY e.full_name, s.employee_id", (month,))
            return [_row_to_salary(r) for r in fetchall(cur)]

    def update(
        self,
        salary_id: int,
        *,
        amounts: SalaryAmounts,
        paid_status: PaidStatus,
        paid_date: Optional[date],
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE salaries
                SET basic_salary=%s, bonus=%s, deductions=%s, overtime_hours=%s,
                    overtime_pay=%s, net_salary=%s, paid_status=%s, paid_date=%s
                WHERE salary_id=%s
                """,
                _amount_params(amounts) + (paid_status.value, paid_date, int(salary_id)),
            )

    def mark_paid(self, salary_id: int, paid_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE salaries SET paid_status=%s, paid_date=%s WHERE salary_id=%s",
                (PaidStatus.PAID.value, paid_date, int(salary_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, salary_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM salaries WHERE salary_id=%s", (int(salary_id),))
            return cur.rowcount > 0

    def count_by_status(self, *, month: Optional[str] = None, year: Optional[int] = None) -> dict[str, int]:
        clauses, params = _month_clauses(month, year)
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT paid_status, COUNT(*) AS n FROM salaries{where} GROUP BY paid_status",
                tuple(params),
            )
            return {r["paid_status"]: int(r["n"]) for r in fetchall(cur)}

    def total_net(
        self,
        *,
        month: Optional[str] = None,
        year: Optional[int] = None,
        paid_status: Optional[PaidStatus] = None,
    ) -> Decimal:
        clauses, params = _month_clauses(month, year)
        clauses.insert(0, "1=1")
        if paid_status is not None:
            clauses.append("paid_status=%s")
            params.append(paid_status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT COALESCE(SUM(net_salary), 0) AS total FROM salaries WHERE {' AND '.join(clauses)}",
                tuple(params),
            )
            r = fetchone(cur)
            return to_decimal(r["total"]) if r else _ZERO
