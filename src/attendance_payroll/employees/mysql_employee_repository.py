from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import EmploymentStatus, SalaryType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetch_count, fetchall, fetchone, to_decimal
from .model import Employee, EmployeeFields
from .repository import EmployeeRepository

_COLUMNS = """
    employee_id, full_name, email, phone, department, position, hire_date,
    base_salary, salary_type, status, created_at, updated_at
"""


def _row_to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        full_name=r["full_name"],
        email=r.get("email"),
        phone=r.get("phone"),
        department=r.get("department"),
        position=r.get("position"),
        hire_date=r.get("hire_date"),
        base_salary=to_decimal(r.get("base_salary") or 0),
        salary_type=SalaryType(r["salary_type"]),
        status=EmploymentStatus(r["status"]),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _row_to_employee(r) if r else None

    def get_by_email(self, email: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE email=%s", (email,))
            r = fetchone(cur)
            return _row_to_employee(r) if r else None

    def list_page(
        self,
        *,
        offset: int,
        limit: int,
        search: Optional[str] = None,
        department: Optional[str] = None,
        status: Optional[EmploymentStatus] = None,
    ) -> tuple[Sequence[Employee], int]:
        clauses = ["1=1"]
        params: list[object] = []

        if search:
            clauses.append("(full_name LIKE %s OR email LIKE %s)")
            like = f"%{search}%"
            params.extend([like, like])
        if department:
            clauses.append("department=%s")
            params.append(department)
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM employees WHERE {where}", tuple(params))
            total = fetch_count(cur)
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employees
                WHERE {where}
                ORDER BY employee_id DESC
                LIMIT %s OFFSET %s
                """,
                tuple(params) + (int(limit), int(offset)),
            )
            return [_row_to_employee(r) for r in fetchall(cur)], total

    def list_active(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE status=%s ORDER BY employee_id",
                (EmploymentStatus.ACTIVE.value,),
            )
            return [_row_to_employee(r) for r in fetchall(cur)]

    def create(self, fields: EmployeeFields) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(
                    full_name, email, phone, department, position, hire_date,
                    base_salary, salary_type, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    fields.full_name,
                    fields.email,
                    fields.phone,
                    fields.department,
                    fields.position,
                    fields.hire_date,
                    fields.base_salary,
                    fields.salary_type.value,
                    fields.status.value,
                ),
            )
            return int(cur.lastrowid)

    def update(self, employee_id: int, fields: EmployeeFields) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET full_name=%s, email=%s, phone=%s, department=%s, position=%s,
                    hire_date=%s, base_salary=%s, salary_type=%s, status=%s
                WHERE employee_id=%s
                """,
                (
                    fields.full_name,
                    fields.email,
                    fields.phone,
                    fields.department,
                    fields.position,
                    fields.hire_date,
                    fields.base_salary,
                    fields.salary_type.value,
                    fields.status.value,
                    int(employee_id),
                ),
            )

    def delete_by_id(self, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE employee_id=%s", (int(employee_id),))
            return cur.rowcount > 0

    def count_by_status(self) -> dict[str, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT status, COUNT(*) AS n FROM employees GROUP BY status")
            return {r["status"]: int(r["n"]) for r in fetchall(cur)}
