from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal

import pytest
from werkzeug.security import generate_password_hash

from attendance_payroll.attendance.model import AttendanceRecord
from attendance_payroll.auth.model import User
from attendance_payroll.auth.tokens import TokenCodec
from attendance_payroll.container import wire
from attendance_payroll.core.enums import (
    EmploymentStatus,
    LeaveStatus,
    PaidStatus,
    Role,
    SalaryType,
)
from attendance_payroll.core.exceptions import ConflictError
from attendance_payroll.employees.model import Employee
from attendance_payroll.leave.model import LeaveRequest
from attendance_payroll.payroll.model import SalaryRecord


def make_employee(employee_id=1, *, base_salary="3000", salary_type=SalaryType.MONTHLY, **kw) -> Employee:
    return Employee(
        employee_id=employee_id,
        full_name=kw.pop("full_name", f"Employee {employee_id}"),
        email=kw.pop("email", f"e{employee_id}@example.com"),
        phone=kw.pop("phone", None),
        department=kw.pop("department", "Engineering"),
        position=kw.pop("position", None),
        hire_date=kw.pop("hire_date", date(2023, 1, 1)),
        base_salary=Decimal(base_salary),
        salary_type=salary_type,
        status=kw.pop("status", EmploymentStatus.ACTIVE),
    )


class InMemoryEmployees:
    def __init__(self, *employees: Employee):
        self._items = {e.employee_id: e for e in employees}
        self._next_id = max(self._items, default=0) + 1

    def add(self, employee: Employee) -> Employee:
        self._items[employee.employee_id] = employee
        self._next_id = max(self._next_id, employee.employee_id + 1)
        return employee

    def get_by_id(self, employee_id):
        return self._items.get(int(employee_id))

    def get_by_email(self, email):
        return next((e for e in self._items.values() if e.email == email), None)

    def list_page(self, *, offset, limit, search=None, department=None, status=None):
        items = sorted(self._items.values(), key=lambda e: e.employee_id)
        if search:
            items = [e for e in items if search.lower() in e.full_name.lower()]
        if department:
            items = [e for e in items if e.department == department]
        if status:
            items = [e for e in items if e.status == status]
        return items[offset : offset + limit], len(items)

    def list_active(self):
        return [e for e in sorted(self._items.values(), key=lambda e: e.employee_id) if e.is_active]

    def create(self, fields):
        employee_id = self._next_id
        self._next_id += 1
        self._items[employee_id] = Employee(employee_id=employee_id, **fields.__dict__)
        return employee_id

    def update(self, employee_id, fields):
        self._items[int(employee_id)] = Employee(employee_id=int(employee_id), **fields.__dict__)

    def delete_by_id(self, employee_id):
        return self._items.pop(int(employee_id), None) is not None

    def count_by_status(self):
        out: dict[str, int] = {}
        for e in self._items.values():
            out[e.status.value] = out.get(e.status.value, 0) + 1
        return out


class InMemoryAttendance:
    def __init__(self):
        self._items: dict[int, AttendanceRecord] = {}
        self._next_id = 1
        self.failing_employees: set[int] = set()

    def get_by_id(self, attendance_id):
        return self._items.get(int(attendance_id))

    def get_for_employee_and_date(self, employee_id, work_date):
        return next(
            (r for r in self._items.values() if r.employee_id == int(employee_id) and r.work_date == work_date),
            None,
        )

    def list_page(self, *, offset, limit, employee_id=None, work_date=None, month=None):
        items = sorted(self._items.values(), key=lambda r: (r.work_date, r.attendance_id), reverse=True)
        if employee_id is not None:
            items = [r for r in items if r.employee_id == int(employee_id)]
        if work_date is not None:
            items = [r for r in items if r.work_date == work_date]
        if month:
            items = [r for r in items if r.work_date.strftime("%Y-%m-%d").startswith(month)]
        return items[offset : offset + limit], len(items)

    def list_for_month(self, employee_id, month):
        if int(employee_id) in self.failing_employees:
            raise RuntimeError("attendance query failed")
        return sorted(
            (
                r
                for r in self._items.values()
                if r.employee_id == int(employee_id) and r.work_date.strftime("%Y-%m-%d").startswith(month)
            ),
            key=lambda r: r.work_date,
        )

    def create(self, fields):
        if self.get_for_employee_and_date(fields.employee_id, fields.work_date):
            raise ConflictError("Attendance already marked for this date", code="ATTENDANCE_EXISTS")
        attendance_id = self._next_id
        self._next_id += 1
        self._items[attendance_id] = AttendanceRecord(attendance_id=attendance_id, **fields.__dict__)
        return attendance_id

    def update(self, attendance_id, fields):
        if int(attendance_id) not in self._items:
            return False
        self._items[int(attendance_id)] = AttendanceRecord(attendance_id=int(attendance_id), **fields.__dict__)
        return True

    def delete_by_id(self, attendance_id):
        return self._items.pop(int(attendance_id), None) is not None

    def count_by_status(self, *, start=None, end=None):
        out: dict[str, int] = {}
        for r in self._items.values():
            if start and r.work_date < start:
                continue
            if end and r.work_date > end:
                continue
            out[r.status.value] = out.get(r.status.value, 0) + 1
        return out


class InMemoryLeaves:
    def __init__(self):
        self._items: dict[int, LeaveRequest] = {}
        self._next_id = 1

    def create(self, *, employee_id, leave_type, start_date, end_date, days, reason):
        leave_id = self._next_id
        self._next_id += 1
        self._items[leave_id] = LeaveRequest(
            leave_id=leave_id,
            employee_id=int(employee_id),
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            days=days,
            reason=reason,
            status=LeaveStatus.PENDING,
            created_at=datetime(2024, 3, 1, 9, 0, 0),
        )
        return leave_id

    def get(self, leave_id):
        return self._items.get(int(leave_id))

    def find_overlapping(self, *, employee_id, start_date, end_date):
        for r in self._items.values():
            if (
                r.employee_id == int(employee_id)
                and r.status in (LeaveStatus.PENDING, LeaveStatus.APPROVED)
                and r.start_date <= end_date
                and r.end_date >= start_date
            ):
                return r
        return None

    def list_page(self, *, offset, limit, employee_id=None, status=None, leave_type=None):
        items = sorted(self._items.values(), key=lambda r: r.leave_id, reverse=True)
        if employee_id is not None:
            items = [r for r in items if r.employee_id == int(employee_id)]
        if status is not None:
            items = [r for r in items if r.status == status]
        if leave_type is not None:
            items = [r for r in items if r.leave_type == leave_type]
        return items[offset : offset + limit], len(items)

    def decide(self, *, leave_id, status, decided_by, comments=None):
        r = self._items.get(int(leave_id))
        if not r or r.status != LeaveStatus.PENDING:
            return False
        self._items[int(leave_id)] = replace(
            r,
            status=status,
            decided_by=decided_by,
            decided_at=datetime(2024, 3, 2, 9, 0, 0),
            comments=comments,
        )
        return True

    def delete_by_id(self, leave_id):
        return self._items.pop(int(leave_id), None) is not None

    def count_by_status(self):
        out: dict[str, int] = {}
        for r in self._items.values():
            out[r.status.value] = out.get(r.status.value, 0) + 1
        return out


class InMemorySalaries:
    def __init__(self, employees: InMemoryEmployees):
        self._employees = employees
        self._items: dict[int, SalaryRecord] = {}
        self._next_id = 1

    def upsert(self, *, employee_id, month, amounts):
        existing = self._find(employee_id, month)
        employee = self._employees.get_by_id(employee_id)
        if existing:
            salary_id, paid_status, paid_date = existing.salary_id, existing.paid_status, existing.paid_date
        else:
            salary_id, paid_status, paid_date = self._next_id, PaidStatus.PENDING, None
            self._next_id += 1
        self._items[salary_id] = SalaryRecord(
            salary_id=salary_id,
            employee_id=int(employee_id),
            month=month,
            paid_status=paid_status,
            paid_date=paid_date,
            employee_name=employee.full_name if employee else None,
            **amounts.__dict__,
        )
        return self._items[salary_id]

    def get_by_id(self, salary_id):
        return self._items.get(int(salary_id))

    def _find(self, employee_id, month):
        return next(
            (s for s in self._items.values() if s.employee_id == int(employee_id) and s.month == month),
            None,
        )

    def list_page(self, *, offset, limit, employee_id=None, month=None, year=None):
        items = sorted(self._items.values(), key=lambda s: (s.month, -s.employee_id), reverse=True)
        if employee_id is not None:
            items = [s for s in items if s.employee_id == int(employee_id)]
        if month:
            items = [s for s in items if s.month == month]
        if year is not None:
            items = [s for s in items if s.month.startswith(f"{int(year):04d}-")]
        return items[offset : offset + limit], len(items)

    def list_for_month(self, month):
        return [s for s in self._items.values() if s.month == month]

    def update(self, salary_id, *, amounts, paid_status, paid_date):
        current = self._items[int(salary_id)]
        self._items[int(salary_id)] = replace(current, paid_status=paid_status, paid_date=paid_date, **amounts.__dict__)

    def mark_paid(self, salary_id, paid_date):
        current = self._items.get(int(salary_id))
        if not current:
            return False
        self._items[int(salary_id)] = replace(current, paid_status=PaidStatus.PAID, paid_date=paid_date)
        return True

    def delete_by_id(self, salary_id):
        return self._items.pop(int(salary_id), None) is not None

    def _in_scope(self, s, month, year):
        if month and s.month != month:
            return False
        return year is None or s.month.startswith(f"{int(year):04d}-")

    def count_by_status(self, *, month=None, year=None):
        out: dict[str, int] = {}
        for s in self._items.values():
            if not self._in_scope(s, month, year):
                continue
            out[s.paid_status.value] = out.get(s.paid_status.value, 0) + 1
        return out

    def total_net(self, *, month=None, year=None, paid_status=None):
        return sum(
            (
                s.net_salary
                for s in self._items.values()
                if self._in_scope(s, month, year) and (paid_status is None or s.paid_status == paid_status)
            ),
            Decimal("0"),
        )


class InMemoryUsers:
    def __init__(self):
        self._items: dict[int, User] = {}
        self._next_id = 1
        self.last_login: dict[int, datetime] = {}

    def get_by_id(self, user_id):
        return self._items.get(int(user_id))

    def get_by_email(self, email):
        return next((u for u in self._items.values() if u.email == email), None)

    def create_user(self, *, email, full_name, password_hash, role, employee_id=None):
        user_id = self._next_id
        self._next_id += 1
        self._items[user_id] = User(
            user_id=user_id,
            email=email,
            full_name=full_name,
            password_hash=password_hash,
            role=role,
            employee_id=employee_id,
        )
        return user_id

    def touch_last_login(self, user_id, when):
        self.last_login[int(user_id)] = when


@pytest.fixture
def employees():
    return InMemoryEmployees(make_employee(1), make_employee(2, full_name="Bao Tran"))


@pytest.fixture
def attendance():
    return InMemoryAttendance()


@pytest.fixture
def leaves():
    return InMemoryLeaves()


@pytest.fixture
def salaries(employees):
    return InMemorySalaries(employees)


@pytest.fixture
def users():
    repo = InMemoryUsers()
    pw = generate_password_hash("secret123")
    repo.create_user(email="admin@example.com", full_name="Admin", password_hash=pw, role=Role.ADMIN)
    repo.create_user(email="hr@example.com", full_name="HR", password_hash=pw, role=Role.HR)
    repo.create_user(email="e1@example.com", full_name="Employee 1", password_hash=pw, role=Role.EMPLOYEE, employee_id=1)
    return repo


@pytest.fixture
def tokens():
    return TokenCodec("test-jwt-secret", ttl_seconds=3600)


@pytest.fixture
def container(users, employees, attendance, leaves, salaries, tokens):
    return wire(
        users_repo=users,
        employees_repo=employees,
        attendance_repo=attendance,
        leave_repo=leaves,
        salaries_repo=salaries,
        tokens=tokens,
    )


@pytest.fixture
def employee_factory():
    return make_employee


@pytest.fixture
def app(container, monkeypatch):
    monkeypatch.setenv("APP_ENV", "testing")
    from attendance_payroll.main import create_app

    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_header(tokens, users):
    def _header(email: str) -> dict:
        user = users.get_by_email(email)
        return {"Authorization": f"Bearer {tokens.encode_access(user_id=user.user_id, role=user.role.value)}"}

    return _header
