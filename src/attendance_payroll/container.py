from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.policy import WorkdayPolicy
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .auth.mysql_user_repository import MySQLUserRepository
from .auth.repository import UserRepository
from .auth.service import AuthService
from .auth.tokens import TokenCodec
from .core.constants import DEFAULT_TOKEN_TTL_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .leave.repository import LeaveRepository
from .leave.service import LeaveService
from .payroll.mysql_salary_repository import MySQLSalaryRepository
from .payroll.repository import SalaryRepository
from .payroll.service import PayrollService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    leave_repo: LeaveRepository
    salaries_repo: SalaryRepository

    auth_service: AuthService
    employee_service: EmployeeService
    attendance_service: AttendanceService
    leave_service: LeaveService
    payroll_service: PayrollService


def wire(
    *,
    users_repo: UserRepository,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    leave_repo: LeaveRepository,
    salaries_repo: SalaryRepository,
    tokens: TokenCodec,
    policy: Optional[WorkdayPolicy] = None,
) -> Container:
    """Build the services on top of any set of repositories (MySQL or in-memory)."""

    return Container(
        users_repo=users_repo,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        leave_repo=leave_repo,
        salaries_repo=salaries_repo,
        auth_service=AuthService(users_repo, tokens, employees_repo),
        employee_service=EmployeeService(employees_repo),
        attendance_service=AttendanceService(attendance_repo, employees_repo, policy=policy),
        leave_service=LeaveService(leave_repo, employees_repo),
        payroll_service=PayrollService(salaries_repo, employees_repo, attendance_repo),
    )


def build_container(
    *,
    db_config: dict,
    jwt_secret: str,
    jwt_ttl: int = DEFAULT_TOKEN_TTL_SECONDS,
    policy: Optional[WorkdayPolicy] = None,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire(
        users_repo=MySQLUserRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leave_repo=MySQLLeaveRepository(conn),
        salaries_repo=MySQLSalaryRepository(conn),
        tokens=TokenCodec(jwt_secret, ttl_seconds=int(jwt_ttl)),
        policy=policy,
    )
