from __future__ import annotations

from decimal import Decimal

import pytest

from attendance_payroll.common.pagination import Page
from attendance_payroll.core.enums import EmploymentStatus, SalaryType
from attendance_payroll.core.exceptions import ConflictError, NotFoundError, ValidationError
from attendance_payroll.employees.service import EmployeeService


@pytest.fixture
def service(employees):
    return EmployeeService(employees)


def test_create_applies_defaults(service):
    emp = service.create({"full_name": "  Dung Pham ", "email": "dung@example.com", "base_salary": "4500.50"})

    assert emp.full_name == "Dung Pham"
    assert emp.base_salary == Decimal("4500.50")
    assert emp.salary_type == SalaryType.MONTHLY
    assert emp.status == EmploymentStatus.ACTIVE


def test_create_rejects_bad_input(service):
    with pytest.raises(ValidationError):
        service.create({"email": "x@example.com"})
    with pytest.raises(ValidationError):
        service.create({"full_name": "X", "base_salary": "-5"})
    with pytest.raises(ValidationError):
        service.create({"full_name": "X", "salary_type": "weekly"})


def test_duplicate_email_conflicts(service):
    with pytest.raises(ConflictError):
        service.create({"full_name": "Copy", "email": "e1@example.com"})


def test_partial_update_keeps_other_fields(service):
    emp = service.update(1, {"salary_type": "hourly", "base_salary": 25})

    assert emp.salary_type == SalaryType.HOURLY
    assert emp.base_salary == Decimal("25")
    assert emp.full_name == "Employee 1"
    assert emp.email == "e1@example.com"


def test_update_may_keep_own_email(service):
    emp = service.update(1, {"email": "e1@example.com", "department": "Sales"})
    assert emp.department == "Sales"


def test_list_and_stats(service):
    service.update(2, {"status": "inactive"})

    items, total = service.list(page=Page(), status="active")
    assert total == 1 and items[0].employee_id == 1
    assert [e.employee_id for e in service.list_active()] == [1]

    stats = service.stats()
    assert stats["total"] == 2
    assert stats["by_status"]["inactive"] == 1


def test_delete(service):
    service.delete(2)
    with pytest.raises(NotFoundError):
        service.get(2)
    with pytest.raises(NotFoundError):
        service.delete(2)
