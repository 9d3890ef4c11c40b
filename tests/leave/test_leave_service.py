from __future__ import annotations

from datetime import date

import pytest

from attendance_payroll.common.pagination import Page
from attendance_payroll.core.enums import LeaveStatus
from attendance_payroll.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from attendance_payroll.leave.service import LeaveService


@pytest.fixture
def service(leaves, employees):
    return LeaveService(leaves, employees)


def _request(service, employee_id=1, start="2024-03-04", end="2024-03-06", **extra):
    data = {"leave_type": "vacation", "start_date": start, "end_date": end, "reason": "Family trip"}
    data.update(extra)
    return service.create(employee_id, data)


def test_create_counts_days_inclusive(service):
    req = _request(service)

    assert req.days == 3
    assert req.status == LeaveStatus.PENDING
    assert req.start_date == date(2024, 3, 4)


def test_create_validates(service):
    with pytest.raises(ValidationError):
        _request(service, start="2024-03-06", end="2024-03-04")
    with pytest.raises(ValidationError):
        _request(service, reason="  ")
    with pytest.raises(ValidationError):
        _request(service, leave_type="holiday")
    with pytest.raises(NotFoundError):
        _request(service, employee_id=77)


def test_overlapping_request_conflicts(service):
    _request(service)

    with pytest.raises(ConflictError) as e:
        _request(service, start="2024-03-06", end="2024-03-08")
    assert e.value.code == "OVERLAPPING_LEAVE"

    # another employee is unaffected
    assert _request(service, employee_id=2).days == 3


def test_rejected_request_frees_the_dates(service):
    req = _request(service)
    service.decide(req.leave_id, decision="rejected", decided_by=1, comments="Busy week")

    assert _request(service).status == LeaveStatus.PENDING


def test_decide_only_pending(service):
    req = _request(service)

    approved = service.decide(req.leave_id, decision="approve", decided_by=2)
    assert approved.status == LeaveStatus.APPROVED
    assert approved.decided_by == 2

    with pytest.raises(ValidationError):
        service.decide(req.leave_id, decision="rejected", decided_by=2)
    with pytest.raises(ValidationError):
        service.decide(req.leave_id, decision="maybe", decided_by=2)


def test_cancel_by_owner_only(service, users):
    owner = users.get_by_email("e1@example.com")
    hr = users.get_by_email("hr@example.com")
    req = _request(service, employee_id=2)

    with pytest.raises(AuthorizationError):
        service.cancel(req.leave_id, user=owner)

    cancelled = service.cancel(req.leave_id, user=hr)
    assert cancelled.status == LeaveStatus.CANCELLED

    with pytest.raises(ValidationError):
        service.cancel(req.leave_id, user=hr)


def test_list_filters_and_stats(service):
    a = _request(service)
    _request(service, employee_id=2, leave_type="sick")
    service.decide(a.leave_id, decision="approved", decided_by=1)

    items, total = service.list(page=Page(), status="approved")
    assert total == 1 and items[0].leave_id == a.leave_id

    _, total = service.list(page=Page(), leave_type="sick")
    assert total == 1

    stats = service.stats()
    assert stats["total"] == 2
    assert stats["approved"] == 1
    assert stats["pending"] == 1
    assert stats["approval_rate"] == 50.0


def test_delete(service):
    req = _request(service)
    service.delete(req.leave_id)
    with pytest.raises(NotFoundError):
        service.get(req.leave_id)
