from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from ..auth.model import User
from ..common.pagination import Page
from ..common.validators import parse_date, require_enum, require_non_empty, require_positive_int
from ..core.enums import LeaveStatus, LeaveType
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import LeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)

_DECISIONS = {
    "approve": LeaveStatus.APPROVED,
    "approved": LeaveStatus.APPROVED,
    "reject": LeaveStatus.REJECTED,
    "rejected": LeaveStatus.REJECTED,
}


class LeaveService:
    def __init__(self, leaves: LeaveRepository, employees: EmployeeRepository):
        self._leaves = leaves
        self._employees = employees

    def get(self, leave_id: int) -> LeaveRequest:
        req = self._leaves.get(int(leave_id))
        if not req:
            raise NotFoundError("Leave request not found", code="LEAVE_NOT_FOUND")
        return req

    def list(
        self,
        *,
        page: Page,
        employee_id: Optional[int] = None,
        status: Optional[str] = None,
        leave_type: Optional[str] = None,
    ):
        return self._leaves.list_page(
            offset=page.offset,
            limit=page.limit,
            employee_id=employee_id,
            status=require_enum(LeaveStatus, status, "status") if status else None,
            leave_type=require_enum(LeaveType, leave_type, "leaveType") if leave_type else None,
        )

    def create(self, employee_id: int, data: Mapping[str, Any]) -> LeaveRequest:
        employee_id = require_positive_int(employee_id, "employee_id")
        leave_type = require_enum(LeaveType, data.get("leave_type"), "leave_type")
        start = parse_date(data.get("start_date"), "start_date")
        end = parse_date(data.get("end_date"), "end_date")
        reason = require_non_empty(data.get("reason"), "reason")

        if end < start:
            raise ValidationError("end_date cannot be before start_date")
        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("Employee not found", code="EMPLOYEE_NOT_FOUND")
        if self._leaves.find_overlapping(employee_id=employee_id, start_date=start, end_date=end):
            raise ConflictError("Leave request overlaps an existing request", code="OVERLAPPING_LEAVE")

        leave_id = self._leaves.create(
            employee_id=employee_id,
            leave_type=leave_type,
            start_date=start,
            end_date=end,
            days=(end - start).days + 1,
            reason=reason,
        )
        logger.info("Leave request %s created for employee %s (%s to %s)", leave_id, employee_id, start, end)
        return self.get(leave_id)

    def decide(self, leave_id: int, *, decision: Any, decided_by: int, comments: Any = None) -> LeaveRequest:
        status = _DECISIONS.get(str(decision or "").strip().lower())
        if status is None:
            raise ValidationError("status must be one of: approved, rejected")

        req = self.get(leave_id)
        if req.status != LeaveStatus.PENDING:
            raise ValidationError("Leave request has already been processed", code="LEAVE_NOT_PENDING")

        note = (str(comments).strip() or None) if comments is not None else None
        if not self._leaves.decide(leave_id=req.leave_id, status=status, decided_by=decided_by, comments=note):
            raise ValidationError("Leave request has already been processed", code="LEAVE_NOT_PENDING")
        logger.info("Leave request %s %s by user %s", req.leave_id, status.value, decided_by)
        return self.get(req.leave_id)

    def cancel(self, leave_id: int, *, user: User) -> LeaveRequest:
        req = self.get(leave_id)
        if not user.is_hr and user.employee_id != req.employee_id:
            raise AuthorizationError("You can only cancel your own leave requests")
        if req.status != LeaveStatus.PENDING:
            raise ValidationError("Only pending leave requests can be cancelled", code="LEAVE_NOT_PENDING")

        self._leaves.decide(leave_id=req.leave_id, status=LeaveStatus.CANCELLED, decided_by=user.user_id)
        return self.get(req.leave_id)

    def delete(self, leave_id: int) -> None:
        if not self._leaves.delete_by_id(int(leave_id)):
            raise NotFoundError("Leave request not found", code="LEAVE_NOT_FOUND")

    def stats(self) -> dict:
        counts = self._leaves.count_by_status()
        by_status = {s.value: int(counts.get(s.value, 0)) for s in LeaveStatus}
        total = sum(by_status.values())
        approved = by_status[LeaveStatus.APPROVED.value]
        return {
            "total": total,
            "pending": by_status[LeaveStatus.PENDING.value],
            "approved": approved,
            "rejected": by_status[LeaveStatus.REJECTED.value],
            "cancelled": by_status[LeaveStatus.CANCELLED.value],
            "approval_rate": round(approved / total * 100, 2) if total else 0,
        }
