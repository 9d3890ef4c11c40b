from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import hours_between, now_local
from ..common.pagination import Page
from ..common.validators import parse_date, parse_month_key, parse_time, require_positive_int
from ..core.enums import AttendanceStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import AttendanceFields, AttendanceRecord
from .policy import WorkdayPolicy
from .repository import AttendanceRepository


def _parse_status(value: Any) -> AttendanceStatus:
    try:
        return AttendanceStatus.parse(str(value or ""))
    except ValueError:
        allowed = ", ".join(s.value for s in AttendanceStatus)
        raise ValidationError(f"status must be one of: {allowed}")


def _notes(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value).strip() or None


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        *,
        policy: Optional[WorkdayPolicy] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._policy = policy or WorkdayPolicy()

    def _require_employee(self, employee_id: int) -> None:
        if not self._employees.get_by_id(int(employee_id)):
            raise NotFoundError("Employee not found", code="EMPLOYEE_NOT_FOUND")

    @staticmethod
    def _hours(in_time, out_time):
        if in_time and out_time and out_time < in_time:
            raise ValidationError("out_time cannot be earlier than in_time")
        return hours_between(in_time, out_time)

    def get(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotFoundError("Attendance record not found", code="ATTENDANCE_NOT_FOUND")
        return record

    def list(
        self,
        *,
        page: Page,
        employee_id: Optional[int] = None,
        work_date: Optional[str] = None,
        month: Optional[str] = None,
    ):
        return self._attendance.list_page(
            offset=page.offset,
            limit=page.limit,
            employee_id=employee_id,
            work_date=parse_date(work_date, "date") if work_date else None,
            month=parse_month_key(month) if month else None,
        )

    def records_for_month(self, employee_id: int, month: str) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_month(int(employee_id), month)

    def mark(self, data: Mapping[str, Any]) -> AttendanceRecord:
        """HR or self entry of a full attendance row. One row per employee per date."""

        employee_id = require_positive_int(data.get("employee_id"), "employee_id")
        work_date = parse_date(data.get("date"), "date")
        in_time = parse_time(data.get("in_time"), "in_time")
        out_time = parse_time(data.get("out_time"), "out_time")
        status = _parse_status(data.get("status"))
        hours = self._hours(in_time, out_time)

        self._require_employee(employee_id)
        if self._attendance.get_for_employee_and_date(employee_id, work_date):
            raise ConflictError("Attendance already marked for this date", code="ATTENDANCE_EXISTS")

        attendance_id = self._attendance.create(
            AttendanceFields(
                employee_id=employee_id,
                work_date=work_date,
                in_time=in_time,
                out_time=out_time,
                hours_worked=hours,
                status=status,
                notes=_notes(data.get("notes")),
            )
        )
        return self.get(attendance_id)

    def update(self, attendance_id: int, data: Mapping[str, Any]) -> AttendanceRecord:
        current = self.get(attendance_id)

        in_time = parse_time(data["in_time"], "in_time") if "in_time" in data else current.in_time
        out_time = parse_time(data["out_time"], "out_time") if "out_time" in data else current.out_time
        status = _parse_status(data["status"]) if "status" in data else current.status
        notes = _notes(data["notes"]) if "notes" in data else current.notes

        self._attendance.update(
            current.attendance_id,
            AttendanceFields(
                employee_id=current.employee_id,
                work_date=current.work_date,
                in_time=in_time,
                out_time=out_time,
                hours_worked=self._hours(in_time, out_time),
                status=status,
                notes=notes,
            ),
        )
        return self.get(current.attendance_id)

    def delete(self, attendance_id: int) -> None:
        if not self._attendance.delete_by_id(int(attendance_id)):
            raise NotFoundError("Attendance record not found", code="ATTENDANCE_NOT_FOUND")

    def check_in(self, employee_id: int, *, now: Optional[datetime] = None, notes: Optional[str] = None) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()

        self._require_employee(employee_id)
        if self._attendance.get_for_employee_and_date(employee_id, today):
            raise ConflictError("You have already checked in today", code="ATTENDANCE_EXISTS")

        decision = self._policy.decide_checkin(now)
        attendance_id = self._attendance.create(
            AttendanceFields(
                employee_id=int(employee_id),
                work_date=today,
                in_time=now.time().replace(microsecond=0),
                out_time=None,
                hours_worked=None,
                status=decision.status,
                notes=_notes(notes) or decision.note,
            )
        )
        return self.get(attendance_id)

    def check_out(self, employee_id: int, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()

        record = self._attendance.get_for_employee_and_date(employee_id, today)
        if not record or record.in_time is None:
            raise ValidationError("You have not checked in today", code="NOT_CHECKED_IN")
        if record.out_time is not None:
            raise ConflictError("You have already checked out today", code="ALREADY_CHECKED_OUT")

        out_time = now.time().replace(microsecond=0)
        decision = self._policy.decide_checkout(now, record.status)
        self._attendance.update(
            record.attendance_id,
            AttendanceFields(
                employee_id=record.employee_id,
                work_date=record.work_date,
                in_time=record.in_time,
                out_time=out_time,
                hours_worked=self._hours(record.in_time, out_time),
                status=decision.status,
                notes=decision.note or record.notes,
            ),
        )
        return self.get(record.attendance_id)

    def today_status(self, employee_id: int, *, today: Optional[date] = None) -> dict:
        record = self._attendance.get_for_employee_and_date(employee_id, today or date.today())
        return {
            "checked_in": bool(record and record.in_time),
            "checked_out": bool(record and record.out_time),
            "record": record.to_dict() if record else None,
        }

    def stats(self, *, start: Optional[str] = None, end: Optional[str] = None) -> dict:
        start_d = parse_date(start, "startDate") if start else None
        end_d = parse_date(end, "endDate") if end else None
        counts = self._attendance.count_by_status(start=start_d, end=end_d)

        by_status = {s.value: int(counts.get(s.value, 0)) for s in AttendanceStatus}
        total = sum(by_status.values())
        rate = round(by_status[AttendanceStatus.PRESENT.value] / total * 100, 2) if total else 0
        return {"total_records": total, "by_status": by_status, "attendance_rate": rate}
