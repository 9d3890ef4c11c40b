from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceFields, AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_page(
        self,
        *,
        offset: int,
        limit: int,
        employee_id: Optional[int] = None,
        work_date: Optional[date] = None,
        month: Optional[str] = None,
    ) -> tuple[Sequence[AttendanceRecord], int]:
        raise NotImplementedError

    def list_for_month(self, employee_id: int, month: str) -> Sequence[AttendanceRecord]:
        """Rows whose stored date starts with ``YYYY-MM``, ordered by date."""

        raise NotImplementedError

    def create(self, fields: AttendanceFields) -> int:
        """Insert a row; raises ConflictError if (employee, date) already exists."""

        raise NotImplementedError

    def update(self, attendance_id: int, fields: AttendanceFields) -> bool:
        raise NotImplementedError

    def delete_by_id(self, attendance_id: int) -> bool:
        raise NotImplementedError

    def count_by_status(self, *, start: Optional[date] = None, end: Optional[date] = None) -> dict[str, int]:
        raise NotImplementedError
