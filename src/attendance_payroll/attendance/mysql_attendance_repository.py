from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.enums import AttendanceStatus
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetch_count, fetchall, fetchone, normalize_mysql_time, to_decimal
from .model import AttendanceFields, AttendanceRecord
from .repository import AttendanceRepository

_SELECT = """
    SELECT a.attendance_id, a.employee_id, a.work_date, a.in_time, a.out_time,
           a.hours_worked, a.status, a.notes, e.full_name AS employee_name
    FROM attendance_records a
    JOIN employees e ON e.employee_id = a.employee_id
"""


def _row_to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        in_time=normalize_mysql_time(r.get("in_time")),
        out_time=normalize_mysql_time(r.get("out_time")),
        hours_worked=to_decimal(r.get("hours_worked")),
        status=AttendanceStatus.parse(r["status"]),
        notes=r.get("notes"),
        employee_name=r.get("employee_name"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE a.attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE a.employee_id=%s AND a.work_date=%s", (int(employee_id), work_date))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def list_page(
        self,
        *,
        offset: int,
        limit: int,
        employee_id: Optional[int] = None,
        work_date: Optional[date] = None,
        month: Optional[str] = None,
    ) -> tuple[Sequence[AttendanceRecord], int]:
        clauses = ["1=1"]
        params: list[object] = []

        if employee_id is not None:
            clauses.append("a.employee_id=%s")
            params.append(int(employee_id))
        if work_date is not None:
            clauses.append("a.work_date=%s")
            params.append(work_date)
        if month:
            clauses.append("CAST(a.work_date AS CHAR) LIKE %s")
            params.append(f"{month}%")

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT COUNT(*) AS total FROM attendance_records a WHERE {where}",
                tuple(params),
            )
            total = fetch_count(cur)
            cur.execute(
                f"{_SELECT} WHERE {where} ORDER BY a.work_date DESC, a.employee_id LIMIT %s OFFSET %s",
                tuple(params) + (int(limit), int(offset)),
            )
            return [_row_to_record(r) for r in fetchall(cur)], total

    def list_for_month(self, employee_id: int, month: str) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE a.employee_id=%s AND CAST(a.work_date AS CHAR) LIKE %s ORDER BY a.work_date",
                (int(employee_id), f"{month}%"),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def create(self, fields: AttendanceFields) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(employee_id, work_date, in_time, out_time, hours_worked, status, notes)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(fields.employee_id),
                        fields.work_date,
                        fields.in_time,
                        fields.out_time,
                        fields.hours_worked,
                        fields.status.value,
                        fields.notes,
                    ),
                )
                return int(cur.lastrowid)
        except mysql.connector.IntegrityError as e:
            if e.errno == errorcode.ER_DUP_ENTRY:
                raise ConflictError("Attendance already marked for this date", code="ATTENDANCE_EXISTS")
            raise

    def update(self, attendance_id: int, fields: AttendanceFields) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET in_time=%s, out_time=%s, hours_worked=%s, status=%s, notes=%s
                WHERE attendance_id=%s
                """,
                (
                    fields.in_time,
                    fields.out_time,
                    fields.hours_worked,
                    fields.status.value,
                    fields.notes,
                    int(attendance_id),
                ),
            )
            return cur.rowcount > 0

    def delete_by_id(self, attendance_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            return cur.rowcount > 0

    def count_by_status(self, *, start: Optional[date] = None, end: Optional[date] = None) -> dict[str, int]:
        clauses = ["1=1"]
        params: list[object] = []
        if start is not None:
            clauses.append("work_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("work_date <= %s")
            params.append(end)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT status, COUNT(*) AS n FROM attendance_records WHERE {' AND '.join(clauses)} GROUP BY status",
                tuple(params),
            )
            return {r["status"]: int(r["n"]) for r in fetchall(cur)}
