from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetch_count, fetchall, fetchone
from .model import LeaveRequest
from .repository import LeaveRepository

_SELECT = """
    SELECT l.leave_id, l.employee_id, l.leave_type, l.start_date, l.end_date, l.days,
           l.reason, l.status, l.comments, l.decided_by, l.decided_at, l.created_at,
           e.full_name AS employee_name
    FROM leave_requests l
    JOIN employees e ON e.employee_id = l.employee_id
"""


def _row_to_leave(r: dict) -> LeaveRequest:
    return LeaveRequest(
        leave_id=int(r["leave_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        days=int(r["days"]),
        reason=r["reason"],
        status=LeaveStatus(r["status"]),
        created_at=r.get("created_at"),
        comments=r.get("comments"),
        decided_by=r.get("decided_by"),
        decided_at=r.get("decided_at"),
        employee_name=r.get("employee_name"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        days: int,
        reason: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(employee_id, leave_type, start_date, end_date, days, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    leave_type.value,
                    start_date,
                    end_date,
                    int(days),
                    reason,
                    LeaveStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get(self, leave_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE l.leave_id=%s", (int(leave_id),))
            r = fetchone(cur)
            return _row_to_leave(r) if r else None

    def find_overlapping(self, *, employee_id: int, start_date: date, end_date: date) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                {_SELECT}
                WHERE l.employee_id=%s
                  AND l.status IN (%s, %s)
                  AND l.start_date <= %s
                  AND l.end_date >= %s
                ORDER BY l.start_date
                LIMIT 1
                """,
                (
                    int(employee_id),
                    LeaveStatus.PENDING.value,
                    LeaveStatus.APPROVED.value,
                    end_date,
                    start_date,
                ),
            )
            r = fetchone(cur)
            return _row_to_leave(r) if r else None

    def list_page(
        self,
        *,
        offset: int,
        limit: int,
        employee_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        leave_type: Optional[LeaveType] = None,
    ) -> tuple[Sequence[LeaveRequest], int]:
        clauses = ["1=1"]
        params: list[object] = []

        if employee_id is not None:
            clauses.append("l.employee_id=%s")
            params.append(int(employee_id))
        if status is not None:
            clauses.append("l.status=%s")
            params.append(status.value)
        if leave_type is not None:
            clauses.append("l.leave_type=%s")
            params.append(leave_type.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM leave_requests l WHERE {where}", tuple(params))
            total = fetch_count(cur)
            cur.execute(
                f"{_SELECT} WHERE {where} ORDER BY l.created_at DESC, l.leave_id DESC LIMIT %s OFFSET %s",
                tuple(params) + (int(limit), int(offset)),
            )
            return [_row_to_leave(r) for r in fetchall(cur)], total

    def decide(
        self,
        *,
        leave_id: int,
        status: LeaveStatus,
        decided_by: Optional[int],
        comments: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, decided_by=%s, decided_at=NOW(), comments=%s
                WHERE leave_id=%s AND status=%s
                """,
                (status.value, decided_by, comments, int(leave_id), LeaveStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def delete_by_id(self, leave_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leave_requests WHERE leave_id=%s", (int(leave_id),))
            return cur.rowcount > 0

    def count_by_status(self) -> dict[str, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT status, COUNT(*) AS n FROM leave_requests GROUP BY status")
            return {r["status"]: int(r["n"]) for r in fetchall(cur)}
