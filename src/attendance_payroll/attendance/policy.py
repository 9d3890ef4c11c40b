from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Optional

from ..core.constants import DEFAULT_LATE_GRACE_MINUTES
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: Optional[str] = None


@dataclass(frozen=True)
class WorkdayPolicy:
    """Decide the attendance status for self-service check-in/check-out.

    Rules:
    - check-in at or after ``half_day_cutoff`` -> half-day
    - check-in later than ``start + grace`` -> late
    - otherwise present
    - a ``present`` day checked out before ``end - early_leave_minutes`` -> early-leave
    """

    start: time = time(9, 0)
    end: time = time(17, 0)
    grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES
    half_day_cutoff: time = time(12, 0)
    early_leave_minutes: int = 30

    def decide_checkin(self, now: datetime) -> StatusDecision:
        if now.time() >= self.half_day_cutoff:
            return StatusDecision(AttendanceStatus.HALF_DAY, note=f"Checked in at {now:%H:%M}")

        start = datetime.combine(now.date(), self.start)
        if now <= start + timedelta(minutes=self.grace_minutes):
            return StatusDecision(AttendanceStatus.PRESENT)

        late_minutes = int((now - start).total_seconds() // 60)
        return StatusDecision(AttendanceStatus.LATE, note=f"Late {late_minutes} min")

    def decide_checkout(self, now: datetime, current: AttendanceStatus) -> StatusDecision:
        end = datetime.combine(now.date(), self.end)
        if current == AttendanceStatus.PRESENT and now < end - timedelta(minutes=self.early_leave_minutes):
            return StatusDecision(AttendanceStatus.EARLY_LEAVE, note=f"Left at {now:%H:%M}")
        return StatusDecision(current)
