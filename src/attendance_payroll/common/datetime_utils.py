from __future__ import annotations

import calendar
from datetime import date, datetime, time, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_utc() -> date:
    return datetime.now(timezone.utc).date()


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(int(year), int(month))[1]


def hours_between(in_time: Optional[time], out_time: Optional[time]) -> Optional[Decimal]:
    """Hours between two same-day clock times, two decimals; None if either is missing."""

    if in_time is None or out_time is None:
        return None
    anchor = date(2000, 1, 1)
    seconds = (datetime.combine(anchor, out_time) - datetime.combine(anchor, in_time)).total_seconds()
    return (Decimal(int(seconds)) / Decimal(3600)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
