from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Optional


def money(value: Optional[Decimal]) -> Optional[float]:
    return None if value is None else float(value)


def iso(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat(sep=" ", timespec="seconds")
    if isinstance(value, time):
        return value.strftime("%H:%M:%S")
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    return str(value)
