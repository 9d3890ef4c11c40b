from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Optional, Type, TypeVar

from ..core.exceptions import ValidationError

E = TypeVar("E", bound=Enum)


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_positive_int(value: Any, field_name: str) -> int:
    try:
        out = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if out <= 0:
        raise ValidationError(f"{field_name} must be positive")
    return out


def parse_decimal(value: Any, field_name: str, *, minimum: Optional[Decimal] = None) -> Decimal:
    try:
        out = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not out.is_finite():
        raise ValidationError(f"{field_name} must be a number")
    if minimum is not None and out < minimum:
        raise ValidationError(f"{field_name} must be >= {minimum}")
    return out


def parse_date(value: Any, field_name: str) -> date:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    v = (str(value) if value is not None else "").strip()
    try:
        return datetime.strptime(v[:10], "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"{field_name} must be a date (YYYY-MM-DD)")


def parse_time(value: Any, field_name: str) -> Optional[time]:
    """Parse HH:MM or HH:MM:SS. Empty values give None."""

    v = (str(value) if value is not None else "").strip()
    if not v:
        return None
    for fmt in ("%H:%M:%S", "%H:%M"):
        try:
            return datetime.strptime(v, fmt).time()
        except ValueError:
            continue
    raise ValidationError(f"{field_name} must be a time (HH:MM)")


def parse_month_year(month: Any, year: Any) -> str:
    """Validate a month/year pair and return the ``YYYY-MM`` key."""

    if month in (None, "") or year in (None, ""):
        raise ValidationError("Month and year are required")
    try:
        m = int(str(month).strip())
        y = int(str(year).strip())
    except ValueError:
        raise ValidationError("Month and year must be integers")
    if not 1 <= m <= 12:
        raise ValidationError("Month must be between 1 and 12")
    if not 1900 <= y <= 9999:
        raise ValidationError("Year is out of range")
    return f"{y:04d}-{m:02d}"


def parse_month_key(value: Any, field_name: str = "month") -> str:
    """Validate a ``YYYY-MM`` string and return it zero-padded (``2024-2`` -> ``2024-02``)."""

    v = (str(value) if value is not None else "").strip()
    try:
        dt = datetime.strptime(v, "%Y-%m")
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM")
    return f"{dt.year:04d}-{dt.month:02d}"


def require_enum(enum_cls: Type[E], value: Any, field_name: str) -> E:
    try:
        return enum_cls(str(value).strip())
    except ValueError:
        allowed = ", ".join(e.value for e in enum_cls)
        raise ValidationError(f"{field_name} must be one of: {allowed}")
