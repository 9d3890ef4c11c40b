from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Mapping, Optional

from ...common.datetime_utils import days_in_month
from ...core.constants import (
    ABSENCE_DEDUCTION_RATE,
    HALF_DAY_WEIGHT,
    OVERTIME_MULTIPLIER,
    STANDARD_WORKDAY_HOURS,
)
from ...core.enums import AttendanceStatus, SalaryType
from ..model import AttendanceSummary, SalaryBreakdown
from .base import PayrollCalculator

_CENT = Decimal("0.01")
_ZERO = Decimal("0")


def _round(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _status(record: Any) -> Optional[AttendanceStatus]:
    raw = _field(record, "status")
    if raw is None or isinstance(raw, AttendanceStatus):
        return raw
    try:
        return AttendanceStatus.parse(str(raw))
    except ValueError:
        return None


def _hours(record: Any) -> Decimal:
    raw = _field(record, "hours_worked")
    if raw in (None, ""):
        return _ZERO
    return Decimal(str(raw))


def summarize(records: Iterable[Any], *, total_days: int) -> AttendanceSummary:
    """Count attendance rows by status. ``total_days`` is passed through as-is."""

    counts = {s: 0 for s in AttendanceStatus}
    for r in records:
        status = _status(r)
        if status is not None:
            counts[status] += 1

    present = counts[AttendanceStatus.PRESENT]
    half = counts[AttendanceStatus.HALF_DAY]
    return AttendanceSummary(
        total_days=int(total_days),
        present_days=present,
        half_days=half,
        absent_days=counts[AttendanceStatus.ABSENT],
        leave_days=counts[AttendanceStatus.LEAVE],
        working_days=Decimal(present) + HALF_DAY_WEIGHT * half,
    )


class StandardPayrollCalculator(PayrollCalculator):
    """Pro-rata monthly pay or hours x rate, plus 1.5x overtime past 8h/day
    and a 10% day-rate deduction per absence.

    Hourly mode pays every worked hour at the base rate, overtime included,
    and then pays overtime hours again at the premium.
    """

    def calculate(
        self,
        *,
        base_salary: Decimal,
        salary_type: Any,
        records: Iterable[Any],
        month_year: str,
    ) -> SalaryBreakdown:
        records = list(records)
        base = Decimal(str(base_salary or 0))
        kind = getattr(salary_type, "value", salary_type) or SalaryType.MONTHLY.value

        year, month = (int(p) for p in month_year.split("-")[:2])
        days = Decimal(days_in_month(year, month))
        summary = summarize(records, total_days=int(days))

        overtime_hours = sum(
            (h - STANDARD_WORKDAY_HOURS for h in map(_hours, records) if h > STANDARD_WORKDAY_HOURS),
            _ZERO,
        )

        daily_rate = base / days
        if kind == SalaryType.MONTHLY.value:
            basic = daily_rate * summary.working_days
        elif kind == SalaryType.HOURLY.value:
            basic = base * sum(map(_hours, records), _ZERO)
        else:
            basic = _ZERO

        hourly_rate = base if kind == SalaryType.HOURLY.value else base / (days * STANDARD_WORKDAY_HOURS)
        overtime_pay = overtime_hours * hourly_rate * OVERTIME_MULTIPLIER
        bonus = _ZERO
        deductions = summary.absent_days * daily_rate * ABSENCE_DEDUCTION_RATE
        net = basic + overtime_pay + bonus - deductions

        return SalaryBreakdown(
            basic_salary=_round(basic),
            bonus=_round(bonus),
            deductions=_round(deductions),
            overtime_hours=_round(overtime_hours),
            overtime_pay=_round(overtime_pay),
            net_salary=_round(net),
            attendance_summary=summary,
        )


_default = StandardPayrollCalculator()


def calculate_salary(
    base_salary: Decimal,
    salary_type: Any,
    attendance_records: Iterable[Any],
    month_year: str,
) -> SalaryBreakdown:
    return _default.calculate(
        base_salary=base_salary,
        salary_type=salary_type,
        records=attendance_records,
        month_year=month_year,
    )
