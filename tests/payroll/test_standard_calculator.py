from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

import pytest

from attendance_payroll.attendance.model import AttendanceRecord
from attendance_payroll.common.datetime_utils import days_in_month
from attendance_payroll.core.enums import AttendanceStatus, SalaryType
from attendance_payroll.payroll.calculator.standard_calculator import (
    StandardPayrollCalculator,
    calculate_salary,
    summarize,
)


def _rows(*pairs, start=date(2024, 2, 1)):
    """Build attendance rows from (status, hours) pairs on consecutive days."""

    out = []
    for i, (status, hours) in enumerate(pairs):
        out.append(
            AttendanceRecord(
                attendance_id=i + 1,
                employee_id=1,
                work_date=start + timedelta(days=i),
                in_time=None,
                out_time=None,
                hours_worked=None if hours is None else Decimal(str(hours)),
                status=status,
            )
        )
    return out


@pytest.mark.parametrize(
    "year, month, expected",
    [(2024, 2, 29), (2023, 2, 28), (2024, 1, 31), (2024, 4, 30), (1900, 2, 28), (2000, 2, 29)],
)
def test_days_in_month_handles_leap_years(year, month, expected):
    assert days_in_month(year, month) == expected


def test_leap_february_uses_29_days():
    result = calculate_salary(Decimal("2900"), SalaryType.MONTHLY, _rows((AttendanceStatus.PRESENT, 8)), "2024-02")
    assert result.attendance_summary.total_days == 29
    assert result.basic_salary == Decimal("100.00")


def test_end_to_end_monthly_february_2024():
    rows = _rows(
        *([(AttendanceStatus.PRESENT, 8)] * 20),
        (AttendanceStatus.HALF_DAY, 4),
        (AttendanceStatus.HALF_DAY, 4),
        (AttendanceStatus.ABSENT, None),
    )

    result = calculate_salary(Decimal("3000"), SalaryType.MONTHLY, rows, "2024-02")

    assert result.attendance_summary.working_days == Decimal("21")
    assert result.basic_salary == Decimal("2172.41")
    assert result.deductions == Decimal("10.34")
    assert result.overtime_hours == Decimal("0.00")
    assert result.overtime_pay == Decimal("0.00")
    assert result.bonus == Decimal("0.00")
    assert result.net_salary == Decimal("2162.07")

    summary = result.attendance_summary
    assert (summary.present_days, summary.half_days, summary.absent_days, summary.leave_days) == (20, 2, 1, 0)


def test_overtime_counts_only_hours_past_eight():
    rows = _rows(
        (AttendanceStatus.PRESENT, 10),
        (AttendanceStatus.PRESENT, 8),
        (AttendanceStatus.PRESENT, 7.5),
        (AttendanceStatus.PRESENT, None),
        (AttendanceStatus.PRESENT, -3),
    )

    result = calculate_salary(Decimal("3100"), SalaryType.MONTHLY, rows, "2024-03")

    assert result.overtime_hours == Decimal("2.00")
    # 2h * 3100 / (31 * 8) * 1.5
    assert result.overtime_pay == Decimal("37.50")


def test_monthly_basic_is_pro_rata_over_present_and_half_days():
    rows = _rows(
        (AttendanceStatus.PRESENT, 8),
        (AttendanceStatus.PRESENT, 8),
        (AttendanceStatus.HALF_DAY, 4),
        (AttendanceStatus.LEAVE, None),
        (AttendanceStatus.LATE, 8),
        (AttendanceStatus.EARLY_LEAVE, 6),
    )

    result = calculate_salary(Decimal("3000"), SalaryType.MONTHLY, rows, "2024-04")

    # (3000 / 30) * 2.5; leave, late and early-leave rows add nothing
    assert result.basic_salary == Decimal("250.00")
    assert result.attendance_summary.leave_days == 1
    assert result.deductions == Decimal("0.00")


def test_deduction_is_ten_percent_of_day_rate_per_absence():
    rows = _rows(*([(AttendanceStatus.ABSENT, None)] * 3))
    result = calculate_salary(Decimal("3000"), SalaryType.MONTHLY, rows, "2024-04")

    assert result.deductions == Decimal("30.00")
    assert result.basic_salary == Decimal("0.00")
    assert result.net_salary == Decimal("-30.00")


def test_hourly_pays_overtime_hours_twice():
    rows = _rows((AttendanceStatus.PRESENT, 10), (AttendanceStatus.PRESENT, 6))

    result = calculate_salary(Decimal("20"), SalaryType.HOURLY, rows, "2024-05")

    assert result.basic_salary == Decimal("320.00")
    assert result.overtime_hours == Decimal("2.00")
    assert result.overtime_pay == Decimal("60.00")
    assert result.net_salary == Decimal("380.00")


def test_unknown_salary_type_gives_zero_basic():
    rows = _rows((AttendanceStatus.PRESENT, 9))

    result = calculate_salary(Decimal("3100"), "weekly", rows, "2024-03")

    assert result.basic_salary == Decimal("0.00")
    # rate falls back to the monthly derivation
    assert result.overtime_pay == Decimal("18.75")


def test_empty_attendance_yields_zeroes():
    result = calculate_salary(Decimal("5000"), SalaryType.MONTHLY, [], "2023-02")

    assert result.net_salary == Decimal("0.00")
    assert result.attendance_summary.total_days == 28
    assert result.attendance_summary.working_days == Decimal("0")


def test_string_statuses_accept_legacy_spellings():
    rows = [
        {"status": "present", "hours_worked": "8"},
        {"status": "halfday", "hours_worked": "4"},
        {"status": "HALF_DAY", "hours_worked": "4"},
        {"status": "unknown", "hours_worked": None},
    ]

    summary = summarize(rows, total_days=len(rows))

    assert summary.present_days == 1
    assert summary.half_days == 2
    assert summary.total_days == 4


def test_rounding_is_half_up():
    # 1.5 / 30 * 0.1 = 0.005 exactly
    rows = _rows((AttendanceStatus.ABSENT, None))
    result = StandardPayrollCalculator().calculate(
        base_salary=Decimal("1.5"),
        salary_type=SalaryType.MONTHLY,
        records=rows,
        month_year="2024-04",
    )
    assert result.deductions == Decimal("0.01")


def test_breakdown_to_dict_has_floats():
    rows = _rows((AttendanceStatus.PRESENT, 8))
    data = calculate_salary(Decimal("2900"), SalaryType.MONTHLY, rows, "2024-02").to_dict()

    assert data["basic_salary"] == 100.0
    assert data["attendance_summary"]["working_days"] == 1.0
    assert set(data) == {
        "basic_salary",
        "bonus",
        "deductions",
        "overtime_hours",
        "overtime_pay",
        "net_salary",
        "attendance_summary",
    }
