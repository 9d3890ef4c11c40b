from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal

from attendance_payroll.attendance.model import AttendanceFields
from attendance_payroll.common.datetime_utils import today_utc
from attendance_payroll.core.enums import AttendanceStatus


def _seed_february(attendance, employee_id=1):
    for i in range(20):
        attendance.create(
            AttendanceFields(
                employee_id=employee_id,
                work_date=date(2024, 2, 1) + timedelta(days=i),
                in_time=None,
                out_time=None,
                hours_worked=Decimal("8"),
                status=AttendanceStatus.PRESENT,
            )
        )


def test_health(client):
    assert client.get("/health").get_json() == {"status": "ok"}


def test_login_and_me(client):
    res = client.post("/auth/login", json={"email": "hr@example.com", "password": "secret123"})
    assert res.status_code == 200
    token = res.get_json()["token"]

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.get_json()["role"] == "hr"


def test_bad_login_is_401_json(client):
    res = client.post("/auth/login", json={"email": "hr@example.com", "password": "wrong"})
    assert res.status_code == 401
    assert res.get_json() == {"success": False, "message": "Invalid credentials", "code": "INVALID_CREDENTIALS"}


def test_routes_require_token(client):
    res = client.get("/salary")
    assert res.status_code == 401
    assert res.get_json()["code"] == "MISSING_TOKEN"


def test_employee_cannot_run_payroll(client, auth_header):
    res = client.post("/salary/generate-payroll", json={"month": "2", "year": "2024"}, headers=auth_header("e1@example.com"))
    assert res.status_code == 403


def test_calculate_then_mark_paid(client, auth_header, attendance):
    _seed_february(attendance)
    hr = auth_header("hr@example.com")

    res = client.post("/salary/calculate/1", json={"month": "2", "year": "2024"}, headers=hr)
    assert res.status_code == 200
    body = res.get_json()
    assert body["salary"]["month"] == "2024-02"
    assert body["attendance_summary"]["present_days"] == 20
    salary_id = body["salary"]["id"]

    paid = client.post(f"/salary/{salary_id}/mark-paid", json={}, headers=hr).get_json()
    assert paid["paid_status"] == "paid"
    assert paid["paid_date"] == today_utc().strftime("%Y-%m-%d")

    again = client.post(f"/salary/{salary_id}/pay", json={"paid_date": "2024-03-10"}, headers=hr).get_json()
    assert again["paid_date"] == "2024-03-10"


def test_calculate_validation_and_not_found(client, auth_header):
    hr = auth_header("hr@example.com")

    res = client.post("/salary/calculate/1", json={"year": "2024"}, headers=hr)
    assert res.status_code == 400
    assert res.get_json()["message"] == "Month and year are required"

    res = client.post("/salary/calculate/99", json={"month": "2", "year": "2024"}, headers=hr)
    assert res.status_code == 404


def test_generate_payroll_reports_per_employee(client, auth_header, attendance):
    _seed_february(attendance, 1)
    attendance.failing_employees.add(2)

    res = client.post("/salary/generate-payroll", json={"month": 2, "year": 2024}, headers=auth_header("admin@example.com"))

    assert res.status_code == 200
    results = res.get_json()["results"]
    assert "salary" in results[0]
    assert results[1]["error"] == "attendance query failed"


def test_employee_sees_only_own_salary(client, auth_header, container):
    container.payroll_service.calculate_for_employee(1, 2, 2024)
    container.payroll_service.calculate_for_employee(2, 2, 2024)
    me = auth_header("e1@example.com")

    listing = client.get("/salary", headers=me).get_json()
    assert [row["employee_id"] for row in listing["data"]] == [1]
    assert listing["pagination"]["total"] == 1

    assert client.get("/salary/employee/2", headers=me).status_code == 403


def test_duplicate_attendance_is_400(client, auth_header):
    hr = auth_header("hr@example.com")
    payload = {"employee_id": 1, "date": "2024-02-05", "status": "present", "in_time": "09:00", "out_time": "17:00"}

    assert client.post("/attendance", json=payload, headers=hr).status_code == 201
    res = client.post("/attendance", json=payload, headers=hr)
    assert res.status_code == 400
    assert res.get_json()["code"] == "ATTENDANCE_EXISTS"


def test_leave_round_trip(client, auth_header):
    me = auth_header("e1@example.com")
    hr = auth_header("hr@example.com")

    res = client.post(
        "/leave",
        json={"leave_type": "sick", "start_date": "2024-03-04", "end_date": "2024-03-05", "reason": "Flu"},
        headers=me,
    )
    assert res.status_code == 201
    leave_id = res.get_json()["id"]
    assert res.get_json()["employee_id"] == 1

    assert client.put(f"/leave/{leave_id}/status", json={"status": "approved"}, headers=me).status_code == 403
    decided = client.put(f"/leave/{leave_id}/status", json={"status": "approved"}, headers=hr).get_json()
    assert decided["status"] == "approved"


def test_export_csv(client, auth_header, attendance):
    _seed_february(attendance)
    hr = auth_header("hr@example.com")
    client.post("/salary/calculate/1", json={"month": "2", "year": "2024"}, headers=hr)

    res = client.get("/salary/export.csv?month=2&year=2024", headers=hr)

    assert res.status_code == 200
    assert res.mimetype == "text/csv"
    lines = res.data.decode("utf-8-sig").splitlines()
    assert lines[0].startswith("employee_id,employee_name,month")
    assert len(lines) == 2


def test_unknown_route_is_json_404(client):
    res = client.get("/nope")
    assert res.status_code == 404
    assert res.get_json()["success"] is False


def test_unexpected_error_is_generic_500(client, auth_header, attendance):
    attendance.failing_employees.add(1)

    res = client.post("/salary/calculate/1", json={"month": "2", "year": "2024"}, headers=auth_header("hr@example.com"))

    assert res.status_code == 500
    assert res.get_json() == {"success": False, "message": "Internal server error", "code": "INTERNAL_ERROR"}
