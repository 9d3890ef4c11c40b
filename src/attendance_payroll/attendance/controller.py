from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.guards import current_user, ensure_self_or_hr, hr_required, login_required, own_employee_id
from ..common.http import json_body
from ..common.pagination import paginated, parse_page
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _employee_filter():
        """HR may filter by any employee; everyone else only sees their own rows."""

        if current_user().is_hr:
            raw = request.args.get("employee_id")
            return int(raw) if raw and raw.isdigit() else None
        return own_employee_id()

    @app.route("/attendance", methods=["GET"], endpoint="attendance_list")
    @login_required
    def attendance_list():
        page = parse_page(request.args)
        items, total = container.attendance_service.list(
            page=page,
            employee_id=_employee_filter(),
            work_date=request.args.get("date"),
            month=request.args.get("month"),
        )
        return jsonify(paginated(items, page, total))

    @app.route("/attendance/employee/<int:employee_id>", methods=["GET"], endpoint="attendance_for_employee")
    @login_required
    def attendance_for_employee(employee_id: int):
        ensure_self_or_hr(employee_id)
        page = parse_page(request.args)
        items, total = container.attendance_service.list(
            page=page,
            employee_id=employee_id,
            month=request.args.get("month"),
        )
        return jsonify(paginated(items, page, total))

    @app.route("/attendance/<int:attendance_id>", methods=["GET"], endpoint="attendance_get")
    @login_required
    def attendance_get(attendance_id: int):
        record = container.attendance_service.get(attendance_id)
        ensure_self_or_hr(record.employee_id)
        return jsonify(record.to_dict())

    @app.route("/attendance", methods=["POST"], endpoint="attendance_mark")
    @login_required
    def attendance_mark():
        data = json_body()
        if not current_user().is_hr:
            data["employee_id"] = own_employee_id()
        record = container.attendance_service.mark(data)
        return jsonify(record.to_dict()), 201

    @app.route("/attendance/<int:attendance_id>", methods=["PUT"], endpoint="attendance_update")
    @hr_required
    def attendance_update(attendance_id: int):
        record = container.attendance_service.update(attendance_id, json_body())
        return jsonify(record.to_dict())

    @app.route("/attendance/<int:attendance_id>", methods=["DELETE"], endpoint="attendance_delete")
    @hr_required
    def attendance_delete(attendance_id: int):
        container.attendance_service.delete(attendance_id)
        return jsonify({"success": True, "message": "Attendance record deleted successfully"})

    @app.route("/attendance/self/check-in", methods=["POST"], endpoint="attendance_self_check_in")
    @login_required
    def attendance_self_check_in():
        record = container.attendance_service.check_in(own_employee_id(), notes=json_body().get("notes"))
        return jsonify(record.to_dict()), 201

    @app.route("/attendance/self/check-out", methods=["POST"], endpoint="attendance_self_check_out")
    @login_required
    def attendance_self_check_out():
        record = container.attendance_service.check_out(own_employee_id())
        return jsonify(record.to_dict())

    @app.route("/attendance/self/status", methods=["GET"], endpoint="attendance_self_status")
    @login_required
    def attendance_self_status():
        return jsonify(container.attendance_service.today_status(own_employee_id()))

    @app.route("/attendance/stats/overview", methods=["GET"], endpoint="attendance_stats")
    @hr_required
    def attendance_stats():
        return jsonify(
            container.attendance_service.stats(
                start=request.args.get("startDate"),
                end=request.args.get("endDate"),
            )
        )
