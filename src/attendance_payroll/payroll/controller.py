from __future__ import annotations

import csv
import io

from flask import Flask, jsonify, request

from ..auth.guards import current_user, ensure_self_or_hr, hr_required, login_required, own_employee_id
from ..common.http import json_body
from ..common.pagination import paginated, parse_page
from ..container import Container
from .service import EXPORT_FIELDS


def register(app: Flask, container: Container) -> None:
    def _write_export_csv(*, rows, filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=EXPORT_FIELDS)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/salary", methods=["GET"], endpoint="salary_list")
    @login_required
    def salary_list():
        page = parse_page(request.args)
        if current_user().is_hr:
            raw = request.args.get("employee_id")
            employee_id = int(raw) if raw and raw.isdigit() else None
        else:
            employee_id = own_employee_id()
        items, total = container.payroll_service.list(
            page=page,
            employee_id=employee_id,
            month=request.args.get("month"),
            year=request.args.get("year"),
        )
        return jsonify(paginated(items, page, total))

    @app.route("/salary/employee/<int:employee_id>", methods=["GET"], endpoint="salary_for_employee")
    @login_required
    def salary_for_employee(employee_id: int):
        ensure_self_or_hr(employee_id)
        page = parse_page(request.args)
        items, total = container.payroll_service.list_for_employee(
            employee_id,
            page=page,
            month=request.args.get("month"),
            year=request.args.get("year"),
        )
        return jsonify(paginated(items, page, total))

    @app.route("/salary/stats/overview", methods=["GET"], endpoint="salary_stats")
    @hr_required
    def salary_stats():
        return jsonify(
            container.payroll_service.stats(month=request.args.get("month"), year=request.args.get("year"))
        )

    @app.route("/salary/export.csv", methods=["GET"], endpoint="salary_export")
    @hr_required
    def salary_export():
        export = container.payroll_service.build_export(request.args.get("month"), request.args.get("year"))
        return _write_export_csv(rows=export.rows, filename=f"payroll_{export.month}.csv")

    @app.route("/salary/<int:salary_id>", methods=["GET"], endpoint="salary_get")
    @login_required
    def salary_get(salary_id: int):
        salary = container.payroll_service.get(salary_id)
        ensure_self_or_hr(salary.employee_id)
        return jsonify(salary.to_dict())

    @app.route("/salary/calculate/<int:employee_id>", methods=["POST"], endpoint="salary_calculate")
    @hr_required
    def salary_calculate(employee_id: int):
        data = json_body()
        return jsonify(container.payroll_service.calculate_for_employee(employee_id, data.get("month"), data.get("year")))

    @app.route("/salary/generate-payroll", methods=["POST"], endpoint="salary_generate_payroll")
    @hr_required
    def salary_generate_payroll():
        data = json_body()
        return jsonify(container.payroll_service.generate_payroll(data.get("month"), data.get("year")))

    @app.route("/salary/<int:salary_id>", methods=["PUT"], endpoint="salary_update")
    @hr_required
    def salary_update(salary_id: int):
        salary = container.payroll_service.update(salary_id, json_body())
        return jsonify(salary.to_dict())

    @app.route("/salary/<int:salary_id>/pay", methods=["POST"], endpoint="salary_pay")
    @app.route("/salary/<int:salary_id>/mark-paid", methods=["POST"], endpoint="salary_mark_paid")
    @hr_required
    def salary_pay(salary_id: int):
        salary = container.payroll_service.mark_paid(salary_id, json_body().get("paid_date"))
        return jsonify(salary.to_dict())

    @app.route("/salary/<int:salary_id>", methods=["DELETE"], endpoint="salary_delete")
    @hr_required
    def salary_delete(salary_id: int):
        container.payroll_service.delete(salary_id)
        return jsonify({"success": True, "message": "Salary record deleted successfully"})
