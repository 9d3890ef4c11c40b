from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.guards import ensure_self_or_hr, hr_required, login_required
from ..common.http import json_body
from ..common.pagination import paginated, parse_page
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/employees", methods=["GET"], endpoint="employees_list")
    @hr_required
    def employees_list():
        page = parse_page(request.args)
        items, total = container.employee_service.list(
            page=page,
            search=request.args.get("search"),
            department=request.args.get("department"),
            status=request.args.get("status"),
        )
        return jsonify(paginated(items, page, total))

    @app.route("/employees/stats/overview", methods=["GET"], endpoint="employees_stats")
    @hr_required
    def employees_stats():
        return jsonify(container.employee_service.stats())

    @app.route("/employees/<int:employee_id>", methods=["GET"], endpoint="employees_get")
    @login_required
    def employees_get(employee_id: int):
        ensure_self_or_hr(employee_id)
        return jsonify(container.employee_service.get(employee_id).to_dict())

    @app.route("/employees", methods=["POST"], endpoint="employees_create")
    @hr_required
    def employees_create():
        employee = container.employee_service.create(json_body())
        return jsonify(employee.to_dict()), 201

    @app.route("/employees/<int:employee_id>", methods=["PUT"], endpoint="employees_update")
    @hr_required
    def employees_update(employee_id: int):
        employee = container.employee_service.update(employee_id, json_body())
        return jsonify(employee.to_dict())

    @app.route("/employees/<int:employee_id>", methods=["DELETE"], endpoint="employees_delete")
    @hr_required
    def employees_delete(employee_id: int):
        container.employee_service.delete(employee_id)
        return jsonify({"success": True, "message": "Employee deleted successfully"})
