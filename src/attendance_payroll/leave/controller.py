from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.guards import current_user, ensure_self_or_hr, hr_required, login_required, own_employee_id
from ..common.http import json_body
from ..common.pagination import paginated, parse_page
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/leave", methods=["POST"], endpoint="leave_create")
    @login_required
    def leave_create():
        data = json_body()
        employee_id = data.get("employee_id") if current_user().is_hr else None
        req = container.leave_service.create(employee_id or own_employee_id(), data)
        return jsonify(req.to_dict()), 201

    @app.route("/leave", methods=["GET"], endpoint="leave_list")
    @login_required
    def leave_list():
        page = parse_page(request.args)
        if current_user().is_hr:
            raw = request.args.get("employeeId")
            employee_id = int(raw) if raw and raw.isdigit() else None
        else:
            employee_id = own_employee_id()
        items, total = container.leave_service.list(
            page=page,
            employee_id=employee_id,
            status=request.args.get("status"),
            leave_type=request.args.get("leaveType"),
        )
        return jsonify(paginated(items, page, total))

    @app.route("/leave/employee/<int:employee_id>", methods=["GET"], endpoint="leave_for_employee")
    @login_required
    def leave_for_employee(employee_id: int):
        ensure_self_or_hr(employee_id)
        page = parse_page(request.args)
        items, total = container.leave_service.list(
            page=page,
            employee_id=employee_id,
            status=request.args.get("status"),
        )
        return jsonify(paginated(items, page, total))

    @app.route("/leave/stats/overview", methods=["GET"], endpoint="leave_stats")
    @hr_required
    def leave_stats():
        return jsonify(container.leave_service.stats())

    @app.route("/leave/<int:leave_id>", methods=["GET"], endpoint="leave_get")
    @login_required
    def leave_get(leave_id: int):
        req = container.leave_service.get(leave_id)
        ensure_self_or_hr(req.employee_id)
        return jsonify(req.to_dict())

    @app.route("/leave/<int:leave_id>/status", methods=["PUT"], endpoint="leave_decide")
    @hr_required
    def leave_decide(leave_id: int):
        data = json_body()
        req = container.leave_service.decide(
            leave_id,
            decision=data.get("status"),
            decided_by=current_user().user_id,
            comments=data.get("comments"),
        )
        return jsonify(req.to_dict())

    @app.route("/leave/<int:leave_id>/cancel", methods=["PUT"], endpoint="leave_cancel")
    @login_required
    def leave_cancel(leave_id: int):
        req = container.leave_service.cancel(leave_id, user=current_user())
        return jsonify(req.to_dict())

    @app.route("/leave/<int:leave_id>", methods=["DELETE"], endpoint="leave_delete")
    @hr_required
    def leave_delete(leave_id: int):
        container.leave_service.delete(leave_id)
        return jsonify({"success": True, "message": "Leave request deleted successfully"})
