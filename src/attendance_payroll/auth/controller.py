from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import json_body
from ..container import Container
from .guards import admin_required, current_user, login_required


def register(app: Flask, container: Container) -> None:
    @app.route("/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        data = json_body()
        result = container.auth_service.login(data.get("email"), data.get("password"))
        return jsonify({"success": True, "token": result.token, "user": result.user.to_dict()})

    @app.route("/auth/me", methods=["GET"], endpoint="auth_me")
    @login_required
    def auth_me():
        return jsonify(current_user().to_dict())

    @app.route("/auth/users", methods=["POST"], endpoint="auth_create_user")
    @admin_required
    def auth_create_user():
        user = container.auth_service.create_account(json_body())
        return jsonify(user.to_dict()), 201
