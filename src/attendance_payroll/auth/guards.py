from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import current_app, g, request

from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from .model import User


def _bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def current_user() -> User:
    return g.current_user


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        container = current_app.extensions["container"]
        g.current_user = container.auth_service.user_from_token(_bearer_token())
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = set(roles)

    def decorator(view):
        @wraps(view)
        @login_required
        def wrapper(*args, **kwargs):
            if current_user().role not in allowed:
                raise AuthorizationError("Insufficient permissions", code="INSUFFICIENT_PERMISSIONS")
            return view(*args, **kwargs)

        return wrapper

    return decorator


hr_required = roles_required(Role.ADMIN, Role.HR)
admin_required = roles_required(Role.ADMIN)


def ensure_self_or_hr(employee_id: int) -> None:
    """Employees may only touch rows that belong to their own employee record."""

    user = current_user()
    if user.is_hr:
        return
    if user.employee_id is None or int(user.employee_id) != int(employee_id):
        raise AuthorizationError("You can only access your own records", code="INSUFFICIENT_PERMISSIONS")


def own_employee_id() -> int:
    user = current_user()
    if user.employee_id is None:
        raise AuthorizationError("No employee profile is linked to this account", code="EMPLOYEE_PROFILE_MISSING")
    return int(user.employee_id)
