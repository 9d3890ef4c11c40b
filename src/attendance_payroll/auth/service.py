from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import (
    require_enum,
    require_min_length,
    require_non_empty,
    require_positive_int,
)
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError
from ..employees.repository import EmployeeRepository
from .model import User
from .repository import UserRepository
from .tokens import TokenCodec


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: User


class AuthService:
    """Use case: authenticate users and resolve bearer tokens."""

    def __init__(self, users: UserRepository, tokens: TokenCodec, employees: Optional[EmployeeRepository] = None):
        self._users = users
        self._tokens = tokens
        self._employees = employees

    def login(self, email: str, password: str, *, now: Optional[datetime] = None) -> LoginResult:
        email = require_non_empty(email, "email").lower()
        password = require_non_empty(password, "password")

        user = self._users.get_by_email(email)
        if not user or not user.is_active:
            raise AuthenticationError("Invalid credentials", code="INVALID_CREDENTIALS")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False
        if not ok:
            raise AuthenticationError("Invalid credentials", code="INVALID_CREDENTIALS")

        self._users.touch_last_login(user.user_id, now or datetime.now())
        token = self._tokens.encode_access(user_id=user.user_id, role=user.role.value)
        return LoginResult(token=token, user=user)

    def user_from_token(self, token: Optional[str]) -> User:
        if not token:
            raise AuthenticationError("Access token required", code="MISSING_TOKEN")
        payload = self._tokens.decode(token)
        if not payload:
            raise AuthenticationError("Invalid token", code="INVALID_TOKEN")
        try:
            user_id = int(payload.get("sub"))
        except (TypeError, ValueError):
            raise AuthenticationError("Invalid token", code="INVALID_TOKEN")
        user = self._users.get_by_id(user_id)
        if not user or not user.is_active:
            raise AuthenticationError("Invalid token", code="INVALID_TOKEN")
        return user

    def create_account(self, data: Mapping[str, Any]) -> User:
        email = require_non_empty(data.get("email"), "email").lower()
        full_name = require_non_empty(data.get("full_name"), "full_name")
        password = require_min_length(str(data.get("password") or ""), "password", 6)
        role = require_enum(Role, data.get("role") or Role.EMPLOYEE.value, "role")

        employee_id = data.get("employee_id")
        if employee_id is not None:
            employee_id = require_positive_int(employee_id, "employee_id")
            if self._employees and not self._employees.get_by_id(employee_id):
                raise NotFoundError("Employee not found", code="EMPLOYEE_NOT_FOUND")

        if self._users.get_by_email(email):
            raise ConflictError("Email is already registered", code="USER_EXISTS")

        user_id = self._users.create_user(
            email=email,
            full_name=full_name,
            password_hash=generate_password_hash(password),
            role=role,
            employee_id=employee_id,
        )
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")
        return user
