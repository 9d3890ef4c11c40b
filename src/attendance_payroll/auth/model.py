from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.serialization import iso
from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a login account, optionally linked to an employee."""

    user_id: int
    email: str
    full_name: str
    password_hash: str
    role: Role
    employee_id: Optional[int] = None
    is_active: bool = True
    last_login_at: Optional[datetime] = None

    @property
    def is_hr(self) -> bool:
        return self.role in {Role.ADMIN, Role.HR}

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "email": self.email,
            "full_name": self.full_name,
            "role": self.role.value,
            "employee_id": self.employee_id,
            "is_active": self.is_active,
            "last_login_at": iso(self.last_login_at),
        }
