from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import EmploymentStatus
from .model import Employee, EmployeeFields


class EmployeeRepository(Protocol):
    """Repository interface for Employee.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_page(
        self,
        *,
        offset: int,
        limit: int,
        search: Optional[str] = None,
        department: Optional[str] = None,
        status: Optional[EmploymentStatus] = None,
    ) -> tuple[Sequence[Employee], int]:
        raise NotImplementedError

    def list_active(self) -> Sequence[Employee]:
        raise NotImplementedError

    def create(self, fields: EmployeeFields) -> int:
        raise NotImplementedError

    def update(self, employee_id: int, fields: EmployeeFields) -> None:
        raise NotImplementedError

    def delete_by_id(self, employee_id: int) -> bool:
        raise NotImplementedError

    def count_by_status(self) -> dict[str, int]:
        raise NotImplementedError
