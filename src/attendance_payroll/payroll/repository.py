from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import PaidStatus
from .model import SalaryAmounts, SalaryRecord


class SalaryRepository(Protocol):
    def upsert(self, *, employee_id: int, month: str, amounts: SalaryAmounts) -> SalaryRecord:
        """Insert or overwrite the computed columns of the (employee, month) row.

        Paid status and paid date of an existing row are left as they are.
        """

        raise NotImplementedError

    def get_by_id(self, salary_id: int) -> Optional[SalaryRecord]:
        raise NotImplementedError

    def list_page(
        self,
        *,
        offset: int,
        limit: int,
        employee_id: Optional[int] = None,
        month: Optional[str] = None,
        year: Optional[int] = None,
    ) -> tuple[Sequence[SalaryRecord], int]:
        raise NotImplementedError

    def list_for_month(self, month: str) -> Sequence[SalaryRecord]:
        raise NotImplementedError

    def update(
        self,
        salary_id: int,
        *,
        amounts: SalaryAmounts,
        paid_status: PaidStatus,
        paid_date: Optional[date],
    ) -> None:
        raise NotImplementedError

    def mark_paid(self, salary_id: int, paid_date: date) -> bool:
        raise NotImplementedError

    def delete_by_id(self, salary_id: int) -> bool:
        raise NotImplementedError

    def count_by_status(self, *, month: Optional[str] = None, year: Optional[int] = None) -> dict[str, int]:
        raise NotImplementedError

    def total_net(
        self,
        *,
        month: Optional[str] = None,
        year: Optional[int] = None,
        paid_status: Optional[PaidStatus] = None,
    ) -> Decimal:
        raise NotImplementedError
