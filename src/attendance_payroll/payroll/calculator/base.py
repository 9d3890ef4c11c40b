from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Any, Iterable

from ..model import SalaryBreakdown


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def calculate(
        self,
        *,
        base_salary: Decimal,
        salary_type: Any,
        records: Iterable[Any],
        month_year: str,
    ) -> SalaryBreakdown:
        raise NotImplementedError
