from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import PaymentMethod, PayrollStatus
from .calculator.base import PayrollBreakdown
from .model import PayrollStatement


class PayrollRepository(Protocol):
    def get_by_id(self, payroll_id: int, *, hr_id: int) -> Optional[PayrollStatement]:
        raise NotImplementedError

    def get_for_period(self, employee_id: int, month: int, year: int, *, hr_id: int) -> Optional[PayrollStatement]:
        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: int,
        hr_id: int,
        month: int,
        year: int,
        breakdown: PayrollBreakdown,
        present_days: int,
        leave_days: int,
        overtime_hours: Decimal,
        status: PayrollStatus,
    ) -> int:
        """Insert a statement; raises ``ConflictError`` if the period already has one."""

        raise NotImplementedError

    def mark_paid(
        self,
        payroll_id: int,
        *,
        hr_id: int,
        paid_date: datetime,
        payment_method: PaymentMethod,
        transaction_id: Optional[str] = None,
    ) -> bool:
        """Set PAID only while the statement is DRAFT or GENERATED."""

        raise NotImplementedError

    def update_fields(self, payroll_id: int, *, hr_id: int, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, payroll_id: int, *, hr_id: int) -> bool:
        raise NotImplementedError

    def list_statements(
        self,
        *,
        hr_id: int,
        employee_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        status: Optional[PayrollStatus] = None,
        limit: Optional[int] = None,
    ) -> Sequence[PayrollStatement]:
        """Newest period first."""

        raise NotImplementedError

    def count_by_status(
        self,
        *,
        hr_id: int,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> dict[PayrollStatus, int]:
        raise NotImplementedError
