from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import PaymentMethod, PayrollStatus


@dataclass(frozen=True)
class PayrollStatement:
    """Reconciled earnings/deductions for one employee-month.

    total_earnings = earned_salary + allowances + bonuses + overtime_pay
    total_deductions = tax + provident_fund + insurance + leave_deductions + other_deductions
    net_salary = total_earnings - total_deductions
    """

    payroll_id: int
    employee_id: int
    hr_id: int
    month: int
    year: int
    basic_salary: Decimal
    earned_salary: Decimal
    present_days: int
    leave_days: int
    overtime_hours: Decimal
    allowances: Decimal
    bonuses: Decimal
    overtime_pay: Decimal
    total_earnings: Decimal
    tax: Decimal
    provident_fund: Decimal
    insurance: Decimal
    leave_deductions: Decimal
    other_deductions: Decimal
    total_deductions: Decimal
    net_salary: Decimal
    status: PayrollStatus = PayrollStatus.DRAFT
    paid_date: Optional[datetime] = None
    payment_method: Optional[PaymentMethod] = None
    transaction_id: Optional[str] = None
    notes: Optional[str] = None


@dataclass(frozen=True)
class PayrollStatistics:
    total: int
    draft: int
    pending: int
    paid: int
    cancelled: int
    total_salary_paid: Decimal
