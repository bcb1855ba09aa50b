from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal

EARNING_FIELDS = ("earned_salary", "allowances", "bonuses", "overtime_pay")
DEDUCTION_FIELDS = ("tax", "provident_fund", "insurance", "leave_deductions", "other_deductions")


@dataclass(frozen=True)
class PayrollInputs:
    """Period figures gathered from the attendance and leave ledgers."""

    basic_salary: Decimal
    present_days: int
    leave_days: int
    overtime_hours: Decimal


@dataclass(frozen=True)
class PayrollBreakdown:
    basic_salary: Decimal
    earned_salary: Decimal
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


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def calculate(self, inputs: PayrollInputs) -> PayrollBreakdown:
        raise NotImplementedError
