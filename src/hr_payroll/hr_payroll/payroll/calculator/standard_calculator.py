from __future__ import annotations

from dataclasses import dataclass, fields
from decimal import Decimal
from typing import Any, Mapping, Optional

from ...common.money import ZERO, round2, to_decimal
from ...core.constants import (
    DAYS_PER_MONTH,
    OVERTIME_MULTIPLIER,
    PROVIDENT_FUND_RATE,
    STANDARD_SHIFT_HOURS,
    TAX_RATE,
)
from .base import PayrollBreakdown, PayrollCalculator, PayrollInputs


@dataclass(frozen=True)
class CompensationPolicy:
    days_per_month: Decimal = DAYS_PER_MONTH
    hours_per_day: Decimal = STANDARD_SHIFT_HOURS
    overtime_multiplier: Decimal = OVERTIME_MULTIPLIER
    tax_rate: Decimal = TAX_RATE
    provident_fund_rate: Decimal = PROVIDENT_FUND_RATE
    allowances: Decimal = ZERO
    bonuses: Decimal = ZERO
    insurance: Decimal = ZERO
    other_deductions: Decimal = ZERO

    @classmethod
    def from_mapping(cls, values: Optional[Mapping[str, Any]]) -> "CompensationPolicy":
        """Build from settings, ignoring unknown keys and empty values."""
        known = {f.name for f in fields(cls)}
        kwargs = {k: to_decimal(v) for k, v in (values or {}).items() if k in known and v not in (None, "")}
        return cls(**kwargs)


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: pay per present day plus overtime, minus tax, PF and leave.

    daily = basic / days_per_month; overtime is paid at
    ``daily / hours_per_day * overtime_multiplier`` per hour. Every component is
    rounded half-up to 2 decimals and totals are summed from the rounded
    components, so the statement always reconciles to the cent.
    """

    def __init__(self, policy: Optional[CompensationPolicy] = None):
        self.policy = policy or CompensationPolicy()

    def calculate(self, inputs: PayrollInputs) -> PayrollBreakdown:
        p = self.policy
        basic = to_decimal(inputs.basic_salary)
        daily = basic / p.days_per_month

        earned = round2(daily * inputs.present_days)
        overtime_pay = round2(to_decimal(inputs.overtime_hours) * (daily / p.hours_per_day) * p.overtime_multiplier)
        allowances = round2(p.allowances)
        bonuses = round2(p.bonuses)
        total_earnings = earned + allowances + bonuses + overtime_pay

        tax = round2(total_earnings * p.tax_rate)
        provident_fund = round2(basic * p.provident_fund_rate)
        insurance = round2(p.insurance)
        leave_deductions = round2(daily * inputs.leave_days)
        other_deductions = round2(p.other_deductions)
        total_deductions = tax + provident_fund + insurance + leave_deductions + other_deductions

        return PayrollBreakdown(
            basic_salary=round2(basic),
            earned_salary=earned,
            allowances=allowances,
            bonuses=bonuses,
            overtime_pay=overtime_pay,
            total_earnings=total_earnings,
            tax=tax,
            provident_fund=provident_fund,
            insurance=insurance,
            leave_deductions=leave_deductions,
            other_deductions=other_deductions,
            total_deductions=total_deductions,
            net_salary=total_earnings - total_deductions,
        )
