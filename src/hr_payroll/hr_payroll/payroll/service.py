from __future__ import annotations

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping, Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import day_count, month_bounds, now_local
from ..common.money import ZERO, round2, sum2, to_decimal
from ..common.validators import require_decimal, require_enum, require_int, require_month, require_year
from ..core.constants import DEFAULT_PAYMENT_METHOD
from ..core.enums import AttendanceStatus, PaymentMethod, PayrollStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..core.scope import Scope
from ..employees.repository import EmployeeDirectory
from ..leaves.service import LeaveService
from .calculator.base import DEDUCTION_FIELDS, EARNING_FIELDS, PayrollCalculator, PayrollInputs
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayrollStatement, PayrollStatistics
from .repository import PayrollRepository

logger = logging.getLogger(__name__)

MONEY_FIELDS = frozenset(EARNING_FIELDS + DEDUCTION_FIELDS + ("total_earnings", "total_deductions"))
EDITABLE_FIELDS = MONEY_FIELDS | {"status", "notes"}

# PAID is reachable only through mark_paid
_EDITABLE_STATUSES = frozenset({PayrollStatus.DRAFT, PayrollStatus.GENERATED, PayrollStatus.CANCELLED})


def reconcile(statement: PayrollStatement, fields: Mapping[str, Any]) -> dict[str, Any]:
    """Re-derive totals and net salary for a patch against the current statement.

    A supplied total wins over its components; otherwise a total is re-summed
    whenever one of its components changes. net_salary always follows the
    (patched or current) totals.
    """
    out = dict(fields)

    def merged(name: str) -> Decimal:
        return to_decimal(out.get(name, getattr(statement, name)))

    if "total_earnings" not in out and any(f in out for f in EARNING_FIELDS):
        out["total_earnings"] = round2(sum((merged(f) for f in EARNING_FIELDS), ZERO))
    if "total_deductions" not in out and any(f in out for f in DEDUCTION_FIELDS):
        out["total_deductions"] = round2(sum((merged(f) for f in DEDUCTION_FIELDS), ZERO))

    if "total_earnings" in out or "total_deductions" in out:
        out["net_salary"] = merged("total_earnings") - merged("total_deductions")
    return out


class PayrollService:
    def __init__(
        self,
        payrolls: PayrollRepository,
        attendance: AttendanceRepository,
        leaves: LeaveService,
        employees: EmployeeDirectory,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._payrolls = payrolls
        self._attendance = attendance
        self._leaves = leaves
        self._employees = employees
        self._calculator = calculator or StandardPayrollCalculator()

    def generate(self, scope: Scope, employee_id: Any, month: Any, year: Any) -> PayrollStatement:
        scope.require_hr()
        if any(v is None or v == "" for v in (employee_id, month, year)):
            raise ValidationError("Employee ID, month, and year are required")
        employee_id = require_int(employee_id, "Employee ID")
        month = require_month(month)
        year = require_year(year)

        employee = self._employees.find_by_id(employee_id, hr_id=scope.hr_id)
        if not employee:
            raise NotFoundError("Employee not found")

        if self._payrolls.get_for_period(employee_id, month, year, hr_id=scope.hr_id):
            logger.warning("Duplicate payroll employee=%s period=%s-%02d", employee_id, year, month)
            raise ConflictError("Payroll already generated for this month")

        period_start, period_end = month_bounds(month, year)
        records = self._attendance.list_records(
            hr_id=scope.hr_id, employee_id=employee_id, start_date=period_start, end_date=period_end
        )
        present_days = sum(1 for r in records if r.status == AttendanceStatus.PRESENT)
        absent_days = day_count(period_start, period_end) - present_days
        leave_days = self._leaves.approved_days_overlapping(scope, employee_id, period_start, period_end)
        overtime_hours = sum2(r.overtime_hours for r in records)

        breakdown = self._calculator.calculate(
            PayrollInputs(
                basic_salary=employee.salary or ZERO,
                present_days=present_days,
                leave_days=leave_days,
                overtime_hours=overtime_hours,
            )
        )

        payroll_id = self._payrolls.create(
            employee_id=employee_id,
            hr_id=scope.hr_id,
            month=month,
            year=year,
            breakdown=breakdown,
            present_days=present_days,
            leave_days=leave_days,
            overtime_hours=overtime_hours,
            status=PayrollStatus.GENERATED,
        )
        logger.info(
            "Payroll %s generated employee=%s period=%s-%02d present=%s absent=%s leave=%s overtime=%s",
            payroll_id,
            employee_id,
            year,
            month,
            present_days,
            absent_days,
            leave_days,
            overtime_hours,
        )
        logger.debug("Payroll %s net=%s", payroll_id, breakdown.net_salary)
        return self._require(scope, payroll_id)

    def mark_paid(
        self,
        scope: Scope,
        payroll_id: Any,
        payment_method: Any = None,
        transaction_id: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> PayrollStatement:
        scope.require_hr()
        statement = self._require(scope, require_int(payroll_id, "Payroll ID"))
        method = require_enum(PaymentMethod, payment_method or DEFAULT_PAYMENT_METHOD, "payment_method")

        if statement.status == PayrollStatus.PAID:
            raise ConflictError("Payroll already paid")
        if statement.status == PayrollStatus.CANCELLED:
            raise ConflictError("Cancelled payroll cannot be paid")

        ok = self._payrolls.mark_paid(
            statement.payroll_id,
            hr_id=scope.hr_id,
            paid_date=now or now_local(),
            payment_method=method,
            transaction_id=(transaction_id or "").strip() or None,
        )
        if not ok:
            raise ConflictError("Payroll already paid")

        logger.info("Payroll %s marked paid via %s", statement.payroll_id, method.value)
        return self._require(scope, statement.payroll_id)

    def edit(self, scope: Scope, payroll_id: Any, changes: Mapping[str, Any]) -> PayrollStatement:
        scope.require_hr()
        statement = self._require(scope, require_int(payroll_id, "Payroll ID"))
        if statement.status == PayrollStatus.PAID:
            raise ConflictError("Paid payroll cannot be edited")

        if "net_salary" in changes:
            raise ValidationError("net_salary is derived from total_earnings and total_deductions")
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unsupported field(s): {', '.join(sorted(unknown))}")

        fields: dict[str, Any] = {}
        for key, value in changes.items():
            if key in MONEY_FIELDS:
                fields[key] = round2(require_decimal(value, key))
            elif key == "status":
                status = require_enum(PayrollStatus, value, "status")
                if status not in _EDITABLE_STATUSES:
                    raise ValidationError("Use mark-paid to pay a payroll")
                fields[key] = status
            else:
                fields[key] = value

        fields = reconcile(statement, fields)
        if fields:
            self._payrolls.update_fields(statement.payroll_id, hr_id=scope.hr_id, fields=fields)
            logger.info("Payroll %s edited fields=%s", statement.payroll_id, sorted(fields))
        return self._require(scope, statement.payroll_id)

    def get(self, scope: Scope, payroll_id: Any) -> PayrollStatement:
        scope.require_hr()
        return self._require(scope, require_int(payroll_id, "Payroll ID"))

    def delete(self, scope: Scope, payroll_id: Any) -> PayrollStatement:
        scope.require_hr()
        statement = self._require(scope, require_int(payroll_id, "Payroll ID"))
        if not self._payrolls.delete(statement.payroll_id, hr_id=scope.hr_id):
            raise NotFoundError("Payroll not found")
        logger.info("Payroll %s deleted", statement.payroll_id)
        return statement

    def statistics(self, scope: Scope, *, year: Any = None, month: Any = None) -> PayrollStatistics:
        scope.require_hr()
        year = require_year(year) if year is not None else None
        month = require_month(month) if month is not None else None

        counts = self._payrolls.count_by_status(hr_id=scope.hr_id, month=month, year=year)
        paid = self._payrolls.list_statements(hr_id=scope.hr_id, month=month, year=year, status=PayrollStatus.PAID)
        return PayrollStatistics(
            total=sum(counts.values()),
            draft=counts.get(PayrollStatus.DRAFT, 0),
            pending=counts.get(PayrollStatus.GENERATED, 0),
            paid=counts.get(PayrollStatus.PAID, 0),
            cancelled=counts.get(PayrollStatus.CANCELLED, 0),
            total_salary_paid=sum2(p.net_salary for p in paid),
        )

    def _require(self, scope: Scope, payroll_id: int) -> PayrollStatement:
        statement = self._payrolls.get_by_id(payroll_id, hr_id=scope.hr_id)
        if not statement:
            raise NotFoundError("Payroll not found")
        return statement
