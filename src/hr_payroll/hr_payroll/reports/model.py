from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from ..employees.model import Employee
from ..payroll.model import PayrollStatement


@dataclass(frozen=True)
class EmployeeCounts:
    total: int
    active: int
    on_leave: int
    terminated: int


@dataclass(frozen=True)
class AttendanceSnapshot:
    present: int
    absent: int


@dataclass(frozen=True)
class LeaveSnapshot:
    pending: int
    approved: int


@dataclass(frozen=True)
class PayrollSnapshot:
    total: int
    paid: int
    total_salary_paid: Decimal


@dataclass(frozen=True)
class Dashboard:
    """HR-wide rollup; attendance and payroll cover the current month."""

    employees: EmployeeCounts
    attendance: AttendanceSnapshot
    leaves: LeaveSnapshot
    payroll: PayrollSnapshot


@dataclass(frozen=True)
class AttendanceSummary:
    present_days: int
    total_working_hours: Decimal
    records: int


@dataclass(frozen=True)
class LeaveSummary:
    total_days: int
    total_leaves: int
    approved: int


@dataclass(frozen=True)
class PayrollSummary:
    recent: list[PayrollStatement] = field(default_factory=list)
    total: int = 0


@dataclass(frozen=True)
class EmployeeSummary:
    employee: Employee
    attendance: AttendanceSummary
    leaves: LeaveSummary
    payroll: PayrollSummary
