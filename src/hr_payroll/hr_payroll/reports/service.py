from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds, now_local, year_bounds
from ..common.money import sum2
from ..common.validators import require_int
from ..core.constants import SUMMARY_ATTENDANCE_DAYS, SUMMARY_PAYROLL_LIMIT
from ..core.enums import AttendanceStatus, EmploymentStatus, LeaveStatus, PayrollStatus
from ..core.exceptions import NotFoundError
from ..core.scope import Scope
from ..employees.repository import EmployeeDirectory
from ..leaves.repository import LeaveRepository
from ..payroll.repository import PayrollRepository
from .model import (
    AttendanceSnapshot,
    AttendanceSummary,
    Dashboard,
    EmployeeCounts,
    EmployeeSummary,
    LeaveSnapshot,
    LeaveSummary,
    PayrollSnapshot,
    PayrollSummary,
)

logger = logging.getLogger(__name__)


class ReportService:
    """Read-only aggregation over the three ledgers."""

    def __init__(
        self,
        employees: EmployeeDirectory,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
        payrolls: PayrollRepository,
    ):
        self._employees = employees
        self._attendance = attendance
        self._leaves = leaves
        self._payrolls = payrolls

    def dashboard(self, scope: Scope, *, today: Optional[date] = None) -> Dashboard:
        scope.require_hr()
        today = today or now_local().date()
        month_start, month_end = month_bounds(today.month, today.year)

        employee_counts = self._employees.count_by_status(hr_id=scope.hr_id)
        attendance_counts = self._attendance.count_by_status(
            hr_id=scope.hr_id, start_date=month_start, end_date=month_end
        )
        leave_counts = self._leaves.count_by_status(hr_id=scope.hr_id)
        payroll_counts = self._payrolls.count_by_status(hr_id=scope.hr_id, month=today.month, year=today.year)
        paid = self._payrolls.list_statements(
            hr_id=scope.hr_id, month=today.month, year=today.year, status=PayrollStatus.PAID
        )

        return Dashboard(
            employees=EmployeeCounts(
                total=sum(employee_counts.values()),
                active=employee_counts.get(EmploymentStatus.ACTIVE, 0),
                on_leave=employee_counts.get(EmploymentStatus.ON_LEAVE, 0),
                terminated=employee_counts.get(EmploymentStatus.TERMINATED, 0),
            ),
            attendance=AttendanceSnapshot(
                present=attendance_counts.get(AttendanceStatus.PRESENT, 0),
                absent=attendance_counts.get(AttendanceStatus.ABSENT, 0),
            ),
            leaves=LeaveSnapshot(
                pending=leave_counts.get(LeaveStatus.PENDING, 0),
                approved=leave_counts.get(LeaveStatus.APPROVED, 0),
            ),
            payroll=PayrollSnapshot(
                total=sum(payroll_counts.values()),
                paid=payroll_counts.get(PayrollStatus.PAID, 0),
                total_salary_paid=sum2(p.net_salary for p in paid),
            ),
        )

    def employee_summary(self, scope: Scope, employee_id: Any, *, today: Optional[date] = None) -> EmployeeSummary:
        scope.require_hr()
        employee_id = require_int(employee_id, "Employee ID")
        today = today or now_local().date()

        employee = self._employees.find_by_id(employee_id, hr_id=scope.hr_id)
        if not employee:
            raise NotFoundError("Employee not found")

        records = self._attendance.list_records(
            hr_id=scope.hr_id,
            employee_id=employee_id,
            start_date=today - timedelta(days=SUMMARY_ATTENDANCE_DAYS),
            end_date=today,
        )

        year_start, year_end = year_bounds(today.year)
        leaves = self._leaves.list_requests(
            hr_id=scope.hr_id, employee_id=employee_id, start_from=year_start, start_to=year_end
        )
        approved = [lv for lv in leaves if lv.status == LeaveStatus.APPROVED]

        recent = self._payrolls.list_statements(hr_id=scope.hr_id, employee_id=employee_id, limit=SUMMARY_PAYROLL_LIMIT)

        logger.debug("Summary built employee=%s records=%s leaves=%s", employee_id, len(records), len(leaves))
        return EmployeeSummary(
            employee=employee,
            attendance=AttendanceSummary(
                present_days=sum(1 for r in records if r.status == AttendanceStatus.PRESENT),
                total_working_hours=sum2(r.working_hours for r in records),
                records=len(records),
            ),
            leaves=LeaveSummary(
                total_days=sum(lv.total_days for lv in approved),
                total_leaves=len(leaves),
                approved=len(approved),
            ),
            payroll=PayrollSummary(recent=list(recent), total=len(recent)),
        )
