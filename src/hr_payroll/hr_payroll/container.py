from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .attendance.calculator.standard_calculator import StandardWorkingHoursCalculator
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeDirectory
from .employees.repository import EmployeeDirectory
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveService
from .payroll.calculator.standard_calculator import CompensationPolicy, StandardPayrollCalculator
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService
from .reports.service import ReportService


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeDirectory
    attendance_repo: AttendanceRepository
    leaves_repo: LeaveRepository
    payrolls_repo: PayrollRepository

    attendance_service: AttendanceService
    leave_service: LeaveService
    payroll_service: PayrollService
    report_service: ReportService


def wire(
    *,
    employees_repo: EmployeeDirectory,
    attendance_repo: AttendanceRepository,
    leaves_repo: LeaveRepository,
    payrolls_repo: PayrollRepository,
    payroll_policy: Optional[Mapping[str, Any]] = None,
) -> Container:
    """Assemble services over any set of repositories."""
    policy = CompensationPolicy.from_mapping(payroll_policy)

    attendance_service = AttendanceService(
        attendance_repo,
        employees_repo,
        calculator=StandardWorkingHoursCalculator(standard_shift_hours=policy.hours_per_day),
    )
    leave_service = LeaveService(leaves_repo, employees_repo)
    payroll_service = PayrollService(
        payrolls_repo,
        attendance_repo,
        leave_service,
        employees_repo,
        calculator=StandardPayrollCalculator(policy),
    )
    report_service = ReportService(employees_repo, attendance_repo, leaves_repo, payrolls_repo)

    return Container(
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        payrolls_repo=payrolls_repo,
        attendance_service=attendance_service,
        leave_service=leave_service,
        payroll_service=payroll_service,
        report_service=report_service,
    )


def build_container(*, db_config: dict, payroll_policy: Optional[Mapping[str, Any]] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return wire(
        employees_repo=MySQLEmployeeDirectory(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        payrolls_repo=MySQLPayrollRepository(conn),
        payroll_policy=payroll_policy,
    )
