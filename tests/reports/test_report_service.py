from datetime import date, datetime
from decimal import Decimal

import pytest

from hr_payroll.core.enums import AttendanceStatus, EmploymentStatus, LeaveStatus
from hr_payroll.core.exceptions import AuthorizationError, NotFoundError

HR_ID = 1
OTHER_HR_ID = 2


@pytest.fixture
def service(container):
    return container.report_service


@pytest.fixture
def ledgers(attendance_repo, leaves_repo):
    attendance_repo.seed(
        employee_id=10,
        hr_id=HR_ID,
        work_date=date(2025, 1, 6),
        status=AttendanceStatus.PRESENT,
        working_hours=Decimal("8.50"),
    )
    attendance_repo.seed(
        employee_id=10,
        hr_id=HR_ID,
        work_date=date(2025, 1, 7),
        status=AttendanceStatus.PRESENT,
        working_hours=Decimal("7.25"),
    )
    attendance_repo.seed(employee_id=11, hr_id=HR_ID, work_date=date(2025, 1, 7))
    attendance_repo.seed(employee_id=10, hr_id=HR_ID, work_date=date(2024, 12, 2), status=AttendanceStatus.PRESENT)
    attendance_repo.seed(employee_id=20, hr_id=OTHER_HR_ID, work_date=date(2025, 1, 7), status=AttendanceStatus.PRESENT)

    leaves_repo.seed(
        employee_id=10, hr_id=HR_ID, start_date=date(2025, 2, 3), end_date=date(2025, 2, 5), status=LeaveStatus.APPROVED
    )
    leaves_repo.seed(employee_id=10, hr_id=HR_ID, start_date=date(2025, 3, 3), end_date=date(2025, 3, 3))
    leaves_repo.seed(
        employee_id=10, hr_id=HR_ID, start_date=date(2024, 6, 3), end_date=date(2024, 6, 4), status=LeaveStatus.APPROVED
    )


def test_dashboard_counts_current_month(service, scope, ledgers, container, employees):
    employees.set_employment_status(11, EmploymentStatus.TERMINATED)
    payroll = container.payroll_service.generate(scope, 10, 1, 2025)
    container.payroll_service.generate(scope, 11, 1, 2025)
    container.payroll_service.mark_paid(scope, payroll.payroll_id, now=datetime(2025, 1, 31))

    d = service.dashboard(scope, today=date(2025, 1, 15))

    assert (d.employees.total, d.employees.active, d.employees.terminated) == (2, 1, 1)
    assert (d.attendance.present, d.attendance.absent) == (2, 1)
    assert (d.leaves.pending, d.leaves.approved) == (1, 2)
    assert d.payroll.total == 2
    assert d.payroll.paid == 1
    assert d.payroll.total_salary_paid == payroll.net_salary


def test_employee_summary(service, scope, ledgers, container):
    for month in range(1, 9):
        container.payroll_service.generate(scope, 10, month, 2024)
    container.payroll_service.generate(scope, 10, 1, 2025)

    s = service.employee_summary(scope, 10, today=date(2025, 1, 20))

    assert s.employee.full_name == "Ada Lovelace"
    assert s.attendance.present_days == 2
    assert s.attendance.records == 2
    assert s.attendance.total_working_hours == Decimal("15.75")
    assert (s.leaves.total_days, s.leaves.total_leaves, s.leaves.approved) == (3, 2, 1)
    assert s.payroll.total == 6
    assert (s.payroll.recent[0].year, s.payroll.recent[0].month) == (2025, 1)


def test_employee_summary_outside_scope(service, scope):
    with pytest.raises(NotFoundError):
        service.employee_summary(scope, 20, today=date(2025, 1, 20))


def test_reports_require_hr_role(service, employee_scope):
    with pytest.raises(AuthorizationError):
        service.dashboard(employee_scope)
