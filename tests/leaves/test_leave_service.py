from datetime import date, datetime

import pytest

from hr_payroll.core.enums import EmploymentStatus, LeaveStatus, LeaveType
from hr_payroll.core.exceptions import ConflictError, NotFoundError, ValidationError
from hr_payroll.leaves.service import leave_days

HR_ID = 1
OTHER_HR_ID = 2


@pytest.fixture
def service(container):
    return container.leave_service


def _apply(service, scope, start="2025-03-10", end="2025-03-12", **kwargs):
    return service.apply(
        scope,
        kwargs.get("employee_id", 10),
        kwargs.get("leave_type", "Annual Leave"),
        start,
        end,
        kwargs.get("reason", "Family trip"),
        now=datetime(2025, 3, 1, 9, 0),
    )


def test_leave_days_is_inclusive():
    assert leave_days(date(2025, 3, 10), date(2025, 3, 12)) == 3
    assert leave_days(date(2025, 3, 10), date(2025, 3, 10)) == 1


def test_apply_creates_pending_request(service, scope):
    leave = _apply(service, scope)

    assert leave.status == LeaveStatus.PENDING
    assert leave.leave_type == LeaveType.ANNUAL
    assert leave.total_days == 3


def test_apply_rejects_end_before_start(service, scope):
    with pytest.raises(ValidationError, match="End date must be on or after start date"):
        _apply(service, scope, start="2025-03-12", end="2025-03-10")


def test_apply_requires_every_field(service, scope):
    with pytest.raises(ValidationError, match="All fields are required"):
        _apply(service, scope, reason="")


def test_apply_rejects_unknown_leave_type(service, scope):
    with pytest.raises(ValidationError, match="leave_type"):
        _apply(service, scope, leave_type="Gardening Leave")


def test_apply_for_foreign_employee(service, scope):
    with pytest.raises(NotFoundError):
        _apply(service, scope, employee_id=20)


def test_approve_active_leave_marks_employee_on_leave(service, scope, employees):
    leave = _apply(service, scope)

    approved = service.approve(scope, leave.request_id, now=datetime(2025, 3, 11, 8, 0))

    assert approved.status == LeaveStatus.APPROVED
    assert approved.approved_by == HR_ID
    assert employees.by_id[10].employment_status == EmploymentStatus.ON_LEAVE


def test_approve_future_leave_keeps_employment_status(service, scope, employees):
    leave = _apply(service, scope)

    service.approve(scope, leave.request_id, approver_id=7, now=datetime(2025, 3, 1, 8, 0))

    assert employees.by_id[10].employment_status == EmploymentStatus.ACTIVE


def test_reject_uses_default_reason(service, scope):
    leave = _apply(service, scope)

    rejected = service.reject(scope, leave.request_id)

    assert rejected.status == LeaveStatus.REJECTED
    assert rejected.rejection_reason == "No reason provided"


def test_approving_rejected_leave_conflicts(service, scope):
    leave = _apply(service, scope)
    service.reject(scope, leave.request_id, reason="Peak season")

    with pytest.raises(ConflictError, match="Leave request already processed"):
        service.approve(scope, leave.request_id)


def test_cancel_only_from_pending(service, scope):
    first = _apply(service, scope)
    second = _apply(service, scope, start="2025-04-01", end="2025-04-02")
    service.approve(scope, second.request_id, now=datetime(2025, 3, 1))

    assert service.cancel(scope, first.request_id).status == LeaveStatus.CANCELLED
    with pytest.raises(ConflictError):
        service.cancel(scope, second.request_id)


def test_update_recomputes_total_days(service, scope):
    leave = _apply(service, scope)

    updated = service.update(scope, leave.request_id, {"end_date": "2025-03-16"})

    assert updated.total_days == 7


def test_update_cannot_change_status(service, scope):
    leave = _apply(service, scope)

    with pytest.raises(ValidationError):
        service.update(scope, leave.request_id, {"status": "Approved"})


def test_approved_days_are_clamped_to_period(service, scope, leaves_repo):
    leaves_repo.seed(
        employee_id=10,
        hr_id=HR_ID,
        start_date=date(2025, 1, 28),
        end_date=date(2025, 2, 3),
        status=LeaveStatus.APPROVED,
    )
    leaves_repo.seed(
        employee_id=10,
        hr_id=HR_ID,
        start_date=date(2025, 2, 10),
        end_date=date(2025, 2, 11),
        status=LeaveStatus.PENDING,
    )

    assert service.approved_days_overlapping(scope, 10, date(2025, 1, 1), date(2025, 1, 31)) == 4
    assert service.approved_days_overlapping(scope, 10, date(2025, 2, 1), date(2025, 2, 28)) == 3
    assert service.approved_days_overlapping(scope, 10, date(2025, 3, 1), date(2025, 3, 31)) == 0


def test_statistics_for_year(service, scope, leaves_repo):
    leaves_repo.seed(
        employee_id=10, hr_id=HR_ID, start_date=date(2025, 1, 2), end_date=date(2025, 1, 3), status=LeaveStatus.APPROVED
    )
    leaves_repo.seed(employee_id=10, hr_id=HR_ID, start_date=date(2025, 5, 2), end_date=date(2025, 5, 2))
    leaves_repo.seed(
        employee_id=10, hr_id=HR_ID, start_date=date(2024, 5, 2), end_date=date(2024, 5, 9), status=LeaveStatus.APPROVED
    )
    leaves_repo.seed(
        employee_id=20,
        hr_id=OTHER_HR_ID,
        start_date=date(2025, 1, 2),
        end_date=date(2025, 1, 3),
        status=LeaveStatus.APPROVED,
    )

    stats = service.statistics(scope, year=2025)

    assert stats.total == 2
    assert stats.approved == 1
    assert stats.pending == 1
    assert stats.total_leave_days == 2


def test_statistics_rejects_out_of_range_year(service, scope):
    with pytest.raises(ValidationError, match="year"):
        service.statistics(scope, year=10000)
