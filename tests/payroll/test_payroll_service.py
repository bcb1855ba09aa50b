from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from hr_payroll.core.enums import AttendanceStatus, LeaveStatus, PaymentMethod, PayrollStatus
from hr_payroll.core.exceptions import ConflictError, NotFoundError, ValidationError
from hr_payroll.payroll.service import reconcile

HR_ID = 1


@pytest.fixture
def service(container):
    return container.payroll_service


@pytest.fixture
def january(attendance_repo, leaves_repo):
    """Twenty present days with 5 overtime hours and 2 approved leave days."""
    for i in range(20):
        attendance_repo.seed(
            employee_id=10,
            hr_id=HR_ID,
            work_date=date(2025, 1, 1) + timedelta(days=i),
            status=AttendanceStatus.PRESENT,
            working_hours=Decimal("8.25"),
            overtime_hours=Decimal("0.25"),
        )
    attendance_repo.seed(employee_id=10, hr_id=HR_ID, work_date=date(2025, 1, 21), status=AttendanceStatus.LATE)
    leaves_repo.seed(
        employee_id=10,
        hr_id=HR_ID,
        start_date=date(2025, 1, 27),
        end_date=date(2025, 1, 28),
        status=LeaveStatus.APPROVED,
    )
    leaves_repo.seed(
        employee_id=10,
        hr_id=HR_ID,
        start_date=date(2025, 1, 30),
        end_date=date(2025, 1, 31),
        status=LeaveStatus.REJECTED,
    )


def test_generate_reference_month(service, scope, january):
    p = service.generate(scope, 10, 1, 2025)

    assert p.status == PayrollStatus.GENERATED
    assert p.present_days == 20
    assert p.leave_days == 2
    assert p.overtime_hours == Decimal("5.00")
    assert p.total_earnings == Decimal("2093.75")
    assert p.tax == Decimal("209.38")
    assert p.total_deductions == Decimal("769.38")
    assert p.net_salary == Decimal("1324.37")


def test_generate_twice_conflicts(service, scope, january, payrolls_repo):
    service.generate(scope, 10, 1, 2025)

    with pytest.raises(ConflictError, match="Payroll already generated for this month"):
        service.generate(scope, 10, 1, 2025)
    assert len(payrolls_repo.statements) == 1


def test_generate_requires_fields(service, scope):
    with pytest.raises(ValidationError, match="Employee ID, month, and year are required"):
        service.generate(scope, 10, None, 2025)


def test_generate_rejects_bad_month(service, scope):
    with pytest.raises(ValidationError):
        service.generate(scope, 10, 13, 2025)


def test_generate_for_foreign_employee(service, scope):
    with pytest.raises(NotFoundError, match="Employee not found"):
        service.generate(scope, 20, 1, 2025)


def test_employee_without_salary_gets_zero_statement(service, scope):
    p = service.generate(scope, 11, 1, 2025)

    assert p.basic_salary == Decimal("0.00")
    assert p.net_salary == Decimal("0.00")


def test_mark_paid_defaults_to_bank_transfer(service, scope, january):
    p = service.generate(scope, 10, 1, 2025)

    paid = service.mark_paid(scope, p.payroll_id, now=datetime(2025, 2, 1, 10, 0))

    assert paid.status == PayrollStatus.PAID
    assert paid.payment_method == PaymentMethod.BANK_TRANSFER
    assert paid.paid_date == datetime(2025, 2, 1, 10, 0)


def test_mark_paid_twice_conflicts(service, scope, january):
    p = service.generate(scope, 10, 1, 2025)
    service.mark_paid(scope, p.payroll_id, "Cash", "TX-1")

    with pytest.raises(ConflictError):
        service.mark_paid(scope, p.payroll_id, "Cash")


def test_mark_paid_unknown_payroll(service, scope):
    with pytest.raises(NotFoundError, match="Payroll not found"):
        service.mark_paid(scope, 404)


def test_edit_component_rebalances_totals_and_net(service, scope, january):
    p = service.generate(scope, 10, 1, 2025)

    edited = service.edit(scope, p.payroll_id, {"bonuses": "150", "insurance": 30.5})

    assert edited.total_earnings == Decimal("2243.75")
    assert edited.total_deductions == Decimal("799.88")
    assert edited.net_salary == edited.total_earnings - edited.total_deductions


def test_edit_supplied_total_wins(service, scope, january):
    p = service.generate(scope, 10, 1, 2025)

    edited = service.edit(scope, p.payroll_id, {"bonuses": 100, "total_earnings": 2500})

    assert edited.total_earnings == Decimal("2500.00")
    assert edited.net_salary == Decimal("2500.00") - p.total_deductions


def test_edit_cannot_set_net_or_pay(service, scope, january):
    p = service.generate(scope, 10, 1, 2025)

    with pytest.raises(ValidationError):
        service.edit(scope, p.payroll_id, {"net_salary": 1})
    with pytest.raises(ValidationError):
        service.edit(scope, p.payroll_id, {"status": "Paid"})


def test_edit_paid_statement_conflicts(service, scope, january):
    p = service.generate(scope, 10, 1, 2025)
    service.mark_paid(scope, p.payroll_id)

    with pytest.raises(ConflictError):
        service.edit(scope, p.payroll_id, {"notes": "late fix"})


def test_reconcile_leaves_untouched_patch_alone(service, scope, january):
    p = service.generate(scope, 10, 1, 2025)

    assert reconcile(p, {"notes": "ok"}) == {"notes": "ok"}


def test_statistics_sum_paid_net(service, scope, january, attendance_repo):
    first = service.generate(scope, 10, 1, 2025)
    service.generate(scope, 11, 1, 2025)
    service.mark_paid(scope, first.payroll_id)

    stats = service.statistics(scope, year=2025, month=1)

    assert stats.total == 2
    assert stats.paid == 1
    assert stats.pending == 1
    assert stats.total_salary_paid == Decimal("1324.37")


def test_delete(service, scope, january, payrolls_repo):
    p = service.generate(scope, 10, 1, 2025)
    service.delete(scope, p.payroll_id)

    assert payrolls_repo.statements == {}
    with pytest.raises(NotFoundError):
        service.get(scope, p.payroll_id)


@pytest.mark.parametrize("value", ["NaN", "Infinity", "-Infinity", "sNaN"])
def test_edit_rejects_non_finite_amounts(service, scope, january, payrolls_repo, value):
    p = service.generate(scope, 10, 1, 2025)

    with pytest.raises(ValidationError, match="bonuses"):
        service.edit(scope, p.payroll_id, {"bonuses": value})
    assert payrolls_repo.statements[p.payroll_id].net_salary == Decimal("1324.37")


@pytest.mark.parametrize("year", [0, 10000])
def test_generate_rejects_out_of_range_year(service, scope, year):
    with pytest.raises(ValidationError, match="year"):
        service.generate(scope, 10, 1, year)


def test_statistics_rejects_out_of_range_year(service, scope):
    with pytest.raises(ValidationError):
        service.statistics(scope, year=10000)


def test_generate_race_hits_unique_key(service, scope, january, payrolls_repo, monkeypatch):
    service.generate(scope, 10, 1, 2025)
    monkeypatch.setattr(payrolls_repo, "get_for_period", lambda *a, **kw: None)

    with pytest.raises(ConflictError, match="Payroll already generated for this month"):
        service.generate(scope, 10, 1, 2025)
    assert len(payrolls_repo.statements) == 1
