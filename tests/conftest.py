from __future__ import annotations

import dataclasses
from collections import Counter
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping, Optional

import pytest

from hr_payroll.attendance.model import AttendanceRecord, Location
from hr_payroll.container import wire
from hr_payroll.core.enums import (
    AttendanceStatus,
    EmploymentStatus,
    LeaveStatus,
    LeaveType,
    PaymentMethod,
    PayrollStatus,
    Role,
)
from hr_payroll.core.exceptions import ConflictError
from hr_payroll.core.scope import Scope
from hr_payroll.employees.model import Employee
from hr_payroll.leaves.model import LeaveRequest
from hr_payroll.payroll.calculator.base import PayrollBreakdown
from hr_payroll.payroll.model import PayrollStatement

HR_ID = 1
OTHER_HR_ID = 2


class InMemoryEmployees:
    def __init__(self, employees=()):
        self.by_id: dict[int, Employee] = {e.employee_id: e for e in employees}

    def find_by_id(self, employee_id: int, *, hr_id: int) -> Optional[Employee]:
        e = self.by_id.get(int(employee_id))
        return e if e and e.hr_id == hr_id else None

    def set_employment_status(self, employee_id: int, status: EmploymentStatus) -> bool:
        e = self.by_id.get(int(employee_id))
        if not e:
            return False
        self.by_id[e.employee_id] = dataclasses.replace(e, employment_status=status)
        return True

    def count_by_status(self, *, hr_id: int) -> dict[EmploymentStatus, int]:
        return dict(Counter(e.employment_status for e in self.by_id.values() if e.hr_id == hr_id))


class InMemoryAttendance:
    """Honours the (employee, work_date) unique key and the conditional updates."""

    def __init__(self):
        self.records: dict[int, AttendanceRecord] = {}
        self._id = 0

    def seed(self, **kwargs) -> AttendanceRecord:
        self._id += 1
        rec = AttendanceRecord(attendance_id=self._id, **kwargs)
        self.records[rec.attendance_id] = rec
        return rec

    def get_by_id(self, attendance_id: int, *, hr_id: int) -> Optional[AttendanceRecord]:
        r = self.records.get(int(attendance_id))
        return r if r and r.hr_id == hr_id else None

    def get_for_employee_and_date(self, employee_id: int, work_date: date, *, hr_id: int) -> Optional[AttendanceRecord]:
        for r in self.records.values():
            if r.employee_id == employee_id and r.work_date == work_date and r.hr_id == hr_id:
                return r
        return None

    def create_checkin(
        self,
        *,
        employee_id: int,
        hr_id: int,
        work_date: date,
        check_in_time: datetime,
        status: AttendanceStatus,
        location: Optional[Location] = None,
    ) -> int:
        if any(r.employee_id == employee_id and r.work_date == work_date for r in self.records.values()):
            raise ConflictError("Already checked in for today")
        return self.seed(
            employee_id=employee_id,
            hr_id=hr_id,
            work_date=work_date,
            check_in_time=check_in_time,
            status=status,
            location=location,
        ).attendance_id

    def record_checkin(self, *, attendance_id: int, check_in_time: datetime, status: AttendanceStatus, location=None) -> bool:
        r = self.records[attendance_id]
        if r.check_in_time is not None:
            return False
        self.records[attendance_id] = dataclasses.replace(
            r, check_in_time=check_in_time, status=status, location=location or r.location
        )
        return True

    def update_checkout(
        self, *, attendance_id: int, check_out_time: datetime, working_hours: Decimal, overtime_hours: Decimal
    ) -> bool:
        r = self.records[attendance_id]
        if r.check_out_time is not None:
            return False
        self.records[attendance_id] = dataclasses.replace(
            r, check_out_time=check_out_time, working_hours=working_hours, overtime_hours=overtime_hours
        )
        return True

    def update_fields(self, attendance_id: int, *, hr_id: int, fields: Mapping[str, Any]) -> bool:
        r = self.get_by_id(attendance_id, hr_id=hr_id)
        if not r:
            return False
        self.records[r.attendance_id] = dataclasses.replace(r, **fields)
        return True

    def delete(self, attendance_id: int, *, hr_id: int) -> bool:
        if not self.get_by_id(attendance_id, hr_id=hr_id):
            return False
        del self.records[int(attendance_id)]
        return True

    def list_records(self, *, hr_id, employee_id=None, start_date=None, end_date=None, status=None):
        out = [
            r
            for r in self.records.values()
            if r.hr_id == hr_id
            and (employee_id is None or r.employee_id == employee_id)
            and (start_date is None or r.work_date >= start_date)
            and (end_date is None or r.work_date <= end_date)
            and (status is None or r.status == status)
        ]
        return sorted(out, key=lambda r: r.work_date, reverse=True)

    def count_by_status(self, *, hr_id, employee_id=None, start_date=None, end_date=None):
        records = self.list_records(hr_id=hr_id, employee_id=employee_id, start_date=start_date, end_date=end_date)
        return dict(Counter(r.status for r in records))


class InMemoryLeaves:
    def __init__(self):
        self.requests: dict[int, LeaveRequest] = {}
        self._id = 0

    def seed(self, **kwargs) -> LeaveRequest:
        self._id += 1
        kwargs.setdefault("total_days", (kwargs["end_date"] - kwargs["start_date"]).days + 1)
        kwargs.setdefault("reason", "seeded")
        kwargs.setdefault("leave_type", LeaveType.ANNUAL)
        lv = LeaveRequest(request_id=self._id, **kwargs)
        self.requests[lv.request_id] = lv
        return lv

    def get_by_id(self, request_id: int, *, hr_id: int) -> Optional[LeaveRequest]:
        lv = self.requests.get(int(request_id))
        return lv if lv and lv.hr_id == hr_id else None

    def create(self, *, employee_id, hr_id, leave_type, start_date, end_date, total_days, reason, applied_at) -> int:
        return self.seed(
            employee_id=employee_id,
            hr_id=hr_id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            total_days=total_days,
            reason=reason,
            applied_at=applied_at,
        ).request_id

    def decide(self, request_id, *, hr_id, status, decided_by=None, decided_at=None, rejection_reason=None) -> bool:
        lv = self.get_by_id(request_id, hr_id=hr_id)
        if not lv or lv.status != LeaveStatus.PENDING:
            return False
        self.requests[lv.request_id] = dataclasses.replace(
            lv, status=status, approved_by=decided_by, approved_at=decided_at, rejection_reason=rejection_reason
        )
        return True

    def update_fields(self, request_id, *, hr_id, fields) -> bool:
        lv = self.get_by_id(request_id, hr_id=hr_id)
        if not lv:
            return False
        self.requests[lv.request_id] = dataclasses.replace(lv, **fields)
        return True

    def delete(self, request_id, *, hr_id) -> bool:
        if not self.get_by_id(request_id, hr_id=hr_id):
            return False
        del self.requests[int(request_id)]
        return True

    def list_requests(self, *, hr_id, employee_id=None, status=None, start_from=None, start_to=None):
        return [
            lv
            for lv in self.requests.values()
            if lv.hr_id == hr_id
            and (employee_id is None or lv.employee_id == employee_id)
            and (status is None or lv.status == status)
            and (start_from is None or lv.start_date >= start_from)
            and (start_to is None or lv.start_date <= start_to)
        ]

    def list_overlapping(self, *, hr_id, employee_id, status, period_start, period_end):
        return [
            lv
            for lv in self.list_requests(hr_id=hr_id, employee_id=employee_id, status=status)
            if lv.start_date <= period_end and lv.end_date >= period_start
        ]

    def count_by_status(self, *, hr_id, employee_id=None, start_from=None, start_to=None):
        items = self.list_requests(hr_id=hr_id, employee_id=employee_id, start_from=start_from, start_to=start_to)
        return dict(Counter(lv.status for lv in items))


class InMemoryPayrolls:
    """Honours the (employee, month, year) unique key."""

    def __init__(self):
        self.statements: dict[int, PayrollStatement] = {}
        self._id = 0

    def get_by_id(self, payroll_id, *, hr_id) -> Optional[PayrollStatement]:
        p = self.statements.get(int(payroll_id))
        return p if p and p.hr_id == hr_id else None

    def get_for_period(self, employee_id, month, year, *, hr_id) -> Optional[PayrollStatement]:
        for p in self.statements.values():
            if (p.employee_id, p.month, p.year, p.hr_id) == (employee_id, month, year, hr_id):
                return p
        return None

    def create(
        self,
        *,
        employee_id,
        hr_id,
        month,
        year,
        breakdown: PayrollBreakdown,
        present_days,
        leave_days,
        overtime_hours,
        status,
    ) -> int:
        if any((p.employee_id, p.month, p.year) == (employee_id, month, year) for p in self.statements.values()):
            raise ConflictError("Payroll already generated for this month")
        self._id += 1
        self.statements[self._id] = PayrollStatement(
            payroll_id=self._id,
            employee_id=employee_id,
            hr_id=hr_id,
            month=month,
            year=year,
            present_days=present_days,
            leave_days=leave_days,
            overtime_hours=overtime_hours,
            status=status,
            **dataclasses.asdict(breakdown),
        )
        return self._id

    def mark_paid(self, payroll_id, *, hr_id, paid_date, payment_method: PaymentMethod, transaction_id=None) -> bool:
        p = self.get_by_id(payroll_id, hr_id=hr_id)
        if not p or p.status not in (PayrollStatus.DRAFT, PayrollStatus.GENERATED):
            return False
        self.statements[p.payroll_id] = dataclasses.replace(
            p,
            status=PayrollStatus.PAID,
            paid_date=paid_date,
            payment_method=payment_method,
            transaction_id=transaction_id,
        )
        return True

    def update_fields(self, payroll_id, *, hr_id, fields) -> bool:
        p = self.get_by_id(payroll_id, hr_id=hr_id)
        if not p or p.status == PayrollStatus.PAID:
            return False
        self.statements[p.payroll_id] = dataclasses.replace(p, **fields)
        return True

    def delete(self, payroll_id, *, hr_id) -> bool:
        if not self.get_by_id(payroll_id, hr_id=hr_id):
            return False
        del self.statements[int(payroll_id)]
        return True

    def list_statements(self, *, hr_id, employee_id=None, month=None, year=None, status=None, limit=None):
        out = [
            p
            for p in self.statements.values()
            if p.hr_id == hr_id
            and (employee_id is None or p.employee_id == employee_id)
            and (month is None or p.month == month)
            and (year is None or p.year == year)
            and (status is None or p.status == status)
        ]
        out.sort(key=lambda p: (p.year, p.month), reverse=True)
        return out[:limit] if limit is not None else out

    def count_by_status(self, *, hr_id, month=None, year=None):
        return dict(Counter(p.status for p in self.list_statements(hr_id=hr_id, month=month, year=year)))


@pytest.fixture
def scope() -> Scope:
    return Scope(hr_id=HR_ID, role=Role.HR)


@pytest.fixture
def employee_scope() -> Scope:
    return Scope(hr_id=HR_ID, role=Role.EMPLOYEE)


@pytest.fixture
def employees() -> InMemoryEmployees:
    return InMemoryEmployees(
        [
            Employee(employee_id=10, hr_id=HR_ID, first_name="Ada", last_name="Lovelace", salary=Decimal("3000")),
            Employee(employee_id=11, hr_id=HR_ID, first_name="Alan", last_name="Turing", salary=None),
            Employee(employee_id=20, hr_id=OTHER_HR_ID, first_name="Grace", last_name="Hopper", salary=Decimal("4000")),
        ]
    )


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def leaves_repo() -> InMemoryLeaves:
    return InMemoryLeaves()


@pytest.fixture
def payrolls_repo() -> InMemoryPayrolls:
    return InMemoryPayrolls()


@pytest.fixture
def container(employees, attendance_repo, leaves_repo, payrolls_repo):
    return wire(
        employees_repo=employees,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        payrolls_repo=payrolls_repo,
    )


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    from hr_payroll.main import create_app

    return create_app(container)


@pytest.fixture
def client(app):
    c = app.test_client()
    with c.session_transaction() as sess:
        sess["user_id"] = HR_ID
        sess["role"] = Role.HR.value
    return c
