from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import day_start, month_bounds, now_local, parse_iso_datetime
from ..common.money import ZERO, round2, sum2
from ..common.validators import require_decimal, require_enum, require_int, require_month, require_year
from ..core.enums import AttendanceStatus
from ..core.exceptions import ConflictError, NotFoundError, PolicyViolationError, ValidationError
from ..core.scope import Scope
from ..employees.repository import EmployeeDirectory
from .calculator.base import WorkingHoursCalculator
from .calculator.standard_calculator import StandardWorkingHoursCalculator
from .model import AttendanceRecord, AttendanceStatistics, Location
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset(
    {"check_in_time", "check_out_time", "status", "working_hours", "overtime_hours", "note", "location"}
)


def parse_location(value: Any) -> Optional[Location]:
    if value is None or isinstance(value, Location):
        return value
    if not isinstance(value, Mapping):
        raise ValidationError("location must be an object")
    try:
        return Location(
            latitude=float(value["latitude"]) if value.get("latitude") is not None else None,
            longitude=float(value["longitude"]) if value.get("longitude") is not None else None,
            address=value.get("address"),
        )
    except (TypeError, ValueError):
        raise ValidationError("location latitude/longitude must be numbers")


def _parse_instant(value: Any, field_name: str) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, str):
        value = parse_iso_datetime(value)
    if not isinstance(value, datetime):
        raise ValidationError(f"{field_name} must be an ISO 8601 datetime")
    # stored instants are local wall-clock times
    if value.tzinfo is not None:
        raise ValidationError(f"{field_name} must not carry a timezone offset")
    return value


def clean_changes(changes: Mapping[str, Any]) -> dict[str, Any]:
    """Validate and coerce a manual-edit patch."""
    unknown = set(changes) - EDITABLE_FIELDS
    if unknown:
        raise ValidationError(f"Unsupported field(s): {', '.join(sorted(unknown))}")

    out: dict[str, Any] = {}
    for key, value in changes.items():
        if key in ("check_in_time", "check_out_time"):
            out[key] = _parse_instant(value, key)
        elif key == "status":
            out[key] = require_enum(AttendanceStatus, value, "status")
        elif key in ("working_hours", "overtime_hours"):
            out[key] = round2(require_decimal(value, key)) if value is not None else None
        elif key == "location":
            out[key] = parse_location(value)
        else:
            out[key] = value
    return out


def derive_hours(
    record: AttendanceRecord, fields: Mapping[str, Any], calculator: WorkingHoursCalculator
) -> dict[str, Any]:
    """Apply the hours rule to a patch against the current record.

    Hours are derived from the merged check-in/check-out pair whenever both
    exist; caller-supplied hours are only kept while the pair is incomplete.
    """
    out = dict(fields)
    touched = "check_in_time" in fields or "check_out_time" in fields
    check_in = fields.get("check_in_time", record.check_in_time)
    check_out = fields.get("check_out_time", record.check_out_time)

    for name in ("check_in_time", "check_out_time"):
        instant = fields.get(name)
        if instant is not None and instant.date() != record.work_date:
            raise ValidationError(f"{name} must fall on the record's work date ({record.work_date.isoformat()})")

    if check_in is None or check_out is None:
        if touched:
            out.setdefault("working_hours", None)
            out.setdefault("overtime_hours", ZERO)
        return out

    if not touched and "working_hours" not in fields and "overtime_hours" not in fields:
        return out

    if touched:
        if check_out < check_in:
            raise ValidationError("Check-out cannot be earlier than check-in")
        if calculator.remaining_minutes(check_in, check_out) > 0:
            raise PolicyViolationError(
                f"Check-out must be at least {calculator.minimum_shift_minutes} minutes after check-in"
            )

    hours = calculator.worked_hours(check_in, check_out)
    out["working_hours"] = hours.working_hours
    out["overtime_hours"] = hours.overtime_hours
    return out


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeDirectory,
        *,
        calculator: Optional[WorkingHoursCalculator] = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._calculator = calculator or StandardWorkingHoursCalculator()

    def check_in(
        self,
        scope: Scope,
        employee_id: Any,
        *,
        now: Optional[datetime] = None,
        location: Any = None,
    ) -> AttendanceRecord:
        scope.require_hr()
        employee_id = require_int(employee_id, "Employee ID")
        location = parse_location(location)
        now = now or now_local()
        today = day_start(now)

        if not self._employees.find_by_id(employee_id, hr_id=scope.hr_id):
            raise NotFoundError("Employee not found")

        existing = self._attendance.get_for_employee_and_date(employee_id, today, hr_id=scope.hr_id)
        if existing and existing.check_in_time is not None:
            logger.warning("Duplicate check-in employee=%s date=%s", employee_id, today)
            raise ConflictError("Already checked in for today")

        if existing:
            ok = self._attendance.record_checkin(
                attendance_id=existing.attendance_id,
                check_in_time=now,
                status=AttendanceStatus.PRESENT,
                location=location,
            )
            if not ok:
                raise ConflictError("Already checked in for today")
            attendance_id = existing.attendance_id
        else:
            attendance_id = self._attendance.create_checkin(
                employee_id=employee_id,
                hr_id=scope.hr_id,
                work_date=today,
                check_in_time=now,
                status=AttendanceStatus.PRESENT,
                location=location,
            )

        logger.info("Checked in employee=%s date=%s attendance=%s", employee_id, today, attendance_id)
        return self._require(scope, attendance_id)

    def check_out(self, scope: Scope, employee_id: Any, *, now: Optional[datetime] = None) -> AttendanceRecord:
        scope.require_hr()
        employee_id = require_int(employee_id, "Employee ID")
        now = now or now_local()
        today = day_start(now)

        record = self._attendance.get_for_employee_and_date(employee_id, today, hr_id=scope.hr_id)
        if not record or record.check_in_time is None:
            raise NotFoundError("No check-in found for today")
        if record.check_out_time is not None:
            raise ConflictError("Already checked out for today")

        remaining = self._calculator.remaining_minutes(record.check_in_time, now)
        if remaining > 0:
            logger.warning("Early check-out employee=%s remaining=%s min", employee_id, remaining)
            raise PolicyViolationError(
                f"You must work for at least {self._calculator.minimum_shift_minutes} minutes before "
                f"checking out. Please wait {remaining} more minute(s)."
            )

        hours = self._calculator.worked_hours(record.check_in_time, now)
        ok = self._attendance.update_checkout(
            attendance_id=record.attendance_id,
            check_out_time=now,
            working_hours=hours.working_hours,
            overtime_hours=hours.overtime_hours,
        )
        if not ok:
            raise ConflictError("Already checked out for today")

        logger.info(
            "Checked out employee=%s date=%s hours=%s overtime=%s",
            employee_id,
            today,
            hours.working_hours,
            hours.overtime_hours,
        )
        return self._require(scope, record.attendance_id)

    def manual_edit(self, scope: Scope, attendance_id: Any, changes: Mapping[str, Any]) -> AttendanceRecord:
        scope.require_hr()
        record = self._require(scope, require_int(attendance_id, "Attendance ID"))
        fields = derive_hours(record, clean_changes(changes), self._calculator)
        if fields:
            self._attendance.update_fields(record.attendance_id, hr_id=scope.hr_id, fields=fields)
            logger.info("Attendance %s edited fields=%s", record.attendance_id, sorted(fields))
        return self._require(scope, record.attendance_id)

    def get(self, scope: Scope, attendance_id: Any) -> AttendanceRecord:
        scope.require_hr()
        return self._require(scope, require_int(attendance_id, "Attendance ID"))

    def delete(self, scope: Scope, attendance_id: Any) -> AttendanceRecord:
        scope.require_hr()
        record = self._require(scope, require_int(attendance_id, "Attendance ID"))
        if not self._attendance.delete(record.attendance_id, hr_id=scope.hr_id):
            raise NotFoundError("Attendance record not found")
        logger.info("Attendance %s deleted", record.attendance_id)
        return record

    def statistics(
        self,
        scope: Scope,
        *,
        employee_id: Any = None,
        month: Any = None,
        year: Any = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> AttendanceStatistics:
        scope.require_hr()
        if employee_id is not None:
            employee_id = require_int(employee_id, "Employee ID")
        if (month is None) != (year is None):
            raise ValidationError("month and year must be provided together")
        if month is not None:
            start_date, end_date = month_bounds(require_month(month), require_year(year))

        counts = self._attendance.count_by_status(
            hr_id=scope.hr_id, employee_id=employee_id, start_date=start_date, end_date=end_date
        )
        records = self._attendance.list_records(
            hr_id=scope.hr_id, employee_id=employee_id, start_date=start_date, end_date=end_date
        )
        return AttendanceStatistics(
            total_records=sum(counts.values()),
            present=counts.get(AttendanceStatus.PRESENT, 0),
            absent=counts.get(AttendanceStatus.ABSENT, 0),
            late=counts.get(AttendanceStatus.LATE, 0),
            half_day=counts.get(AttendanceStatus.HALF_DAY, 0),
            holiday=counts.get(AttendanceStatus.HOLIDAY, 0),
            leave=counts.get(AttendanceStatus.LEAVE, 0),
            total_working_hours=sum2(r.working_hours for r in records),
            total_overtime_hours=sum2(r.overtime_hours for r in records),
        )

    def _require(self, scope: Scope, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(attendance_id, hr_id=scope.hr_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        return record
