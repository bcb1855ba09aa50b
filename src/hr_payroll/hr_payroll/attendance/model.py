from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class Location:
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance record per (employee, calendar day)."""

    attendance_id: int
    employee_id: int
    hr_id: int
    work_date: date
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    status: AttendanceStatus = AttendanceStatus.ABSENT
    working_hours: Optional[Decimal] = None
    overtime_hours: Decimal = Decimal("0.00")
    note: Optional[str] = None
    location: Optional[Location] = None


@dataclass(frozen=True)
class AttendanceStatistics:
    """Read model for period rollups."""

    total_records: int
    present: int
    absent: int
    late: int
    half_day: int
    holiday: int
    leave: int
    total_working_hours: Decimal
    total_overtime_hours: Decimal
