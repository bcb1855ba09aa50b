from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, Location


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int, *, hr_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date, *, hr_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

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
        """Insert today's record; raises ``ConflictError`` if (employee, date) exists."""

        raise NotImplementedError

    def record_checkin(
        self,
        *,
        attendance_id: int,
        check_in_time: datetime,
        status: AttendanceStatus,
        location: Optional[Location] = None,
    ) -> bool:
        """Set check-in on an existing record only while it has none."""

        raise NotImplementedError

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        working_hours: Decimal,
        overtime_hours: Decimal,
    ) -> bool:
        """Set check-out only while the record has none."""

        raise NotImplementedError

    def update_fields(self, attendance_id: int, *, hr_id: int, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, attendance_id: int, *, hr_id: int) -> bool:
        raise NotImplementedError

    def list_records(
        self,
        *,
        hr_id: int,
        employee_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def count_by_status(
        self,
        *,
        hr_id: int,
        employee_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> dict[AttendanceStatus, int]:
        raise NotImplementedError
