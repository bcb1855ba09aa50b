from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def get_by_id(self, request_id: int, *, hr_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: int,
        hr_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        total_days: int,
        reason: str,
        applied_at: datetime,
    ) -> int:
        raise NotImplementedError

    def decide(
        self,
        request_id: int,
        *,
        hr_id: int,
        status: LeaveStatus,
        decided_by: Optional[int] = None,
        decided_at: Optional[datetime] = None,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        """Move a request out of PENDING; False if it is no longer pending."""

        raise NotImplementedError

    def update_fields(self, request_id: int, *, hr_id: int, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete(self, request_id: int, *, hr_id: int) -> bool:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        hr_id: int,
        employee_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        start_from: Optional[date] = None,
        start_to: Optional[date] = None,
    ) -> Sequence[LeaveRequest]:
        """Requests whose start_date falls within [start_from, start_to]."""

        raise NotImplementedError

    def list_overlapping(
        self,
        *,
        hr_id: int,
        employee_id: int,
        status: LeaveStatus,
        period_start: date,
        period_end: date,
    ) -> Sequence[LeaveRequest]:
        """Requests whose [start_date, end_date] intersects the period."""

        raise NotImplementedError

    def count_by_status(
        self,
        *,
        hr_id: int,
        employee_id: Optional[int] = None,
        start_from: Optional[date] = None,
        start_to: Optional[date] = None,
    ) -> dict[LeaveStatus, int]:
        raise NotImplementedError
