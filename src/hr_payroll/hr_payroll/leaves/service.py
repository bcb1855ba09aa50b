from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import day_count, now_local, overlap_days, parse_iso_date, year_bounds
from ..common.validators import require_enum, require_int, require_non_empty, require_year
from ..core.constants import DEFAULT_REJECTION_REASON
from ..core.enums import EmploymentStatus, LeaveStatus, LeaveType
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..core.scope import Scope
from ..employees.repository import EmployeeDirectory
from .model import LeaveRequest, LeaveStatistics
from .repository import LeaveRepository

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = frozenset({"leave_type", "start_date", "end_date", "reason", "rejection_reason"})


def _as_date(value: Any, field_name: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        return parse_iso_date(value.strip())
    raise ValidationError(f"{field_name} is required")


def leave_days(start_date: date, end_date: date) -> int:
    """Inclusive day count of a leave interval; rejects end before start."""
    total = day_count(start_date, end_date)
    if total <= 0:
        raise ValidationError("End date must be on or after start date")
    return total


class LeaveService:
    def __init__(self, leaves: LeaveRepository, employees: EmployeeDirectory):
        self._leaves = leaves
        self._employees = employees

    def apply(
        self,
        scope: Scope,
        employee_id: Any,
        leave_type: Any,
        start_date: Any,
        end_date: Any,
        reason: Optional[str],
        *,
        now: Optional[datetime] = None,
    ) -> LeaveRequest:
        scope.require_hr()
        if any(v is None or v == "" for v in (employee_id, leave_type, start_date, end_date, reason)):
            raise ValidationError("All fields are required")

        employee_id = require_int(employee_id, "Employee ID")
        leave_type = require_enum(LeaveType, leave_type, "leave_type")
        start = _as_date(start_date, "start_date")
        end = _as_date(end_date, "end_date")
        reason = require_non_empty(reason, "reason")
        total_days = leave_days(start, end)

        if not self._employees.find_by_id(employee_id, hr_id=scope.hr_id):
            raise NotFoundError("Employee not found")

        request_id = self._leaves.create(
            employee_id=employee_id,
            hr_id=scope.hr_id,
            leave_type=leave_type,
            start_date=start,
            end_date=end,
            total_days=total_days,
            reason=reason,
            applied_at=now or now_local(),
        )
        logger.info("Leave %s applied employee=%s days=%s", request_id, employee_id, total_days)
        return self._require(scope, request_id)

    def approve(
        self,
        scope: Scope,
        request_id: Any,
        approver_id: Any = None,
        *,
        now: Optional[datetime] = None,
    ) -> LeaveRequest:
        scope.require_hr()
        now = now or now_local()
        leave = self._decide(
            scope,
            request_id,
            status=LeaveStatus.APPROVED,
            decided_by=require_int(approver_id, "approver_id") if approver_id is not None else scope.hr_id,
            decided_at=now,
        )

        if leave.is_active_on(now.date()):
            self._employees.set_employment_status(leave.employee_id, EmploymentStatus.ON_LEAVE)
            logger.info("Employee %s marked On Leave by leave %s", leave.employee_id, leave.request_id)
        return leave

    def reject(
        self,
        scope: Scope,
        request_id: Any,
        approver_id: Any = None,
        reason: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> LeaveRequest:
        scope.require_hr()
        return self._decide(
            scope,
            request_id,
            status=LeaveStatus.REJECTED,
            decided_by=require_int(approver_id, "approver_id") if approver_id is not None else scope.hr_id,
            decided_at=now or now_local(),
            rejection_reason=(reason or "").strip() or DEFAULT_REJECTION_REASON,
        )

    def cancel(self, scope: Scope, request_id: Any) -> LeaveRequest:
        scope.require_hr()
        return self._decide(scope, request_id, status=LeaveStatus.CANCELLED)

    def update(self, scope: Scope, request_id: Any, changes: Mapping[str, Any]) -> LeaveRequest:
        """Free-form edit; status only moves through approve/reject/cancel."""
        scope.require_hr()
        leave = self._require(scope, require_int(request_id, "Leave ID"))

        if "status" in changes:
            raise ValidationError("Leave status can only be changed through approve, reject or cancel")
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unsupported field(s): {', '.join(sorted(unknown))}")

        fields: dict[str, Any] = {}
        for key, value in changes.items():
            if key == "leave_type":
                fields[key] = require_enum(LeaveType, value, "leave_type")
            elif key in ("start_date", "end_date"):
                fields[key] = _as_date(value, key)
            elif key == "reason":
                fields[key] = require_non_empty(value, "reason")
            else:
                fields[key] = value

        if "start_date" in fields or "end_date" in fields:
            fields["total_days"] = leave_days(
                fields.get("start_date", leave.start_date),
                fields.get("end_date", leave.end_date),
            )

        if fields:
            self._leaves.update_fields(leave.request_id, hr_id=scope.hr_id, fields=fields)
            logger.info("Leave %s updated fields=%s", leave.request_id, sorted(fields))
        return self._require(scope, leave.request_id)

    def get(self, scope: Scope, request_id: Any) -> LeaveRequest:
        scope.require_hr()
        return self._require(scope, require_int(request_id, "Leave ID"))

    def delete(self, scope: Scope, request_id: Any) -> LeaveRequest:
        scope.require_hr()
        leave = self._require(scope, require_int(request_id, "Leave ID"))
        if not self._leaves.delete(leave.request_id, hr_id=scope.hr_id):
            raise NotFoundError("Leave not found")
        logger.info("Leave %s deleted", leave.request_id)
        return leave

    def approved_days_overlapping(self, scope: Scope, employee_id: int, period_start: date, period_end: date) -> int:
        """Approved leave days that fall inside [period_start, period_end]."""
        leaves = self._leaves.list_overlapping(
            hr_id=scope.hr_id,
            employee_id=int(employee_id),
            status=LeaveStatus.APPROVED,
            period_start=period_start,
            period_end=period_end,
        )
        return sum(overlap_days(lv.start_date, lv.end_date, period_start, period_end) for lv in leaves)

    def statistics(self, scope: Scope, *, employee_id: Any = None, year: Any = None) -> LeaveStatistics:
        scope.require_hr()
        if employee_id is not None:
            employee_id = require_int(employee_id, "Employee ID")
        start_from = start_to = None
        if year is not None:
            start_from, start_to = year_bounds(require_year(year))

        counts = self._leaves.count_by_status(
            hr_id=scope.hr_id, employee_id=employee_id, start_from=start_from, start_to=start_to
        )
        approved = self._leaves.list_requests(
            hr_id=scope.hr_id,
            employee_id=employee_id,
            status=LeaveStatus.APPROVED,
            start_from=start_from,
            start_to=start_to,
        )
        return LeaveStatistics(
            total=sum(counts.values()),
            pending=counts.get(LeaveStatus.PENDING, 0),
            approved=counts.get(LeaveStatus.APPROVED, 0),
            rejected=counts.get(LeaveStatus.REJECTED, 0),
            cancelled=counts.get(LeaveStatus.CANCELLED, 0),
            total_leave_days=sum(lv.total_days for lv in approved),
        )

    def _decide(
        self,
        scope: Scope,
        request_id: Any,
        *,
        status: LeaveStatus,
        decided_by: Optional[int] = None,
        decided_at: Optional[datetime] = None,
        rejection_reason: Optional[str] = None,
    ) -> LeaveRequest:
        leave = self._require(scope, require_int(request_id, "Leave ID"))
        if leave.status != LeaveStatus.PENDING:
            logger.warning("Leave %s already %s, cannot mark %s", leave.request_id, leave.status.value, status.value)
            raise ConflictError("Leave request already processed")

        ok = self._leaves.decide(
            leave.request_id,
            hr_id=scope.hr_id,
            status=status,
            decided_by=decided_by,
            decided_at=decided_at,
            rejection_reason=rejection_reason,
        )
        if not ok:
            raise ConflictError("Leave request already processed")

        logger.info("Leave %s -> %s by %s", leave.request_id, status.value, decided_by)
        return self._require(scope, leave.request_id)

    def _require(self, scope: Scope, request_id: int) -> LeaveRequest:
        leave = self._leaves.get_by_id(request_id, hr_id=scope.hr_id)
        if not leave:
            raise NotFoundError("Leave not found")
        return leave
