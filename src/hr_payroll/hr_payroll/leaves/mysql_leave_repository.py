from __future__ import annotations

from datetime import date, datetime
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_params, build_set, build_where, db_cursor, fetchall, fetchone
from .model import LeaveRequest
from .repository import LeaveRepository

_SELECT = """
    SELECT request_id, employee_id, hr_id, leave_type, start_date, end_date, total_days,
           reason, status, approved_by, approved_at, rejection_reason, applied_at
    FROM leave_requests
"""

_COLUMNS = {
    "leave_type": "leave_type",
    "start_date": "start_date",
    "end_date": "end_date",
    "total_days": "total_days",
    "reason": "reason",
    "rejection_reason": "rejection_reason",
}


def _row_to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        hr_id=int(r["hr_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        total_days=int(r["total_days"]),
        reason=r["reason"],
        status=LeaveStatus(r["status"]),
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
        rejection_reason=r.get("rejection_reason"),
        applied_at=r.get("applied_at"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, request_id: int, *, hr_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE request_id=%s AND hr_id=%s", (int(request_id), int(hr_id)))
            r = fetchone(cur)
            return _row_to_request(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(
                    employee_id, hr_id, leave_type, start_date, end_date, total_days, reason, status, applied_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    int(hr_id),
                    leave_type.value,
                    start_date,
                    end_date,
                    int(total_days),
                    reason,
                    LeaveStatus.PENDING.value,
                    applied_at,
                ),
            )
            return int(cur.lastrowid)

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, approved_by=%s, approved_at=%s, rejection_reason=%s
                WHERE request_id=%s AND hr_id=%s AND status=%s
                """,
                (
                    status.value,
                    decided_by,
                    decided_at,
                    rejection_reason,
                    int(request_id),
                    int(hr_id),
                    LeaveStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def update_fields(self, request_id: int, *, hr_id: int, fields: Mapping[str, Any]) -> bool:
        set_sql, params = build_set(fields, _COLUMNS)
        if not set_sql:
            return True
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE leave_requests SET {set_sql} WHERE request_id=%s AND hr_id=%s",
                tuple(params + [int(request_id), int(hr_id)]),
            )
            return cur.rowcount >= 0

    def delete(self, request_id: int, *, hr_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leave_requests WHERE request_id=%s AND hr_id=%s", (int(request_id), int(hr_id)))
            return cur.rowcount > 0

    def list_requests(
        self,
        *,
        hr_id: int,
        employee_id: Optional[int] = None,
        status: Optional[LeaveStatus] = None,
        start_from: Optional[date] = None,
        start_to: Optional[date] = None,
    ) -> Sequence[LeaveRequest]:
        where, params = build_where(
            [
                ("hr_id=%s", int(hr_id)),
                ("employee_id=%s", employee_id),
                ("status=%s", status),
                ("start_date>=%s", start_from),
                ("start_date<=%s", start_to),
            ]
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + f" WHERE {where} ORDER BY applied_at DESC", as_params(params))
            return [_row_to_request(r) for r in fetchall(cur)]

    def list_overlapping(
        self,
        *,
        hr_id: int,
        employee_id: int,
        status: LeaveStatus,
        period_start: date,
        period_end: date,
    ) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + """
                WHERE hr_id=%s AND employee_id=%s AND status=%s
                  AND start_date<=%s AND end_date>=%s
                ORDER BY start_date
                """,
                (int(hr_id), int(employee_id), status.value, period_end, period_start),
            )
            return [_row_to_request(r) for r in fetchall(cur)]

    def count_by_status(
        self,
        *,
        hr_id: int,
        employee_id: Optional[int] = None,
        start_from: Optional[date] = None,
        start_to: Optional[date] = None,
    ) -> dict[LeaveStatus, int]:
        where, params = build_where(
            [
                ("hr_id=%s", int(hr_id)),
                ("employee_id=%s", employee_id),
                ("start_date>=%s", start_from),
                ("start_date<=%s", start_to),
            ]
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT status, COUNT(*) AS n FROM leave_requests WHERE {where} GROUP BY status",
                as_params(params),
            )
            return {LeaveStatus(r["status"]): int(r["n"]) for r in fetchall(cur)}
