from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_params, build_set, build_where, db_cursor, fetchall, fetchone, unique_insert
from .model import AttendanceRecord, Location
from .repository import AttendanceRepository

_SELECT = """
    SELECT attendance_id, employee_id, hr_id, work_date, check_in_time, check_out_time,
           status, working_hours, overtime_hours, note,
           location_latitude, location_longitude, location_address
    FROM attendance_records
"""

_COLUMNS = {
    "check_in_time": "check_in_time",
    "check_out_time": "check_out_time",
    "status": "status",
    "working_hours": "working_hours",
    "overtime_hours": "overtime_hours",
    "note": "note",
}


def _row_to_record(r: dict) -> AttendanceRecord:
    location = None
    if any(r.get(k) is not None for k in ("location_latitude", "location_longitude", "location_address")):
        location = Location(
            latitude=float(r["location_latitude"]) if r.get("location_latitude") is not None else None,
            longitude=float(r["location_longitude"]) if r.get("location_longitude") is not None else None,
            address=r.get("location_address"),
        )
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        hr_id=int(r["hr_id"]),
        work_date=r["work_date"],
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        working_hours=Decimal(r["working_hours"]) if r.get("working_hours") is not None else None,
        overtime_hours=Decimal(r.get("overtime_hours") or 0),
        note=r.get("note"),
        location=location,
    )


def _location_params(location: Optional[Location]) -> tuple:
    if location is None:
        return (None, None, None)
    return (location.latitude, location.longitude, location.address)


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int, *, hr_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE attendance_id=%s AND hr_id=%s", (int(attendance_id), int(hr_id)))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def get_for_employee_and_date(self, employee_id: int, work_date: date, *, hr_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE employee_id=%s AND work_date=%s AND hr_id=%s",
                (int(employee_id), work_date, int(hr_id)),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            with unique_insert("Already checked in for today"):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        employee_id, hr_id, work_date, check_in_time, status,
                        location_latitude, location_longitude, location_address
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (int(employee_id), int(hr_id), work_date, check_in_time, status.value) + _location_params(location),
                )
            return int(cur.lastrowid)

    def record_checkin(
        self,
        *,
        attendance_id: int,
        check_in_time: datetime,
        status: AttendanceStatus,
        location: Optional[Location] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in_time=%s, status=%s,
                    location_latitude=COALESCE(%s, location_latitude),
                    location_longitude=COALESCE(%s, location_longitude),
                    location_address=COALESCE(%s, location_address)
                WHERE attendance_id=%s AND check_in_time IS NULL
                """,
                (check_in_time, status.value) + _location_params(location) + (int(attendance_id),),
            )
            return cur.rowcount > 0

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        working_hours: Decimal,
        overtime_hours: Decimal,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, working_hours=%s, overtime_hours=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (check_out_time, working_hours, overtime_hours, int(attendance_id)),
            )
            return cur.rowcount > 0

    def update_fields(self, attendance_id: int, *, hr_id: int, fields: Mapping[str, Any]) -> bool:
        fields = dict(fields)
        extra_sql: list[str] = []
        extra_params: list[Any] = []
        if "location" in fields:
            extra_sql.append("location_latitude=%s, location_longitude=%s, location_address=%s")
            extra_params.extend(_location_params(fields.pop("location")))

        set_sql, params = build_set(fields, _COLUMNS)
        set_sql = ", ".join(p for p in [set_sql] + extra_sql if p)
        if not set_sql:
            return True

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE attendance_records SET {set_sql} WHERE attendance_id=%s AND hr_id=%s",
                tuple(params + extra_params + [int(attendance_id), int(hr_id)]),
            )
            # MySQL reports 0 affected rows when values are unchanged
            return cur.rowcount >= 0

    def delete(self, attendance_id: int, *, hr_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM attendance_records WHERE attendance_id=%s AND hr_id=%s",
                (int(attendance_id), int(hr_id)),
            )
            return cur.rowcount > 0

    def _where(
        self,
        *,
        hr_id: int,
        employee_id: Optional[int],
        start_date: Optional[date],
        end_date: Optional[date],
        status: Optional[AttendanceStatus] = None,
    ):
        return build_where(
            [
                ("hr_id=%s", int(hr_id)),
                ("employee_id=%s", employee_id),
                ("work_date>=%s", start_date),
                ("work_date<=%s", end_date),
                ("status=%s", status),
            ]
        )

    def list_records(
        self,
        *,
        hr_id: int,
        employee_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
    ) -> Sequence[AttendanceRecord]:
        where, params = self._where(
            hr_id=hr_id, employee_id=employee_id, start_date=start_date, end_date=end_date, status=status
        )
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + f" WHERE {where} ORDER BY work_date DESC", as_params(params))
            return [_row_to_record(r) for r in fetchall(cur)]

    def count_by_status(
        self,
        *,
        hr_id: int,
        employee_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> dict[AttendanceStatus, int]:
        where, params = self._where(hr_id=hr_id, employee_id=employee_id, start_date=start_date, end_date=end_date)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT status, COUNT(*) AS n FROM attendance_records WHERE {where} GROUP BY status",
                as_params(params),
            )
            return {AttendanceStatus(r["status"]): int(r["n"]) for r in fetchall(cur)}
