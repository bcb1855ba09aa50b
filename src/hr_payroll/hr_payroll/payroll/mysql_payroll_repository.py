from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import PaymentMethod, PayrollStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_params, build_set, build_where, db_cursor, fetchall, fetchone, unique_insert
from .calculator.base import DEDUCTION_FIELDS, EARNING_FIELDS, PayrollBreakdown
from .model import PayrollStatement
from .repository import PayrollRepository

_MONEY_COLUMNS = ("basic_salary",) + EARNING_FIELDS + ("total_earnings",) + DEDUCTION_FIELDS + (
    "total_deductions",
    "net_salary",
)

_SELECT = f"""
    SELECT payroll_id, employee_id, hr_id, month, year,
           {", ".join(_MONEY_COLUMNS)},
           present_days, leave_days, overtime_hours,
           status, paid_date, payment_method, transaction_id, notes
    FROM payroll_statements
"""

_COLUMNS = {name: name for name in _MONEY_COLUMNS}
_COLUMNS.update({"status": "status", "notes": "notes"})


def _row_to_statement(r: dict) -> PayrollStatement:
    money = {name: Decimal(r[name] if r.get(name) is not None else 0) for name in _MONEY_COLUMNS}
    return PayrollStatement(
        payroll_id=int(r["payroll_id"]),
        employee_id=int(r["employee_id"]),
        hr_id=int(r["hr_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        present_days=int(r.get("present_days") or 0),
        leave_days=int(r.get("leave_days") or 0),
        overtime_hours=Decimal(r.get("overtime_hours") or 0),
        status=PayrollStatus(r["status"]),
        paid_date=r.get("paid_date"),
        payment_method=PaymentMethod(r["payment_method"]) if r.get("payment_method") else None,
        transaction_id=r.get("transaction_id"),
        notes=r.get("notes"),
        **money,
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, payroll_id: int, *, hr_id: int) -> Optional[PayrollStatement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE payroll_id=%s AND hr_id=%s", (int(payroll_id), int(hr_id)))
            r = fetchone(cur)
            return _row_to_statement(r) if r else None

    def get_for_period(self, employee_id: int, month: int, year: int, *, hr_id: int) -> Optional[PayrollStatement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE employee_id=%s AND month=%s AND year=%s AND hr_id=%s",
                (int(employee_id), int(month), int(year), int(hr_id)),
            )
            r = fetchone(cur)
            return _row_to_statement(r) if r else None

    def create(
        self,
        *,
        employee_id: int,
        hr_id: int,
        month: int,
        year: int,
        breakdown: PayrollBreakdown,
        present_days: int,
        leave_days: int,
        overtime_hours: Decimal,
        status: PayrollStatus,
    ) -> int:
        columns = ("employee_id", "hr_id", "month", "year") + _MONEY_COLUMNS + (
            "present_days",
            "leave_days",
            "overtime_hours",
            "status",
        )
        values = (
            (int(employee_id), int(hr_id), int(month), int(year))
            + tuple(getattr(breakdown, name) for name in _MONEY_COLUMNS)
            + (int(present_days), int(leave_days), overtime_hours, status.value)
        )
        placeholders = ",".join(["%s"] * len(columns))

        with db_cursor(self._conn_factory) as (_, cur):
            with unique_insert("Payroll already generated for this month"):
                cur.execute(
                    f"INSERT INTO payroll_statements({', '.join(columns)}) VALUES({placeholders})",
                    values,
                )
            return int(cur.lastrowid)

    def mark_paid(
        self,
        payroll_id: int,
        *,
        hr_id: int,
        paid_date: datetime,
        payment_method: PaymentMethod,
        transaction_id: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payroll_statements
                SET status=%s, paid_date=%s, payment_method=%s, transaction_id=%s
                WHERE payroll_id=%s AND hr_id=%s AND status IN (%s, %s)
                """,
                (
                    PayrollStatus.PAID.value,
                    paid_date,
                    payment_method.value,
                    transaction_id,
                    int(payroll_id),
                    int(hr_id),
                    PayrollStatus.DRAFT.value,
                    PayrollStatus.GENERATED.value,
                ),
            )
            return cur.rowcount > 0

    def update_fields(self, payroll_id: int, *, hr_id: int, fields: Mapping[str, Any]) -> bool:
        set_sql, params = build_set(fields, _COLUMNS)
        if not set_sql:
            return True
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE payroll_statements SET {set_sql} WHERE payroll_id=%s AND hr_id=%s AND status<>%s",
                tuple(params + [int(payroll_id), int(hr_id), PayrollStatus.PAID.value]),
            )
            return cur.rowcount >= 0

    def delete(self, payroll_id: int, *, hr_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM payroll_statements WHERE payroll_id=%s AND hr_id=%s",
                (int(payroll_id), int(hr_id)),
            )
            return cur.rowcount > 0

    def list_statements(
        self,
        *,
        hr_id: int,
        employee_id: Optional[int] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        status: Optional[PayrollStatus] = None,
        limit: Optional[int] = None,
    ) -> Sequence[PayrollStatement]:
        where, params = build_where(
            [
                ("hr_id=%s", int(hr_id)),
                ("employee_id=%s", employee_id),
                ("month=%s", month),
                ("year=%s", year),
                ("status=%s", status),
            ]
        )
        sql = _SELECT + f" WHERE {where} ORDER BY year DESC, month DESC"
        if limit is not None:
            sql += " LIMIT %s"
            params.append(int(limit))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, as_params(params))
            return [_row_to_statement(r) for r in fetchall(cur)]

    def count_by_status(
        self,
        *,
        hr_id: int,
        month: Optional[int] = None,
        year: Optional[int] = None,
    ) -> dict[PayrollStatus, int]:
        where, params = build_where([("hr_id=%s", int(hr_id)), ("month=%s", month), ("year=%s", year)])
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT status, COUNT(*) AS n FROM payroll_statements WHERE {where} GROUP BY status",
                as_params(params),
            )
            return {PayrollStatus(r["status"]): int(r["n"]) for r in fetchall(cur)}
