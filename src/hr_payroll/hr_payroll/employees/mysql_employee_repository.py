from __future__ import annotations

from decimal import Decimal
from typing import Optional

from ..core.enums import EmploymentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeDirectory


class MySQLEmployeeDirectory(EmployeeDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_by_id(self, employee_id: int, *, hr_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employee_id, hr_id, first_name, last_name, email, salary, employment_status
                FROM employees
                WHERE employee_id=%s AND hr_id=%s
                """,
                (int(employee_id), int(hr_id)),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Employee(
                employee_id=int(row["employee_id"]),
                hr_id=int(row["hr_id"]),
                first_name=row["first_name"],
                last_name=row["last_name"],
                email=row.get("email"),
                salary=Decimal(row["salary"]) if row.get("salary") is not None else None,
                employment_status=EmploymentStatus(row["employment_status"]),
            )

    def set_employment_status(self, employee_id: int, status: EmploymentStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET employment_status=%s WHERE employee_id=%s",
                (status.value, int(employee_id)),
            )
            return cur.rowcount > 0

    def count_by_status(self, *, hr_id: int) -> dict[EmploymentStatus, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT employment_status, COUNT(*) AS n
                FROM employees
                WHERE hr_id=%s
                GROUP BY employment_status
                """,
                (int(hr_id),),
            )
            return {EmploymentStatus(r["employment_status"]): int(r["n"]) for r in fetchall(cur)}
