from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..core.enums import EmploymentStatus


@dataclass(frozen=True)
class Employee:
    """Directory read model: the employee fields payroll and leave need.

    ``hr_id`` is the owning HR account; an employee outside the caller's
    scope is treated as not found.
    """

    employee_id: int
    hr_id: int
    first_name: str
    last_name: str
    email: Optional[str] = None
    salary: Optional[Decimal] = None
    employment_status: EmploymentStatus = EmploymentStatus.ACTIVE

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
