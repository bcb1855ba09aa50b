from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import EmploymentStatus
from .model import Employee


class EmployeeDirectory(Protocol):
    """Employee lookup collaborator.

    Services depend on this interface, never on a concrete store.
    """

    def find_by_id(self, employee_id: int, *, hr_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def set_employment_status(self, employee_id: int, status: EmploymentStatus) -> bool:
        raise NotImplementedError

    def count_by_status(self, *, hr_id: int) -> dict[EmploymentStatus, int]:
        raise NotImplementedError
