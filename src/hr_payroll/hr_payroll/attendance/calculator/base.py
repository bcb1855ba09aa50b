from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class WorkedHours:
    working_hours: Decimal
    overtime_hours: Decimal


class WorkingHoursCalculator(ABC):
    """Calculator interface (Strategy Pattern for working time)."""

    minimum_shift_minutes: int

    @abstractmethod
    def worked_hours(self, check_in: datetime, check_out: datetime) -> WorkedHours:
        raise NotImplementedError

    @abstractmethod
    def remaining_minutes(self, check_in: datetime, check_out: datetime) -> int:
        """Whole minutes still required before ``check_out`` is allowed; 0 when allowed."""
        raise NotImplementedError
