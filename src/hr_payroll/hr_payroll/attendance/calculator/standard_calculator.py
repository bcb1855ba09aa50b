from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from ...common.datetime_utils import hours_between, minutes_between
from ...common.money import ZERO, round2
from ...core.constants import MINIMUM_SHIFT_MINUTES, STANDARD_SHIFT_HOURS
from .base import WorkedHours, WorkingHoursCalculator


class StandardWorkingHoursCalculator(WorkingHoursCalculator):
    """Standard rule: hours = out - in; overtime is anything beyond the shift.

    Both values are rounded half-up to 2 decimals, overtime from the already
    rounded working hours.
    """

    def __init__(
        self,
        *,
        standard_shift_hours: Decimal = STANDARD_SHIFT_HOURS,
        minimum_shift_minutes: int = MINIMUM_SHIFT_MINUTES,
    ):
        self.standard_shift_hours = Decimal(standard_shift_hours)
        self.minimum_shift_minutes = int(minimum_shift_minutes)

    def worked_hours(self, check_in: datetime, check_out: datetime) -> WorkedHours:
        working = round2(hours_between(check_in, check_out))
        overtime = round2(max(ZERO, working - self.standard_shift_hours))
        return WorkedHours(working_hours=working, overtime_hours=overtime)

    def remaining_minutes(self, check_in: datetime, check_out: datetime) -> int:
        elapsed = minutes_between(check_in, check_out)
        return max(0, self.minimum_shift_minutes - elapsed)
