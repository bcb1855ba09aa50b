"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

STANDARD_SHIFT_HOURS = Decimal("8")
MINIMUM_SHIFT_MINUTES = 30

DAYS_PER_MONTH = Decimal("30")
OVERTIME_MULTIPLIER = Decimal("1.5")
TAX_RATE = Decimal("0.10")
PROVIDENT_FUND_RATE = Decimal("0.12")

DEFAULT_PAYMENT_METHOD = "Bank Transfer"
DEFAULT_REJECTION_REASON = "No reason provided"

SUMMARY_ATTENDANCE_DAYS = 30
SUMMARY_PAYROLL_LIMIT = 6
