"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

STANDARD_WORKDAY_HOURS = Decimal("8")
OVERTIME_MULTIPLIER = Decimal("1.5")
ABSENCE_DEDUCTION_RATE = Decimal("0.1")
HALF_DAY_WEIGHT = Decimal("0.5")

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

DEFAULT_TOKEN_TTL_SECONDS = 7 * 24 * 3600
DEFAULT_LATE_GRACE_MINUTES = 5
