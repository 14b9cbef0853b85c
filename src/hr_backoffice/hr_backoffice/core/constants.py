"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

DEFAULT_LATE_GRACE_MINUTES = 5
DEFAULT_OTP_TTL_SECONDS = 5 * 60
DEFAULT_QUEUE_LIMIT = 500

# Payroll proration always uses a 30-day month, whatever the calendar says.
PRORATION_BASE_DAYS = Decimal(30)
HALF_DAY_WEIGHT = Decimal("0.5")
WORK_HOURS_PER_DAY = Decimal(8)

EPF_RATE = Decimal("0.12")
ESIC_RATE = Decimal("0.0075")
