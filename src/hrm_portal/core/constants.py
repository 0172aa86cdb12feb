"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
DEFAULT_LIST_LIMIT = 200

DEFAULT_JWT_EXPIRATION_HOURS = 24
DEFAULT_WORK_START = "08:30"
DEFAULT_LATE_GRACE_MINUTES = 15

# Leave accounting: sessions split at 13:00 (afternoon) / 12:00 (morning end).
AFTERNOON_START_HOUR = 13
MORNING_END_HOUR = 12
MIN_LEAVE_DAYS = 0.5
MAX_LEAVE_DAYS = 30

MONTHLY_LEAVE_ACCRUAL = 1
NEWS_FRESH_HOURS = 24
MIN_PASSWORD_LENGTH = 6
