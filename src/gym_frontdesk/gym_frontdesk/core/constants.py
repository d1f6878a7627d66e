"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_BUSINESS_TIMEZONE = "America/Mexico_City"

VISIT_START_HOUR = 5
VISIT_END_HOUR = 23

REFRESH_INTERVAL_SECONDS = 60
CLOCK_TICK_SECONDS = 1
FEEDBACK_DISMISS_SECONDS = 4
ERROR_CLEAR_SECONDS = 4

DEFAULT_LEADERBOARD_LIMIT = 10
DEFAULT_DAY_ATTENDANCE_LIMIT = 500
IDENTITY_LOOKUP_LIMIT = 20
TOP_RANK_HIGHLIGHT = 5

RENEWAL_DAYS_PER_MONTH = 30
DEFAULT_API_TIMEOUT_SECONDS = 15
