"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TOKEN_DAYS = 30
DEFAULT_HISTORY_LIMIT = 30
DEFAULT_ADMIN_ATTENDANCE_LIMIT = 100
DEFAULT_STATS_DAYS = 30
DEFAULT_PAGE_SIZE = 20
EXPIRING_SOON_DAYS = 7
MIN_PASSWORD_LENGTH = 6
DEFAULT_CURRENCY = "INR"

# Transformation submissions
MAX_IMAGE_CHARS = 10 * 1024 * 1024
MAX_STORY_CHARS = 5000
