"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TOKEN_MAX_AGE_SECONDS = 7 * 24 * 3600
DEFAULT_HISTORY_LIMIT = 100
DEFAULT_ADMIN_LIST_LIMIT = 500

MIN_PASSWORD_LENGTH = 6
MIN_APPLICANT_AGE = 18
DEFAULT_POSITION = "Not specified"

EARTH_RADIUS_METERS = 6371e3
DEFAULT_ALLOWED_RADIUS_METERS = 100

# Fallback when a completed job has no usable timing data.
DEFAULT_JOB_HOURS = 8.0

# Upper bound for any caller-supplied list limit.
MAX_LIST_LIMIT = 1000

# Standby (waiting on site through no fault of the crew) is billed hourly with a one hour minimum.
STANDBY_HOURLY_RATE = 189.00
STANDBY_MINIMUM_HOURS = 1.0
STANDBY_POLICY_VERSION = "v1.0"

DEFAULT_USAGE_LIMIT = 100
