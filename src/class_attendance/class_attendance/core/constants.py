"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

ALLOWED_SHIFTS = (1, 2)
MIN_PASSWORD_LENGTH = 6

MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

# Filter value meaning "do not filter on this field".
FILTER_ALL = "all"

MISSING_VALUE = "N/A"
