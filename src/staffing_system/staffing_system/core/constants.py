"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Minimum head count per quota role for a shift to be fully staffed.
SHIFT_REQUIREMENTS = {
    "Doctor": 1,
    "Nurse": 2,
    "Technician": 1,
}

STAFF_CODE_DIGITS = 3
STAFF_CODE_ALLOCATION_ATTEMPTS = 5

MAX_ATTENDANCE_REMARKS = 200
MAX_LEAVE_REASON = 500
MAX_LEAVE_REMARKS = 200
MAX_SHIFT_NOTES = 300

LEAVE_DAY_DEFAULT_REMARKS = "Leave applied"
NOT_MARKED = "Not Marked"

WEEKLY_STATS_DAYS = 7
DEFAULT_JWT_EXPIRES_DAYS = 30
