"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

MIN_CLASS = 1
MAX_CLASS = 10

TRAILING_WINDOW_DAYS = 7

DEFAULT_HISTORY_LIMIT = 50
DEFAULT_STUDENT_PAGE_LIMIT = 10
DEFAULT_TEACHER_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 500

DEFAULT_TEACHER_CHECKIN_CUTOFF = time(9, 30)
