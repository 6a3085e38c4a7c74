"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

# date.weekday(): Monday=0 ... Sunday=6
DEFAULT_OFF_DAY = 6
DEFAULT_STANDUP_TIME = time(9, 0)
DEFAULT_STANDUP_DURATION_MINUTES = 15
