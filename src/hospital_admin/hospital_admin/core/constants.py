"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

REPLY_PREFIX = "Re: "
TIME_FORMAT = "%H:%M"
DATE_FORMAT = "%Y-%m-%d"
