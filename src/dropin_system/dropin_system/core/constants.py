"""Constants and defaults."""

DEFAULT_PAGE_SIZE = 20
QUEUE_REFRESH_SECONDS = 5

MAX_TEXT_LENGTH = 255
MAX_OBSERVATION_LENGTH = 250

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M:%S"
DISPLAY_DATE_FORMAT = "%d %b %Y"
