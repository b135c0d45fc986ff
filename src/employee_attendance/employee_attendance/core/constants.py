"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

NOTES_MAX_LENGTH = 200
DEFAULT_PAGE_NUMBER = 1
DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 100
