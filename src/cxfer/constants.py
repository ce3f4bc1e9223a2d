"""
Global constants for the CXFER CLI.
"""

# Package layout
MANIFEST_FILE_NAME = "manifest.json"
ITEM_FILE_EXTENSION = ".itm"
THUMBNAIL_FILE_EXTENSION = ".png"

# File-backed configuration layout
DATABASE_FILE_NAME = "database.json"
ITEMS_DIR_NAME = "items"
PROFILES_DIR_NAME = "profiles"
GLOBAL_CONFIGURATION_NAME = "Global"
UNKNOWN_CONFIGURATION_NAME = "Unknown"

# Result display limits
WARNING_PREVIEW_LIMIT = 10
ERROR_PREVIEW_LIMIT = 5
DUPLICATE_PREVIEW_LIMIT = 10

# Name matching policies
NAME_MATCHING_EXACT = "exact"
NAME_MATCHING_IGNORE_CASE = "ignore_case"
DEFAULT_NAME_MATCHING = NAME_MATCHING_EXACT

# Logging constants
LOG_APP_NAME = "CXFER"
LOG_FILE_NAME = "cxfer"
LOG_RETENTION_DAYS = 7
LOG_LINES_TO_SHOW = 20
