"""
Shared constants for sc-tui.
"""

# Story types in cycling order; index 0 is the fallback for unknown types
STORY_TYPES = ("feature", "bug", "chore")

UNKNOWN_STATE_NAME = "Unknown"

# Config
CONFIG_FILENAME = "config.yaml"
LOCAL_CONFIG_FILENAME = "sc-tui.yaml"
DEFAULT_FETCH_LIMIT = 50

# API
DEFAULT_BASE_URL = "https://api.app.shortcut.com/api/v3"
DEFAULT_PAGE_SIZE = 25
DEFAULT_HTTP_TIMEOUT = 30

# Flat list rendering
LINES_PER_LIST_ITEM = 2

# Exit codes
EXIT_SUCCESS = 0
EXIT_USAGE = 2
