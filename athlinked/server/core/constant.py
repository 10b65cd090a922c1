"""
Application-wide constants.

Values here are fixed at build time; anything deployment specific belongs in
``config.Settings``.
"""

PROJECT_NAME = "AthLinked API"
API_PREFIX = "/api"
API_VERSION = "1.0.0"
SCHEMA_VERSION = "v1"

# Pagination bounds for the clips feed
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

# Network user search
USER_SEARCH_LIMIT = 20

# Placeholder display name when a user has neither full name nor username
DEFAULT_DISPLAY_NAME = "User"

# Member directory
DIRECTORY_LIMIT = 100

# Notification list page size
DEFAULT_NOTIFICATION_LIMIT = 20
MAX_NOTIFICATION_LIMIT = 100
