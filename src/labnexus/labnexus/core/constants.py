"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_AUDIT_LIMIT = 100
DEFAULT_NOTIFICATION_LIMIT = 20

MAX_IMAGE_BYTES = 800 * 1024
MAX_CERT_BYTES = 1024 * 1024
MAX_AVATAR_BYTES = 500 * 1024

MIN_PASSWORD_LENGTH = 4

CATEGORIES_SETTING_ID = "categories"
UNKNOWN_USER_NAME = "Unknown User"
DATABASE_TARGET_ID = "DATABASE"

SCHEMA_VERSION = 2
