import os

from .config import (  # noqa: F401
    LOCAL_DB_PATH,
    REMOTE_BASE_URL,
    REQUEST_TIMEOUT,
    STORAGE_BACKEND,
    db_config_from_env,
    env_bool,
)

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = db_config_from_env()

# SQLite behind /data too, so development needs no MySQL server.
SERVER_BACKEND = os.getenv("SERVER_BACKEND", "local")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Create tables and seed an empty database on startup.
AUTO_INIT_DB = env_bool("AUTO_INIT_DB", "1")
