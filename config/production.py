import os

from .config import (  # noqa: F401
    LOCAL_DB_PATH,
    LOG_LEVEL,
    REMOTE_BASE_URL,
    REQUEST_TIMEOUT,
    SERVER_BACKEND,
    STORAGE_BACKEND,
    db_config_from_env,
    env_bool,
)

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = db_config_from_env()

DEBUG = False

AUTO_INIT_DB = env_bool("AUTO_INIT_DB", "0")
