import os

from .config import REMOTE_BASE_URL, REQUEST_TIMEOUT, db_config_from_env, env_bool  # noqa: F401

SECRET_KEY = "test-secret"

DB_CONFIG = db_config_from_env()

STORAGE_BACKEND = "local"
SERVER_BACKEND = "local"
LOCAL_DB_PATH = os.getenv("LOCAL_DB_PATH", "instance/labnexus-test.sqlite3")

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

AUTO_INIT_DB = env_bool("AUTO_INIT_DB", "1")
