"""Settings shared by every environment module."""

import os


def env_bool(name: str, default: str = "0") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


def db_config_from_env(default_password: str = "") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", default_password),
        "database": os.getenv("DB_NAME", "labnexus"),
    }


# Where the services read and write: "local" (SQLite file) or "remote" (/data handler).
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "local")
LOCAL_DB_PATH = os.getenv("LOCAL_DB_PATH", "instance/labnexus.sqlite3")
REMOTE_BASE_URL = os.getenv("REMOTE_BASE_URL", "http://localhost:5000")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "10"))

# What the /data handler itself stores into: "mysql" or "local".
SERVER_BACKEND = os.getenv("SERVER_BACKEND", "mysql")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
