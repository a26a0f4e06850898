from __future__ import annotations

import importlib
import logging
from typing import Any, Mapping, Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .api.data_controller import register as register_data
from .container import build_client_backend, build_container, build_server_backend
from .core.exceptions import StorageError
from .equipment.controller import register as register_equipment
from .job_requests.controller import register as register_job_requests
from .notifications.controller import register as register_notifications
from .schedules.controller import register as register_schedules
from .system.controller import register as register_system
from .users.controller import register as register_users

logger = logging.getLogger(__name__)

SETTING_NAMES = (
    "SECRET_KEY",
    "DEBUG",
    "TESTING",
    "LOG_LEVEL",
    "STORAGE_BACKEND",
    "LOCAL_DB_PATH",
    "REMOTE_BASE_URL",
    "REQUEST_TIMEOUT",
    "SERVER_BACKEND",
    "DB_CONFIG",
    "AUTO_INIT_DB",
)


def load_settings(overrides: Optional[Mapping[str, Any]] = None) -> dict:
    """Settings module picked by APP_ENV, then explicit overrides on top."""

    load_dotenv(override=False)
    module = importlib.import_module(get_settings_module())
    settings = {name: getattr(module, name) for name in SETTING_NAMES if hasattr(module, name)}
    settings.update(overrides or {})
    return settings


def create_app(settings: Optional[Mapping[str, Any]] = None, *, session=None) -> Flask:
    app = Flask(__name__)

    config = load_settings(settings)
    app.config.update(config)
    app.secret_key = config.get("SECRET_KEY")

    logging.basicConfig(
        level=str(config.get("LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    server_backend = build_server_backend(config)
    register_data(app, server_backend)

    backend = build_client_backend(config, server_backend=server_backend, session=session)
    container = build_container(backend=backend)
    app.extensions["labnexus"] = container

    if config.get("AUTO_INIT_DB"):
        try:
            result = server_backend.initialize()
        except StorageError:
            logger.exception("database initialization failed")
            raise
        logger.info("database ready (seeded=%s)", result.get("seeded"))

    register_users(app, container)
    register_equipment(app, container)
    register_schedules(app, container)
    register_job_requests(app, container)
    register_notifications(app, container)
    register_system(app, container)

    return app
