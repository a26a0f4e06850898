from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

import requests

from .api.client import DataClient
from .core.constants import SCHEMA_VERSION
from .database.connection import DatabaseConnection, as_db_config
from .equipment.cache import InventoryCache
from .equipment.categories import CategoryService
from .equipment.service import EquipmentService
from .job_requests.service import JobRequestService
from .notifications.audit import AuditTrail
from .notifications.service import NotificationService
from .schedules.service import ScheduleService
from .storage.remote_backend import RemoteStorageBackend
from .storage.repository import StorageBackend
from .storage.sql_backend import LocalStorageBackend, MySQLStorageBackend
from .system.service import SystemService
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    backend: StorageBackend
    client: DataClient

    audit: AuditTrail
    categories: CategoryService
    cache: InventoryCache

    auth_service: AuthService
    user_service: UserService
    equipment_service: EquipmentService
    schedule_service: ScheduleService
    job_request_service: JobRequestService
    notification_service: NotificationService
    system_service: SystemService


def build_server_backend(config: Mapping[str, Any]) -> StorageBackend:
    """Backend behind the ``/data`` handler: MySQL, or SQLite for development."""

    if str(config.get("SERVER_BACKEND", "mysql")).lower() == "local":
        return LocalStorageBackend(str(config["LOCAL_DB_PATH"]), schema_version=SCHEMA_VERSION)
    conn = DatabaseConnection.get_instance(as_db_config(dict(config.get("DB_CONFIG") or {})))
    return MySQLStorageBackend(conn)


def build_client_backend(
    config: Mapping[str, Any],
    *,
    server_backend: Optional[StorageBackend] = None,
    session: Optional[requests.Session] = None,
) -> StorageBackend:
    """Backend the services talk to, selected by ``STORAGE_BACKEND``."""

    kind = str(config.get("STORAGE_BACKEND", "local")).lower()
    if kind == "remote":
        return RemoteStorageBackend(
            str(config["REMOTE_BASE_URL"]),
            session=session,
            timeout=float(config.get("REQUEST_TIMEOUT", 10)),
        )
    if kind != "local":
        raise ValueError(f"unknown STORAGE_BACKEND {kind!r}")
    if server_backend is not None and isinstance(server_backend, LocalStorageBackend):
        return server_backend
    return LocalStorageBackend(str(config["LOCAL_DB_PATH"]), schema_version=SCHEMA_VERSION)


def build_container(*, backend: StorageBackend) -> Container:
    client = DataClient(backend)

    audit = AuditTrail(client)
    categories = CategoryService(client)
    cache = InventoryCache(client, categories)

    auth_service = AuthService(client)
    user_service = UserService(client, audit)
    equipment_service = EquipmentService(client, audit, categories, cache)
    schedule_service = ScheduleService(client, audit)
    job_request_service = JobRequestService(client, audit)
    notification_service = NotificationService(client)
    system_service = SystemService(client, audit, cache)

    return Container(
        backend=backend,
        client=client,
        audit=audit,
        categories=categories,
        cache=cache,
        auth_service=auth_service,
        user_service=user_service,
        equipment_service=equipment_service,
        schedule_service=schedule_service,
        job_request_service=job_request_service,
        notification_service=notification_service,
        system_service=system_service,
    )
