"""Data access client.

The uniform façade the services call. One method group per entity, typed
dataclasses in and out; storage records (camelCase dicts) never leave this
module. No business validation happens here.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence

from ..core.constants import DEFAULT_AUDIT_LIMIT, DEFAULT_NOTIFICATION_LIMIT
from ..core.enums import (
    AuditAction,
    Division,
    EquipmentStatus,
    EventType,
    JobCategory,
    JobRequestStatus,
    NotificationType,
    Role,
    UserStatus,
)
from ..core.exceptions import ApiError, StorageError
from ..equipment.model import Equipment
from ..job_requests.model import JobRequest
from ..notifications.model import AuditLog, Notification
from ..schedules.model import CalendarEvent
from ..storage.repository import StorageBackend
from ..users.model import User


@contextmanager
def _api_errors() -> Iterator[None]:
    try:
        yield
    except StorageError as e:
        raise ApiError(e.status, e.message) from e
    except (KeyError, ValueError, TypeError) as e:
        # Malformed record coming back from storage.
        raise ApiError(500, f"malformed record: {e}") from e


def _value(v):
    return v.value if hasattr(v, "value") else v


# -------- record <-> entity --------
def equipment_from_record(r: Dict[str, Any]) -> Equipment:
    return Equipment(
        id=str(r["id"]),
        category=r.get("category") or "",
        brand=r.get("brand") or "",
        division=Division(r["division"]),
        status=EquipmentStatus(r.get("status") or EquipmentStatus.OK.value),
        model=r.get("model") or "",
        serial_number=r.get("serialNumber") or "",
        installation_date=r.get("installationDate") or "",
        location=r.get("location"),
        calibration_measuring_point=r.get("calibrationMeasuringPoint"),
        person_in_charge=r.get("personInCharge"),
        image=r.get("image"),
        calibration_cert=r.get("calibrationCert"),
        verification_cert=r.get("verificationCert"),
    )


def equipment_to_record(e: Equipment) -> Dict[str, Any]:
    return {
        "id": e.id,
        "category": e.category,
        "brand": e.brand,
        "model": e.model,
        "serialNumber": e.serial_number,
        "installationDate": e.installation_date,
        "status": _value(e.status),
        "division": _value(e.division),
        "location": e.location,
        "calibrationMeasuringPoint": e.calibration_measuring_point,
        "personInCharge": e.person_in_charge,
        "image": e.image,
        "calibrationCert": e.calibration_cert,
        "verificationCert": e.verification_cert,
    }


def user_from_record(r: Dict[str, Any]) -> User:
    return User(
        id=str(r["id"]),
        name=r.get("name") or "",
        email=r.get("email") or "",
        role=Role(r["role"]),
        avatar=r.get("avatar"),
        password_hash=r.get("passwordHash"),
        status=UserStatus(r.get("status") or UserStatus.ACTIVE.value),
    )


def user_to_record(u: User) -> Dict[str, Any]:
    return {
        "id": u.id,
        "name": u.name,
        "email": u.email,
        "role": _value(u.role),
        "avatar": u.avatar,
        "passwordHash": u.password_hash,
        "status": _value(u.status),
    }


_USER_FIELDS = {
    "name": "name",
    "email": "email",
    "role": "role",
    "avatar": "avatar",
    "password_hash": "passwordHash",
    "status": "status",
}


def audit_log_from_record(r: Dict[str, Any]) -> AuditLog:
    return AuditLog(
        id=r.get("id"),
        action=AuditAction(r["action"]),
        target_id=r.get("targetId") or "",
        target_name=r.get("targetName") or "",
        user_id=r.get("userId") or "",
        user_name=r.get("userName") or "",
        timestamp=r.get("timestamp") or "",
        details=r.get("details"),
    )


def audit_log_to_record(log: AuditLog) -> Dict[str, Any]:
    return {
        "action": _value(log.action),
        "targetId": log.target_id,
        "targetName": log.target_name,
        "userId": log.user_id,
        "userName": log.user_name,
        "timestamp": log.timestamp,
        "details": log.details,
    }


def notification_from_record(r: Dict[str, Any]) -> Notification:
    return Notification(
        id=r.get("id"),
        title=r.get("title") or "",
        message=r.get("message") or "",
        timestamp=r.get("timestamp") or "",
        type=NotificationType(r.get("type") or NotificationType.SYSTEM.value),
        is_read=bool(r.get("isRead")),
    )


def notification_to_record(n: Notification) -> Dict[str, Any]:
    return {
        "title": n.title,
        "message": n.message,
        "timestamp": n.timestamp,
        "isRead": n.is_read,
        "type": _value(n.type),
    }


def event_from_record(r: Dict[str, Any]) -> CalendarEvent:
    return CalendarEvent(
        id=r.get("id"),
        title=r.get("title") or "",
        description=r.get("description"),
        start_date=r.get("startDate") or "",
        end_date=r.get("endDate") or "",
        type=EventType(r["type"]),
        equipment_id=r.get("equipmentId"),
        created_by=r.get("createdBy") or "",
    )


def event_to_record(ev: CalendarEvent) -> Dict[str, Any]:
    return {
        "title": ev.title,
        "description": ev.description,
        "startDate": ev.start_date,
        "endDate": ev.end_date,
        "type": _value(ev.type),
        "equipmentId": ev.equipment_id,
        "createdBy": ev.created_by,
    }


def job_request_from_record(r: Dict[str, Any]) -> JobRequest:
    category = r.get("category")
    return JobRequest(
        id=r.get("id"),
        title=r.get("title") or "",
        requestor_id=r.get("requestorId") or "",
        requestor_name=r.get("requestorName") or "",
        division=Division(r["division"]),
        description=r.get("description") or "",
        category=JobCategory(category) if category else None,
        requested_at=r.get("requestedAt") or "",
        start_date=r.get("startDate"),
        due_date=r.get("dueDate"),
        assigned_to_id=r.get("assignedToId"),
        status=JobRequestStatus(r.get("status") or JobRequestStatus.REQUESTS.value),
        completion_comment=r.get("completionComment"),
    )


def job_request_to_record(j: JobRequest) -> Dict[str, Any]:
    record = {
        "title": j.title,
        "requestorId": j.requestor_id,
        "requestorName": j.requestor_name,
        "division": _value(j.division),
        "description": j.description,
        "category": _value(j.category) if j.category else None,
        "requestedAt": j.requested_at,
        "startDate": j.start_date,
        "dueDate": j.due_date,
        "assignedToId": j.assigned_to_id,
        "status": _value(j.status),
        "completionComment": j.completion_comment,
    }
    if j.id is not None:
        record["id"] = j.id
    return record


# -------- method groups --------
class EquipmentApi:
    def __init__(self, backend: StorageBackend):
        self._backend = backend

    def list(self, *, limit: Optional[int] = None) -> List[Equipment]:
        with _api_errors():
            return [equipment_from_record(r) for r in self._backend.table("equipment").list(limit=limit)]

    def get(self, equipment_id: str) -> Optional[Equipment]:
        with _api_errors():
            r = self._backend.table("equipment").get(equipment_id)
            return equipment_from_record(r) if r else None

    def add(self, item: Equipment) -> str:
        with _api_errors():
            return str(self._backend.table("equipment").insert(equipment_to_record(item)))

    def put(self, item: Equipment) -> bool:
        with _api_errors():
            return self._backend.table("equipment").replace(equipment_to_record(item))

    def delete(self, equipment_id: str) -> bool:
        with _api_errors():
            return self._backend.table("equipment").delete(equipment_id)

    def bulk_put(self, items: Sequence[Equipment]) -> int:
        with _api_errors():
            return self._backend.table("equipment").bulk_upsert([equipment_to_record(i) for i in items])


class UsersApi:
    def __init__(self, backend: StorageBackend):
        self._backend = backend

    def list(self) -> List[User]:
        with _api_errors():
            return [user_from_record(r) for r in self._backend.table("users").list()]

    def get(self, user_id: str) -> Optional[User]:
        with _api_errors():
            r = self._backend.table("users").get(user_id)
            return user_from_record(r) if r else None

    def add(self, user: User) -> str:
        with _api_errors():
            return str(self._backend.table("users").insert(user_to_record(user)))

    def update(self, user_id: str, **changes: Any) -> bool:
        """Partial update; keyword names follow the User dataclass."""

        unknown = set(changes) - set(_USER_FIELDS)
        if unknown:
            raise ApiError(400, f"unknown user fields: {', '.join(sorted(unknown))}")
        partial = {_USER_FIELDS[k]: _value(v) for k, v in changes.items()}
        with _api_errors():
            return self._backend.table("users").patch(user_id, partial)

    def delete(self, user_id: str) -> bool:
        with _api_errors():
            return self._backend.table("users").delete(user_id)


class AuditLogsApi:
    def __init__(self, backend: StorageBackend):
        self._backend = backend

    def list(self, *, limit: int = DEFAULT_AUDIT_LIMIT) -> List[AuditLog]:
        with _api_errors():
            return [audit_log_from_record(r) for r in self._backend.table("audit_logs").list(limit=limit)]

    def add(self, log: AuditLog) -> int:
        with _api_errors():
            return int(self._backend.table("audit_logs").insert(audit_log_to_record(log)))


class NotificationsApi:
    def __init__(self, backend: StorageBackend):
        self._backend = backend

    def list(self, *, limit: int = DEFAULT_NOTIFICATION_LIMIT) -> List[Notification]:
        with _api_errors():
            return [notification_from_record(r) for r in self._backend.table("notifications").list(limit=limit)]

    def add(self, note: Notification) -> int:
        with _api_errors():
            return int(self._backend.table("notifications").insert(notification_to_record(note)))

    def update(self, notification_id: int, *, is_read: bool) -> bool:
        with _api_errors():
            return self._backend.table("notifications").patch(notification_id, {"isRead": bool(is_read)})

    def delete(self, notification_id: int) -> bool:
        with _api_errors():
            return self._backend.table("notifications").delete(notification_id)


class EventsApi:
    def __init__(self, backend: StorageBackend):
        self._backend = backend

    def list(self) -> List[CalendarEvent]:
        with _api_errors():
            return [event_from_record(r) for r in self._backend.table("events").list()]

    def get(self, event_id: int) -> Optional[CalendarEvent]:
        with _api_errors():
            r = self._backend.table("events").get(event_id)
            return event_from_record(r) if r else None

    def add(self, event: CalendarEvent) -> int:
        with _api_errors():
            return int(self._backend.table("events").insert(event_to_record(event)))

    def delete(self, event_id: int) -> bool:
        with _api_errors():
            return self._backend.table("events").delete(event_id)


class JobRequestsApi:
    def __init__(self, backend: StorageBackend):
        self._backend = backend

    def list(self) -> List[JobRequest]:
        with _api_errors():
            return [job_request_from_record(r) for r in self._backend.table("job_requests").list()]

    def get(self, request_id: int) -> Optional[JobRequest]:
        with _api_errors():
            r = self._backend.table("job_requests").get(request_id)
            return job_request_from_record(r) if r else None

    def add(self, req: JobRequest) -> int:
        record = job_request_to_record(req)
        record.pop("id", None)
        with _api_errors():
            return int(self._backend.table("job_requests").insert(record))

    def put(self, req: JobRequest) -> bool:
        if req.id is None:
            raise ApiError(400, "job request id is required")
        with _api_errors():
            return self._backend.table("job_requests").replace(job_request_to_record(req))

    def update_status(
        self, request_id: int, status: JobRequestStatus, *, completion_comment: Optional[str] = None
    ) -> bool:
        partial = {"status": _value(status), "completionComment": completion_comment}
        with _api_errors():
            return self._backend.table("job_requests").patch(request_id, partial)

    def delete(self, request_id: int) -> bool:
        with _api_errors():
            return self._backend.table("job_requests").delete(request_id)


class SettingsApi:
    def __init__(self, backend: StorageBackend):
        self._backend = backend

    def get(self, setting_id: str) -> Optional[List[str]]:
        with _api_errors():
            r = self._backend.table("settings").get(setting_id)
        if not r:
            return None
        return list(r.get("values") or [])

    def put(self, setting_id: str, values: Sequence[str]) -> None:
        with _api_errors():
            self._backend.table("settings").bulk_upsert([{"id": setting_id, "values": list(values)}])


class DataClient:
    """Façade over one StorageBackend, selected at startup by configuration."""

    def __init__(self, backend: StorageBackend):
        self._backend = backend
        self.equipment = EquipmentApi(backend)
        self.users = UsersApi(backend)
        self.audit_logs = AuditLogsApi(backend)
        self.notifications = NotificationsApi(backend)
        self.events = EventsApi(backend)
        self.job_requests = JobRequestsApi(backend)
        self.settings = SettingsApi(backend)

    def init(self) -> Dict[str, Any]:
        with _api_errors():
            return self._backend.initialize()

    def reset(self) -> Dict[str, Any]:
        with _api_errors():
            return self._backend.initialize(reset=True)
