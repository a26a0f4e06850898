from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from ..api.client import DataClient
from ..common.datetime_utils import now_iso
from ..core.enums import AuditAction, NotificationType
from ..core.exceptions import ApiError
from ..users.model import SessionUser
from .model import AuditLog, Notification

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditOutcome:
    """Result of the two secondary writes of one action.

    Failures are reported here and logged; they never undo the action itself.
    """

    audit_id: Optional[int] = None
    notification_id: Optional[int] = None
    audit_error: Optional[str] = None
    notification_error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.audit_error is None and self.notification_error is None


_TYPES: Dict[AuditAction, NotificationType] = {
    AuditAction.CREATE: NotificationType.CREATE,
    AuditAction.UPDATE: NotificationType.UPDATE,
    AuditAction.DELETE: NotificationType.DELETE,
    AuditAction.IMPORT: NotificationType.CREATE,
    AuditAction.RESET: NotificationType.SYSTEM,
}


def describe(action: AuditAction, *, subject: str, actor_name: str, target_name: str) -> Tuple[str, str, NotificationType]:
    """Title, message and type of the notification derived from an audit entry."""

    if action == AuditAction.CREATE:
        return f"New {subject} Added", f"{actor_name} added {target_name}", _TYPES[action]
    if action == AuditAction.UPDATE:
        return f"{subject} Updated", f"{actor_name} updated {target_name}", _TYPES[action]
    if action == AuditAction.DELETE:
        return f"{subject} Deleted", f"{actor_name} deleted {target_name}", _TYPES[action]
    if action == AuditAction.IMPORT:
        return "Bulk Import", "Imported equipment data.", _TYPES[action]
    return "System Reset", "Database reset to factory defaults.", _TYPES[action]


class AuditTrail:
    """Writes one AuditLog entry, then its derived Notification."""

    def __init__(self, client: DataClient, *, clock: Callable[[], str] = now_iso):
        self._client = client
        self._clock = clock

    def record(
        self,
        actor: SessionUser,
        action: AuditAction,
        *,
        target_id: str,
        target_name: str,
        subject: str = "Asset",
        details: Optional[str] = None,
    ) -> AuditOutcome:
        timestamp = self._clock()
        audit_id = notification_id = None
        audit_error = notification_error = None

        try:
            audit_id = self._client.audit_logs.add(
                AuditLog(
                    action=action,
                    target_id=str(target_id),
                    target_name=target_name,
                    user_id=actor.id,
                    user_name=actor.name,
                    timestamp=timestamp,
                    details=details,
                )
            )
        except ApiError as e:
            audit_error = e.message
            logger.exception("audit log write failed: %s %s", action.value, target_id)

        title, message, note_type = describe(action, subject=subject, actor_name=actor.name, target_name=target_name)
        try:
            notification_id = self._client.notifications.add(
                Notification(title=title, message=message, timestamp=timestamp, type=note_type)
            )
        except ApiError as e:
            notification_error = e.message
            logger.exception("notification write failed: %s %s", action.value, target_id)

        return AuditOutcome(
            audit_id=audit_id,
            notification_id=notification_id,
            audit_error=audit_error,
            notification_error=notification_error,
        )
