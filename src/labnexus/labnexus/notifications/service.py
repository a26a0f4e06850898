from __future__ import annotations

from typing import List

from ..api.client import DataClient
from ..core.constants import DEFAULT_AUDIT_LIMIT, DEFAULT_NOTIFICATION_LIMIT
from ..core.enums import AUDIT_VIEW_ROLES
from ..core.exceptions import AuthorizationError, NotFoundError
from ..users.model import SessionUser
from .model import AuditLog, Notification


class NotificationService:
    """Global notification feed and the read-only audit log."""

    def __init__(self, client: DataClient):
        self._client = client

    def feed(self, *, limit: int = DEFAULT_NOTIFICATION_LIMIT) -> List[Notification]:
        return self._client.notifications.list(limit=limit)

    def unread_count(self, *, limit: int = DEFAULT_NOTIFICATION_LIMIT) -> int:
        return sum(1 for n in self.feed(limit=limit) if not n.is_read)

    def mark_read(self, notification_id: int) -> None:
        if not self._client.notifications.update(notification_id, is_read=True):
            raise NotFoundError("Notification does not exist")

    def mark_all_read(self) -> int:
        """Mark every unread notification of the current feed. Returns how many changed."""

        changed = 0
        for note in self.feed():
            if not note.is_read and self._client.notifications.update(note.id, is_read=True):
                changed += 1
        return changed

    def delete(self, notification_id: int) -> None:
        if not self._client.notifications.delete(notification_id):
            raise NotFoundError("Notification does not exist")

    def audit_log(self, *, actor: SessionUser, limit: int = DEFAULT_AUDIT_LIMIT) -> List[AuditLog]:
        if actor.role not in AUDIT_VIEW_ROLES:
            raise AuthorizationError("Your role cannot read the audit trail")
        return self._client.audit_logs.list(limit=limit)
