from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import AuditAction, NotificationType


@dataclass(frozen=True)
class AuditLog:
    """Append-only audit record; ``id`` is assigned by storage."""

    action: AuditAction
    target_id: str
    target_name: str
    user_id: str
    user_name: str
    timestamp: str
    details: Optional[str] = None
    id: Optional[int] = None


@dataclass(frozen=True)
class Notification:
    """Human readable echo of one AuditLog entry."""

    title: str
    message: str
    timestamp: str
    type: NotificationType
    is_read: bool = False
    id: Optional[int] = None
