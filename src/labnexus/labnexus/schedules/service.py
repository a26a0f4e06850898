from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import List, Optional

from ..api.client import DataClient
from ..common.datetime_utils import parse_iso_datetime
from ..common.validators import require_enum, require_non_empty
from ..core.constants import UNKNOWN_USER_NAME
from ..core.enums import SUPPORT_ROLES, AuditAction, EventType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..notifications.audit import AuditTrail
from ..users.model import SessionUser
from .model import CalendarEvent, EventView


def _parse(value: Optional[str], field_name: str) -> datetime:
    value = require_non_empty(value, field_name)
    try:
        return parse_iso_datetime(value)
    except ValueError:
        raise ValidationError(f"{field_name} is not a valid date/time")


class ScheduleService:
    """Calendar events. Events are created and deleted, never edited."""

    def __init__(self, client: DataClient, audit: AuditTrail):
        self._client = client
        self._audit = audit

    @staticmethod
    def _require_planner(actor: SessionUser) -> None:
        if actor.role not in SUPPORT_ROLES:
            raise AuthorizationError("Only Admin or Supporting users can manage the schedule")

    def list_events(self) -> List[EventView]:
        names = {u.id: u.name for u in self._client.users.list()}
        return [
            EventView(event=ev, creator_name=names.get(ev.created_by, UNKNOWN_USER_NAME))
            for ev in self._client.events.list()
        ]

    def create_event(
        self,
        *,
        actor: SessionUser,
        title: str,
        start_date: str,
        end_date: str,
        type,
        description: Optional[str] = None,
        equipment_id: Optional[str] = None,
    ) -> CalendarEvent:
        self._require_planner(actor)

        title = require_non_empty(title, "Title")
        start = _parse(start_date, "Start date")
        end = _parse(end_date, "End date")
        if start >= end:
            raise ValidationError("End date must be after start date")

        event = CalendarEvent(
            title=title,
            start_date=start_date.strip(),
            end_date=end_date.strip(),
            type=require_enum(EventType, type, "Type"),
            created_by=actor.id,
            description=(description or "").strip() or None,
            equipment_id=(equipment_id or "").strip() or None,
        )
        event_id = self._client.events.add(event)
        event = replace(event, id=event_id)

        self._audit.record(
            actor,
            AuditAction.CREATE,
            target_id=f"EVENT-{event_id}",
            target_name=event.title,
            subject="Event",
            details=f"Scheduled for {start.date().isoformat()}",
        )
        return event

    def delete_event(self, *, actor: SessionUser, event_id: int) -> None:
        self._require_planner(actor)

        event = self._client.events.get(event_id)
        if not event:
            raise NotFoundError("Event does not exist")
        if not self._client.events.delete(event.id):
            raise NotFoundError("Event does not exist")

        self._audit.record(
            actor,
            AuditAction.DELETE,
            target_id=f"EVENT-{event.id}",
            target_name=event.title,
            subject="Event",
            details=f"Event deleted from schedule. Original date: {event.start_date[:10]}",
        )
