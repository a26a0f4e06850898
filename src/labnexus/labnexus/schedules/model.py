from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import EventType


@dataclass(frozen=True)
class CalendarEvent:
    title: str
    start_date: str
    end_date: str
    type: EventType
    created_by: str
    description: Optional[str] = None
    # Weak reference: the equipment may have been deleted since.
    equipment_id: Optional[str] = None
    id: Optional[int] = None


@dataclass(frozen=True)
class EventView:
    event: CalendarEvent
    creator_name: str
