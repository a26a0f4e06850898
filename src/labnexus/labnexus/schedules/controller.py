from __future__ import annotations

from flask import Flask

from ..api.client import event_to_record
from ..common.web import current_user, handle_errors, json_body, login_required, ok
from ..container import Container
from .model import CalendarEvent


def _event_json(event: CalendarEvent, **extra) -> dict:
    record = event_to_record(event)
    record["id"] = event.id
    record.update(extra)
    return record


def register(app: Flask, container: Container) -> None:
    service = container.schedule_service

    @app.route("/api/events", methods=["GET"], endpoint="events_list")
    @login_required
    @handle_errors
    def events_list():
        return ok([_event_json(v.event, createdByName=v.creator_name) for v in service.list_events()])

    @app.route("/api/events", methods=["POST"], endpoint="events_create")
    @login_required
    @handle_errors
    def events_create():
        body = json_body()
        event = service.create_event(
            actor=current_user(),
            title=body.get("title", ""),
            start_date=body.get("startDate", ""),
            end_date=body.get("endDate", ""),
            type=body.get("type"),
            description=body.get("description"),
            equipment_id=body.get("equipmentId"),
        )
        return ok(_event_json(event), 201)

    @app.route("/api/events/<int:event_id>", methods=["DELETE"], endpoint="events_delete")
    @login_required
    @handle_errors
    def events_delete(event_id: int):
        service.delete_event(actor=current_user(), event_id=event_id)
        return ok({"success": True})
