from __future__ import annotations

from dataclasses import asdict

from flask import Flask, Response, request

from ..api.client import equipment_to_record, user_to_record
from ..common.web import current_user, handle_errors, json_body, login_required, ok
from ..container import Container
from ..core.exceptions import ValidationError
from .cache import InventoryView


def _view_json(view: InventoryView) -> dict:
    users = []
    for u in view.users:
        record = user_to_record(u)
        record.pop("passwordHash", None)
        users.append(record)
    return {
        "equipment": [equipment_to_record(e) for e in view.equipment],
        "users": users,
        "categories": list(view.categories),
    }


def register(app: Flask, container: Container) -> None:
    service = container.equipment_service

    @app.route("/api/equipment", methods=["GET"], endpoint="equipment_list")
    @login_required
    @handle_errors
    def equipment_list():
        if request.args.get("refresh") == "true":
            return ok(_view_json(container.cache.refresh()))
        return ok(_view_json(container.cache.view))

    @app.route("/api/equipment", methods=["POST"], endpoint="equipment_create")
    @login_required
    @handle_errors
    def equipment_create():
        view = service.save(actor=current_user(), data=json_body(), is_new=True)
        return ok(_view_json(view), 201)

    @app.route("/api/equipment/<path:equipment_id>", methods=["PUT"], endpoint="equipment_update")
    @login_required
    @handle_errors
    def equipment_update(equipment_id: str):
        data = dict(json_body())
        if data.get("id") and data["id"] != equipment_id:
            raise ValidationError("Equipment ID cannot be changed")
        data["id"] = equipment_id
        return ok(_view_json(service.save(actor=current_user(), data=data, is_new=False)))

    @app.route("/api/equipment/<path:equipment_id>", methods=["DELETE"], endpoint="equipment_delete")
    @login_required
    @handle_errors
    def equipment_delete(equipment_id: str):
        return ok(_view_json(service.delete(actor=current_user(), equipment_id=equipment_id)))

    @app.route("/api/equipment/import", methods=["POST"], endpoint="equipment_import")
    @login_required
    @handle_errors
    def equipment_import():
        rows = request.get_json(silent=True)
        if isinstance(rows, dict):
            rows = rows.get("rows")
        if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
            raise ValidationError("A JSON array of equipment rows is required")
        return ok(_view_json(service.bulk_import(actor=current_user(), rows=rows)))

    @app.route("/api/equipment/stats", methods=["GET"], endpoint="equipment_stats")
    @login_required
    @handle_errors
    def equipment_stats():
        return ok(asdict(service.dashboard_stats()))

    @app.route("/api/equipment/snapshot", methods=["GET"], endpoint="equipment_snapshot")
    @login_required
    @handle_errors
    def equipment_snapshot():
        return Response(service.assistant_snapshot(), mimetype="application/json")

    @app.route("/api/categories", methods=["GET"], endpoint="categories_list")
    @login_required
    @handle_errors
    def categories_list():
        return ok(container.categories.list())

    @app.route("/api/categories", methods=["POST"], endpoint="categories_add")
    @login_required
    @handle_errors
    def categories_add():
        body = json_body()
        return ok(service.add_category(actor=current_user(), category=body.get("name")), 201)
