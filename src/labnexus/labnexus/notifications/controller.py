from __future__ import annotations

from flask import Flask, request

from ..api.client import audit_log_to_record, notification_to_record
from ..common.web import current_user, handle_errors, login_required, ok
from ..container import Container
from ..core.constants import DEFAULT_AUDIT_LIMIT, DEFAULT_NOTIFICATION_LIMIT


def register(app: Flask, container: Container) -> None:
    service = container.notification_service

    @app.route("/api/notifications", methods=["GET"], endpoint="notifications_list")
    @login_required
    @handle_errors
    def notifications_list():
        limit = request.args.get("limit", DEFAULT_NOTIFICATION_LIMIT, type=int)
        notes = service.feed(limit=limit)
        items = [dict(notification_to_record(n), id=n.id) for n in notes]
        return ok({"items": items, "unread": sum(1 for n in notes if not n.is_read)})

    @app.route("/api/notifications/<int:notification_id>/read", methods=["POST"], endpoint="notifications_read")
    @login_required
    @handle_errors
    def notifications_read(notification_id: int):
        service.mark_read(notification_id)
        return ok({"success": True})

    @app.route("/api/notifications/read-all", methods=["POST"], endpoint="notifications_read_all")
    @login_required
    @handle_errors
    def notifications_read_all():
        return ok({"success": True, "count": service.mark_all_read()})

    @app.route("/api/notifications/<int:notification_id>", methods=["DELETE"], endpoint="notifications_delete")
    @login_required
    @handle_errors
    def notifications_delete(notification_id: int):
        service.delete(notification_id)
        return ok({"success": True})

    @app.route("/api/audit-logs", methods=["GET"], endpoint="audit_logs_list")
    @login_required
    @handle_errors
    def audit_logs_list():
        limit = request.args.get("limit", DEFAULT_AUDIT_LIMIT, type=int)
        logs = service.audit_log(actor=current_user(), limit=limit)
        return ok([dict(audit_log_to_record(log), id=log.id) for log in logs])
