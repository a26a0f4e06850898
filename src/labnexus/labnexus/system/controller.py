from __future__ import annotations

from flask import Flask

from ..common.web import current_user, handle_errors, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.system_service

    @app.route("/api/system/reset-request", methods=["POST"], endpoint="system_reset_request")
    @login_required
    @handle_errors
    def system_reset_request():
        token = service.request_reset(current_user())
        return ok({"token": token, "message": "Confirm full reset? All data will be lost."})

    @app.route("/api/system/reset", methods=["POST"], endpoint="system_reset")
    @login_required
    @handle_errors
    def system_reset():
        body = json_body()
        return ok(service.reset(current_user(), body.get("token", "")))
