from __future__ import annotations

from flask import Flask

from ..api.client import job_request_to_record
from ..common.web import current_user, handle_errors, json_body, login_required, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.job_request_service

    @app.route("/api/job-requests", methods=["GET"], endpoint="job_requests_list")
    @login_required
    @handle_errors
    def job_requests_list():
        return ok([job_request_to_record(r) for r in service.list()])

    @app.route("/api/job-requests", methods=["POST"], endpoint="job_requests_create")
    @login_required
    @handle_errors
    def job_requests_create():
        body = json_body()
        req = service.create(
            actor=current_user(),
            title=body.get("title", ""),
            description=body.get("description", ""),
            division=body.get("division"),
            assigned_to_id=body.get("assignedToId", ""),
            category=body.get("category"),
            start_date=body.get("startDate"),
            due_date=body.get("dueDate"),
        )
        return ok(job_request_to_record(req), 201)

    @app.route("/api/job-requests/<int:request_id>", methods=["PUT"], endpoint="job_requests_update")
    @login_required
    @handle_errors
    def job_requests_update(request_id: int):
        body = json_body()
        req = service.update_content(
            actor=current_user(),
            request_id=request_id,
            title=body.get("title"),
            description=body.get("description"),
            division=body.get("division"),
            assigned_to_id=body.get("assignedToId"),
            category=body.get("category"),
            start_date=body.get("startDate"),
            due_date=body.get("dueDate"),
        )
        return ok(job_request_to_record(req))

    @app.route("/api/job-requests/<int:request_id>/status", methods=["POST"], endpoint="job_requests_status")
    @login_required
    @handle_errors
    def job_requests_status(request_id: int):
        body = json_body()
        req = service.change_status(
            actor=current_user(),
            request_id=request_id,
            status=body.get("status"),
            comment=body.get("completionComment"),
        )
        return ok(job_request_to_record(req))

    @app.route("/api/job-requests/<int:request_id>", methods=["DELETE"], endpoint="job_requests_delete")
    @login_required
    @handle_errors
    def job_requests_delete(request_id: int):
        service.delete(actor=current_user(), request_id=request_id)
        return ok({"success": True})
