from __future__ import annotations

from flask import Flask, session

from ..api.client import user_to_record
from ..common.web import current_user, error, handle_errors, json_body, login_required, ok, remember
from ..container import Container
from .model import SessionUser, User


def _user_json(user: User) -> dict:
    record = user_to_record(user)
    record.pop("passwordHash", None)
    return record


def _session_json(user: SessionUser) -> dict:
    return {"id": user.id, "name": user.name, "role": user.role.value}


def register(app: Flask, container: Container) -> None:
    @app.route("/api/login", methods=["POST"], endpoint="login")
    @handle_errors
    def login():
        body = json_body()
        user = container.auth_service.authenticate(body.get("email", ""), body.get("password", ""))
        remember(user)
        return ok(_session_json(user))

    @app.route("/api/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok({"success": True})

    @app.route("/api/register", methods=["POST"], endpoint="register")
    @handle_errors
    def register_account():
        body = json_body()
        user = container.auth_service.register(
            name=body.get("name", ""),
            email=body.get("email", ""),
            password=body.get("password", ""),
        )
        remember(user)
        return ok(_session_json(user), 201)

    @app.route("/api/me", methods=["GET"], endpoint="me")
    def me():
        user = current_user()
        if user is None:
            return error("Please sign in to continue", 401)
        return ok(_session_json(user))

    @app.route("/api/users", methods=["GET"], endpoint="users_list")
    @login_required
    @handle_errors
    def users_list():
        return ok([_user_json(u) for u in container.user_service.list()])

    @app.route("/api/users", methods=["POST"], endpoint="users_create")
    @login_required
    @handle_errors
    def users_create():
        body = json_body()
        user = container.user_service.create(
            actor=current_user(),
            name=body.get("name", ""),
            email=body.get("email", ""),
            password=body.get("password", ""),
            role=body.get("role"),
            avatar=body.get("avatar"),
        )
        return ok(_user_json(user), 201)

    @app.route("/api/users/<user_id>", methods=["PATCH"], endpoint="users_update")
    @login_required
    @handle_errors
    def users_update(user_id: str):
        body = json_body()
        user = container.user_service.update(
            actor=current_user(),
            user_id=user_id,
            name=body.get("name"),
            email=body.get("email"),
            role=body.get("role"),
            password=body.get("password"),
            avatar=body.get("avatar"),
            status=body.get("status"),
        )
        return ok(_user_json(user))

    @app.route("/api/users/<user_id>", methods=["DELETE"], endpoint="users_delete")
    @login_required
    @handle_errors
    def users_delete(user_id: str):
        container.user_service.delete(actor=current_user(), user_id=user_id)
        return ok({"success": True})
