"""HTTP surface of the remote storage backend.

``/data`` is a stateless handler keyed by the ``table`` query parameter that
dispatches on the HTTP verb; ``/init`` creates the schema, seeds an empty
database or performs the destructive reset. Bodies and responses use domain
field names; the SQL store translates them to columns.
"""

from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..core.exceptions import StorageError
from ..storage.repository import StorageBackend
from ..storage.schema import get_table

logger = logging.getLogger(__name__)


def _ok(data, status: int = 200):
    return jsonify({"data": data}), status


def _error(message: str, status: int):
    return jsonify({"error": message}), status


def register(app: Flask, backend: StorageBackend) -> None:
    @app.route("/data", methods=["GET", "POST", "PUT", "PATCH", "DELETE"], endpoint="data")
    def data():
        table = request.args.get("table", "")
        spec = get_table(table)
        if spec is None:
            return _error("Method Not Allowed", 405)

        key = request.args.get("id")
        store = backend.table(table)

        try:
            if request.method == "GET":
                if key is not None:
                    return _ok(store.get(key))
                if table == "settings":
                    return _error("id is required", 400)
                limit = request.args.get("limit", type=int)
                if limit is None:
                    limit = spec.default_limit
                return _ok(list(store.list(limit=limit)))

            if request.method == "DELETE":
                if not spec.delete:
                    return _error("Method Not Allowed", 405)
                if key is None:
                    return _error("id is required", 400)
                if not store.delete(key):
                    return _error(f"{table} {key} not found", 404)
                return _ok({"success": True})

            body = request.get_json(silent=True)
            if body is None:
                return _error("JSON body is required", 400)

            if request.method == "POST":
                if not isinstance(body, dict):
                    return _error("JSON object is required", 400)
                identity = store.insert(body)
                if spec.auto_id:
                    return _ok({"id": identity}, 201)
                return _ok({"success": True}, 201)

            if request.method == "PUT":
                if request.args.get("bulk") == "true":
                    if not spec.bulk:
                        return _error("Method Not Allowed", 405)
                    if not isinstance(body, list) or not all(isinstance(r, dict) for r in body):
                        return _error("JSON array of objects is required", 400)
                    count = store.bulk_upsert(body)
                    return _ok({"success": True, "count": count})
                if not spec.replace or not isinstance(body, dict):
                    return _error("Method Not Allowed", 405)
                if table == "settings":
                    store.bulk_upsert([{"id": body.get("id"), "values": body.get("values") or []}])
                    return _ok({"success": True})
                if not store.replace(body):
                    return _error(f"{table} {body.get('id')} not found", 404)
                return _ok({"success": True})

            if request.method == "PATCH":
                if not spec.patch:
                    return _error("Method Not Allowed", 405)
                if key is None:
                    return _error("id is required", 400)
                if not isinstance(body, dict):
                    return _error("JSON object is required", 400)
                if spec.patch_fields is not None and not set(body) <= spec.patch_fields:
                    allowed = ", ".join(sorted(spec.patch_fields))
                    return _error(f"only {allowed} can be changed on {table}", 400)
                if not store.patch(key, body):
                    return _error(f"{table} {key} not found", 404)
                return _ok({"success": True})

        except StorageError as e:
            logger.error("data handler %s %s: %s", request.method, table, e)
            return _error(e.message, e.status if e.status < 500 else 500)

        return _error("Method Not Allowed", 405)

    @app.route("/init", methods=["GET", "POST"], endpoint="init")
    def init():
        reset = request.args.get("reset") == "true" or request.method == "POST"
        try:
            result = backend.initialize(reset=reset)
        except StorageError as e:
            logger.error("init failed: %s", e)
            return _error(e.message, 500)
        return _ok(result)
