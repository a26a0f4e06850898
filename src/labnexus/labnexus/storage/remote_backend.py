"""Storage backend reached over HTTP (the ``/data`` and ``/init`` handler)."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

import requests

from ..core.exceptions import StorageError
from .repository import Key, Record, StorageBackend, TableStore
from .schema import TABLES

logger = logging.getLogger(__name__)


class RemoteClient:
    """Thin wrapper around a requests.Session that unwraps ``{data: ...}``."""

    def __init__(self, base_url: str, *, session: Optional[requests.Session] = None, timeout: float = 10.0):
        self._base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._timeout = timeout

    def call(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        table: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        url = f"{self._base_url}{path}"
        try:
            res = self._session.request(method, url, params=params, json=json, timeout=self._timeout)
        except requests.RequestException as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise StorageError(f"backend unreachable: {exc}", operation=operation, table=table, status=503) from exc

        if res.status_code >= 400:
            message = _error_message(res)
            logger.warning("%s %s -> %s %s", method, url, res.status_code, message)
            raise StorageError(message, operation=operation, table=table, status=res.status_code)

        try:
            body = res.json()
        except ValueError as exc:
            raise StorageError("malformed response body", operation=operation, table=table) from exc
        if isinstance(body, dict) and "data" in body:
            return body["data"]
        return body


def _error_message(res) -> str:
    try:
        body = res.json()
    except ValueError:
        return res.text or f"HTTP {res.status_code}"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"HTTP {res.status_code}"


class RemoteTableStore(TableStore):
    def __init__(self, name: str, client: RemoteClient):
        self.name = name
        self._client = client
        self._spec = TABLES[name]

    def _call(self, method: str, operation: str, *, params: Optional[Dict[str, Any]] = None, json: Any = None):
        query = {"table": self.name}
        query.update(params or {})
        return self._client.call(method, "/data", operation=operation, table=self.name, params=query, json=json)

    def list(self, *, limit: Optional[int] = None) -> Sequence[Record]:
        params = {"limit": int(limit)} if limit is not None else None
        return list(self._call("GET", "list", params=params) or [])

    def get(self, key: Key) -> Optional[Record]:
        return self._call("GET", "get", params={"id": key})

    def insert(self, record: Record) -> Key:
        data = self._call("POST", "insert", json=record)
        if self._spec.auto_id:
            return int(data["id"])
        return record[self._spec.key_field]

    def replace(self, record: Record) -> bool:
        return self._call_ok("PUT", "replace", json=record)

    def patch(self, key: Key, partial: Record) -> bool:
        return self._call_ok("PATCH", "patch", params={"id": key}, json=partial)

    def delete(self, key: Key) -> bool:
        return self._call_ok("DELETE", "delete", params={"id": key})

    def _call_ok(self, method: str, operation: str, **kwargs) -> bool:
        try:
            self._call(method, operation, **kwargs)
        except StorageError as exc:
            if exc.status == 404:
                return False
            raise
        return True

    def bulk_upsert(self, records: Sequence[Record]) -> int:
        if self.name == "settings":
            for record in records:
                self._call("PUT", "bulk_upsert", json=record)
            return len(records)
        data = self._call("PUT", "bulk_upsert", params={"bulk": "true"}, json=list(records))
        return int((data or {}).get("count", len(records)))


class RemoteStorageBackend(StorageBackend):
    def __init__(self, base_url: str, *, session: Optional[requests.Session] = None, timeout: float = 10.0):
        self._client = RemoteClient(base_url, session=session, timeout=timeout)
        self._stores = {name: RemoteTableStore(name, self._client) for name in TABLES}

    def table(self, name: str) -> RemoteTableStore:
        store = self._stores.get(name)
        if store is None:
            raise StorageError(f"unknown table {name!r}", operation="table", table=name, status=405)
        return store

    def initialize(self, *, reset: bool = False) -> Dict[str, Any]:
        if reset:
            return self._client.call("POST", "/init", operation="reset", params={"reset": "true"})
        return self._client.call("GET", "/init", operation="init")
