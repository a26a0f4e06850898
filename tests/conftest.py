from __future__ import annotations

from typing import Dict, Optional, Sequence, Set

import pytest

from src.labnexus.labnexus.api.client import DataClient
from src.labnexus.labnexus.container import Container, build_container
from src.labnexus.labnexus.core.exceptions import StorageError
from src.labnexus.labnexus.database.seed import seed_defaults
from src.labnexus.labnexus.storage.schema import TABLES, TableSpec

# Newest first, like the SQL order_by of these tables.
_DESC_TABLES = {"audit_logs", "notifications", "job_requests"}


class InMemoryTable:
    """Dict-backed TableStore with the same contract as the SQL store."""

    def __init__(self, spec: TableSpec):
        self.name = spec.name
        self._spec = spec
        self._rows: Dict[object, dict] = {}
        self._next_id = 1
        self.fail_ops: Set[str] = set()

    def _check(self, operation: str) -> None:
        if operation in self.fail_ops:
            raise StorageError("simulated outage", operation=operation, table=self.name)

    def _key(self, key):
        try:
            return int(key) if self._spec.auto_id else str(key)
        except (TypeError, ValueError):
            return None

    def _full(self, record: dict) -> dict:
        return {f: record.get(f) for f, _ in self._spec.fields}

    def list(self, *, limit: Optional[int] = None):
        self._check("list")
        rows = [dict(r) for r in self._rows.values()]
        if self.name in _DESC_TABLES:
            rows.reverse()
        return rows[:limit] if limit is not None else rows

    def get(self, key):
        self._check("get")
        row = self._rows.get(self._key(key))
        return dict(row) if row else None

    def insert(self, record: dict):
        self._check("insert")
        row = self._full(record)
        if self._spec.auto_id:
            row["id"] = self._next_id
            self._next_id += 1
        elif not row.get("id"):
            raise StorageError("primary key is required", operation="insert", table=self.name, status=400)
        elif row["id"] in self._rows:
            raise StorageError("duplicate key", operation="insert", table=self.name)
        self._rows[row["id"]] = row
        return row["id"]

    def replace(self, record: dict) -> bool:
        self._check("replace")
        key = self._key(record.get("id"))
        if key not in self._rows:
            return False
        self._rows[key] = dict(self._full(record), id=key)
        return True

    def patch(self, key, partial: dict) -> bool:
        self._check("patch")
        key = self._key(key)
        if key not in self._rows:
            return False
        known = {f for f, _ in self._spec.fields if f != "id"}
        self._rows[key].update({k: v for k, v in partial.items() if k in known})
        return True

    def delete(self, key) -> bool:
        self._check("delete")
        return self._rows.pop(self._key(key), None) is not None

    def bulk_upsert(self, records: Sequence[dict]) -> int:
        self._check("bulk_upsert")
        for record in records:
            row = self._full(record)
            self._rows[row["id"]] = row
        return len(records)

    def count(self) -> int:
        return len(self._rows)


class InMemoryBackend:
    def __init__(self):
        self.tables = {name: InMemoryTable(spec) for name, spec in TABLES.items()}
        self.init_calls = 0

    def table(self, name: str) -> InMemoryTable:
        if name not in self.tables:
            raise StorageError(f"unknown table {name!r}", operation="table", table=name, status=405)
        return self.tables[name]

    def initialize(self, *, reset: bool = False):
        self.init_calls += 1
        if reset:
            self.tables = {name: InMemoryTable(spec) for name, spec in TABLES.items()}
        seeded = False
        if self.tables["users"].count() == 0:
            seed_defaults(self)
            seeded = True
        return {"success": True, "message": "Database Ready", "seeded": seeded}


@pytest.fixture(scope="session")
def seeded_template() -> InMemoryBackend:
    # Seeding hashes six passwords; do it once and copy the rows per test.
    backend = InMemoryBackend()
    backend.initialize()
    return backend


@pytest.fixture
def backend(seeded_template) -> InMemoryBackend:
    fresh = InMemoryBackend()
    for name, table in seeded_template.tables.items():
        target = fresh.tables[name]
        target._rows = {k: dict(v) for k, v in table._rows.items()}
        target._next_id = table._next_id
    return fresh


@pytest.fixture
def client(backend) -> DataClient:
    return DataClient(backend)


@pytest.fixture
def container(backend) -> Container:
    return build_container(backend=backend)
