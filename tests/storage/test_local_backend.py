from __future__ import annotations

import sqlite3

import pytest

from src.labnexus.labnexus.core.exceptions import StorageError
from src.labnexus.labnexus.database.seed import SEED_CATEGORIES, SEED_EQUIPMENT, SEED_JOB_REQUESTS
from src.labnexus.labnexus.storage.schema import TABLES
from src.labnexus.labnexus.storage.sql_backend import LocalStorageBackend


@pytest.fixture
def local(tmp_path):
    backend = LocalStorageBackend(str(tmp_path / "data" / "lab.sqlite3"), schema_version=2)
    backend.initialize()
    return backend


def test_initialize_creates_and_seeds_once(local):
    assert set(local.list_tables()) == set(TABLES)
    assert local.table("users").count() == 6
    assert local.table("equipment").count() == len(SEED_EQUIPMENT)
    assert local.table("settings").get("categories")["values"] == SEED_CATEGORIES

    result = local.initialize()
    assert result == {"success": True, "message": "Database Ready", "seeded": False, "schemaVersion": 2}
    assert local.table("users").count() == 6


def test_reset_drops_user_data(local):
    local.table("equipment").insert({"id": "X-1", "category": "Oven", "brand": "Acme", "division": "MS"})

    result = local.initialize(reset=True)

    assert result["seeded"] is True
    assert local.table("equipment").get("X-1") is None
    assert local.table("equipment").count() == len(SEED_EQUIPMENT)


def test_auto_id_insert_and_typed_columns(local):
    notes = local.table("notifications")
    first = notes.insert({"title": "a", "message": "m", "timestamp": "2025-01-01T00:00:00.000Z", "isRead": False, "type": "system"})
    second = notes.insert({"title": "b", "message": "m", "timestamp": "2025-01-02T00:00:00.000Z", "isRead": True, "type": "system"})

    assert second == first + 1
    assert notes.get(second)["isRead"] is True
    assert notes.get(str(first))["isRead"] is False
    assert [r["title"] for r in notes.list(limit=1)] == ["b"]
    assert notes.get("not-a-number") is None


def test_audit_log_order_newest_first(local):
    logs = local.table("audit_logs")
    for ts in ("2025-01-02T00:00:00.000Z", "2025-01-03T00:00:00.000Z", "2025-01-01T00:00:00.000Z"):
        logs.insert({"action": "UPDATE", "targetId": ts, "targetName": "x", "userId": "1", "userName": "A", "timestamp": ts})

    stamps = [r["timestamp"] for r in logs.list(limit=3)]
    assert stamps == sorted(stamps, reverse=True)


def test_replace_patch_delete_report_missing_rows(local):
    equipment = local.table("equipment")
    assert equipment.replace({"id": "NOPE", "category": "x", "brand": "y", "division": "MS"}) is False
    assert local.table("users").patch("NOPE", {"name": "x"}) is False
    assert equipment.delete("NOPE") is False


def test_malformed_auto_id_matches_nothing(local):
    notifications = local.table("notifications")
    assert notifications.delete("abc") is False
    assert local.table("job_requests").patch("x", {"status": "OnProgress"}) is False
    assert local.table("job_requests").replace({"id": "x", "title": "t"}) is False


def test_replace_writes_every_field(local):
    equipment = local.table("equipment")
    seed = SEED_EQUIPMENT[0]

    assert equipment.replace({"id": seed["id"], "category": "Balance", "brand": "Sartorius", "division": "LOGAM"}) is True

    row = equipment.get(seed["id"])
    assert row["brand"] == "Sartorius"
    assert row["location"] is None
    assert row["serialNumber"] is None


def test_patch_touches_only_given_fields(local):
    users = local.table("users")
    before = users.get("6")

    assert users.patch("6", {"name": "Michael Ross", "unknownField": "ignored"}) is True

    after = users.get("6")
    assert after["name"] == "Michael Ross"
    assert after["email"] == before["email"]
    assert after["passwordHash"] == before["passwordHash"]


def test_bulk_upsert_last_write_wins(local):
    equipment = local.table("equipment")
    target, sibling = SEED_EQUIPMENT[0], SEED_EQUIPMENT[1]
    sibling_before = equipment.get(sibling["id"])

    count = equipment.bulk_upsert(
        [
            {"id": target["id"], "category": "Balance", "brand": "Sartorius", "division": "LOGAM", "status": "Service"},
            {"id": "NEW-1", "category": "Oven", "brand": "Memmert", "division": "ASLT", "status": "OK"},
        ]
    )

    assert count == 2
    overwritten = equipment.get(target["id"])
    assert overwritten["brand"] == "Sartorius"
    assert overwritten["model"] is None
    assert overwritten["personInCharge"] is None
    assert equipment.get(sibling["id"]) == sibling_before
    assert equipment.get("NEW-1")["brand"] == "Memmert"


def test_bulk_upsert_stops_at_row_without_key(local):
    equipment = local.table("equipment")
    with pytest.raises(StorageError) as exc:
        equipment.bulk_upsert([{"id": "OK-1", "brand": "a"}, {"brand": "b"}])

    assert exc.value.status == 400
    assert exc.value.operation == "bulk_upsert"
    # Rows before the failing one stay written.
    assert equipment.get("OK-1") is not None


def test_duplicate_email_is_a_storage_error(local):
    with pytest.raises(StorageError) as exc:
        local.table("users").insert({"id": "99", "name": "Dup", "email": "admin@sss.com", "role": "Analyst"})
    assert exc.value.table == "users"
    assert exc.value.operation == "insert"


def test_unknown_table(local):
    with pytest.raises(StorageError) as exc:
        local.table("secrets")
    assert exc.value.status == 405


def test_older_file_is_migrated(tmp_path):
    path = tmp_path / "old.sqlite3"
    conn = sqlite3.connect(path)
    conn.execute(
        "CREATE TABLE job_requests (id INTEGER PRIMARY KEY AUTOINCREMENT, title TEXT, requestor_id TEXT, "
        "requestor_name TEXT, division TEXT, description TEXT, category TEXT, requested_at TEXT, "
        "start_date TEXT, due_date TEXT, assigned_to_id TEXT, status TEXT)"
    )
    conn.execute("PRAGMA user_version = 1")
    conn.commit()
    conn.close()

    backend = LocalStorageBackend(str(path), schema_version=2)
    result = backend.initialize()

    assert result["schemaVersion"] == 2
    assert backend.table("job_requests").count() == len(SEED_JOB_REQUESTS)
    conn = sqlite3.connect(path)
    try:
        columns = {r[1] for r in conn.execute("PRAGMA table_info(job_requests)")}
        version = conn.execute("PRAGMA user_version").fetchone()[0]
    finally:
        conn.close()
    assert "completion_comment" in columns
    assert version == 2


def test_schema_failure_names_the_table(tmp_path, monkeypatch):
    backend = LocalStorageBackend(str(tmp_path / "broken.sqlite3"), schema_version=2)
    create = backend.dialect.create_table_sql

    def broken(spec):
        return "CREATE TABLE events (" if spec.name == "events" else create(spec)

    monkeypatch.setattr(backend.dialect, "create_table_sql", broken)
    with pytest.raises(StorageError) as exc:
        backend.initialize()
    assert (exc.value.operation, exc.value.table) == ("init", "events")
