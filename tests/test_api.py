from __future__ import annotations

import pytest

from src.labnexus.labnexus.database.seed import SEED_EQUIPMENT
from src.labnexus.labnexus.main import create_app


@pytest.fixture(scope="module")
def app(tmp_path_factory):
    path = tmp_path_factory.mktemp("api") / "lab.sqlite3"
    return create_app(
        {
            "SECRET_KEY": "test",
            "TESTING": True,
            "SERVER_BACKEND": "local",
            "STORAGE_BACKEND": "local",
            "LOCAL_DB_PATH": str(path),
            "AUTO_INIT_DB": True,
        }
    )


def login(app, email, password):
    client = app.test_client()
    res = client.post("/api/login", json={"email": email, "password": password})
    assert res.status_code == 200, res.get_json()
    return client


def test_login_required(app):
    assert app.test_client().get("/api/equipment").status_code == 401


def test_bad_login(app):
    res = app.test_client().post("/api/login", json={"email": "admin@sss.com", "password": "x"})
    assert res.status_code == 401
    assert res.get_json()["error"] == "Invalid email or password"


def test_me_and_logout(app):
    client = login(app, "admin@sss.com", "admin")
    assert client.get("/api/me").get_json()["data"] == {"id": "1", "name": "Administrator", "role": "Admin"}
    client.post("/api/logout")
    assert client.get("/api/me").status_code == 401


def test_equipment_flow(app):
    client = login(app, "luthfialfiyansyah@siglaboratory.co.id", "supporting")

    res = client.post("/api/equipment", json={"id": "API-1", "category": "HPLC", "brand": "Acme", "division": "MS"})
    assert res.status_code == 201
    assert "API-1" in [e["id"] for e in res.get_json()["data"]["equipment"]]
    assert all("passwordHash" not in u for u in res.get_json()["data"]["users"])

    res = client.put("/api/equipment/API-1", json={"category": "HPLC", "brand": "Acme", "division": "MS", "status": "Service"})
    assert res.status_code == 200

    stats = client.get("/api/equipment/stats").get_json()["data"]
    assert stats["critical"] >= 1

    assert client.delete("/api/equipment/API-1").status_code == 200
    assert client.delete("/api/equipment/API-1").status_code == 404


def test_equipment_ids_with_slashes(app):
    client = login(app, "admin@sss.com", "admin")
    seed_id = SEED_EQUIPMENT[0]["id"]
    body = dict(SEED_EQUIPMENT[0], status="Calibration")

    res = client.put(f"/api/equipment/{seed_id}", json=body)

    assert res.status_code == 200
    item = next(e for e in res.get_json()["data"]["equipment"] if e["id"] == seed_id)
    assert item["status"] == "Calibration"


def test_validation_and_permission_errors(app):
    chemist = login(app, "chemist@labnexus.com", "1234")
    res = chemist.post("/api/equipment", json={"id": "C-1", "category": "HPLC", "brand": "Acme", "division": "MS"})
    assert res.status_code == 403

    admin = login(app, "admin@sss.com", "admin")
    res = admin.post("/api/equipment", json={"id": "C-1", "category": "HPLC", "brand": "Acme", "division": "MS", "personInCharge": "Ghost"})
    assert res.status_code == 400
    assert "Person in Charge" in res.get_json()["error"]


def test_snapshot_is_json(app):
    client = login(app, "chemist@labnexus.com", "1234")
    res = client.get("/api/equipment/snapshot")
    assert res.mimetype == "application/json"
    assert {"id", "installDate"} <= set(res.get_json()[0])


def test_register_and_job_request_board(app):
    requestor = login(app, "chemist@labnexus.com", "1234")
    res = requestor.post(
        "/api/job-requests",
        json={"title": "Leaking pump", "description": "Pump seal leaks.", "division": "HPLC", "assignedToId": "4"},
    )
    assert res.status_code == 201
    req_id = res.get_json()["data"]["id"]

    support = login(app, "tomo@siglaboratory.co.id", "supporting")
    res = support.post(f"/api/job-requests/{req_id}/status", json={"status": "Rejected"})
    assert res.status_code == 400
    res = support.post(f"/api/job-requests/{req_id}/status", json={"status": "Rejected", "completionComment": "Out of scope"})
    assert res.get_json()["data"]["completionComment"] == "Out of scope"

    newcomer = app.test_client()
    res = newcomer.post("/api/register", json={"name": "Nia", "email": "nia@lab.com", "password": "pass1"})
    assert res.status_code == 201
    assert res.get_json()["data"]["role"] == "Analyst"
    assert newcomer.delete(f"/api/job-requests/{req_id}").status_code == 403


def test_events_and_notifications(app):
    admin = login(app, "admin@sss.com", "admin")
    res = admin.post(
        "/api/events",
        json={"title": "PM", "startDate": "2025-05-01T08:00", "endDate": "2025-05-01T09:00", "type": "Maintenance"},
    )
    assert res.status_code == 201

    events = admin.get("/api/events").get_json()["data"]
    assert any(e["createdByName"] == "Administrator" for e in events)

    feed = admin.get("/api/notifications").get_json()["data"]
    assert feed["items"][0]["title"] == "New Event Added"
    assert admin.post("/api/notifications/read-all").status_code == 200
    assert admin.get("/api/notifications").get_json()["data"]["unread"] == 0

    logs = admin.get("/api/audit-logs?limit=5").get_json()["data"]
    assert len(logs) <= 5


def test_user_management(app):
    admin = login(app, "admin@sss.com", "admin")
    res = admin.post("/api/users", json={"name": "Temp", "email": "temp@lab.com", "password": "pass1", "role": "Supervisor"})
    assert res.status_code == 201
    user_id = res.get_json()["data"]["id"]

    res = admin.patch(f"/api/users/{user_id}", json={"role": "Manager"})
    assert res.get_json()["data"]["role"] == "Manager"
    assert admin.delete("/api/users/1").status_code == 400
    assert admin.delete(f"/api/users/{user_id}").status_code == 200


def test_two_step_reset(app):
    admin = login(app, "admin@sss.com", "admin")
    assert admin.post("/api/system/reset", json={"token": "nope"}).status_code == 400

    token = admin.post("/api/system/reset-request").get_json()["data"]["token"]
    res = admin.post("/api/system/reset", json={"token": token})

    assert res.status_code == 200
    equipment = admin.get("/api/equipment?refresh=true").get_json()["data"]["equipment"]
    assert len(equipment) == len(SEED_EQUIPMENT)
