from __future__ import annotations

import pytest

from src.labnexus.labnexus.core.enums import AuditAction, NotificationType, Role
from src.labnexus.labnexus.notifications.audit import AuditTrail, describe
from src.labnexus.labnexus.users.model import SessionUser

ADMIN = SessionUser(id="1", name="Administrator", role=Role.ADMIN)


def fixed_clock():
    return "2025-03-01T10:00:00.000Z"


@pytest.mark.parametrize(
    "action,title,message,note_type",
    [
        (AuditAction.CREATE, "New Asset Added", "Ann added Balance X", NotificationType.CREATE),
        (AuditAction.UPDATE, "Asset Updated", "Ann updated Balance X", NotificationType.UPDATE),
        (AuditAction.DELETE, "Asset Deleted", "Ann deleted Balance X", NotificationType.DELETE),
        (AuditAction.IMPORT, "Bulk Import", "Imported equipment data.", NotificationType.CREATE),
        (AuditAction.RESET, "System Reset", "Database reset to factory defaults.", NotificationType.SYSTEM),
    ],
)
def test_describe(action, title, message, note_type):
    assert describe(action, subject="Asset", actor_name="Ann", target_name="Balance X") == (title, message, note_type)


def test_describe_uses_subject_noun():
    title, _, _ = describe(AuditAction.DELETE, subject="Job Request", actor_name="Ann", target_name="x")
    assert title == "Job Request Deleted"


def test_record_writes_audit_then_notification(backend, client):
    outcome = AuditTrail(client, clock=fixed_clock).record(
        ADMIN, AuditAction.CREATE, target_id="LAB-9", target_name="Acme Z"
    )

    assert outcome.ok
    log = client.audit_logs.list()[0]
    assert (log.id, log.target_id, log.user_id, log.timestamp) == (outcome.audit_id, "LAB-9", "1", fixed_clock())
    note = client.notifications.list()[0]
    assert note.id == outcome.notification_id
    assert note.timestamp == log.timestamp
    assert note.is_read is False


def test_audit_failure_is_reported_and_notification_still_written(backend, client, caplog):
    backend.table("audit_logs").fail_ops.add("insert")

    outcome = AuditTrail(client).record(ADMIN, AuditAction.UPDATE, target_id="LAB-9", target_name="Acme Z")

    assert not outcome.ok
    assert outcome.audit_id is None
    assert "simulated outage" in outcome.audit_error
    assert outcome.notification_id is not None
    assert "audit log write failed" in caplog.text


def test_notification_failure_does_not_raise(backend, client):
    backend.table("notifications").fail_ops.add("insert")

    outcome = AuditTrail(client).record(ADMIN, AuditAction.DELETE, target_id="LAB-9", target_name="Acme Z")

    assert outcome.audit_id is not None
    assert outcome.notification_error
    assert client.notifications.list() == []


def test_primary_action_survives_audit_outage(backend, container, client):
    backend.table("audit_logs").fail_ops.add("insert")
    backend.table("notifications").fail_ops.add("insert")

    container.equipment_service.save(
        actor=ADMIN,
        data={"id": "LAB-1", "category": "HPLC", "brand": "Acme", "division": "MS"},
        is_new=True,
    )

    assert client.equipment.get("LAB-1") is not None
