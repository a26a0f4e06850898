from __future__ import annotations

import pytest

from src.labnexus.labnexus.core.enums import AuditAction, Role
from src.labnexus.labnexus.core.exceptions import AuthorizationError, NotFoundError
from src.labnexus.labnexus.users.model import SessionUser

ADMIN = SessionUser(id="1", name="Administrator", role=Role.ADMIN)
MANAGER = SessionUser(id="9", name="Manager", role=Role.MANAGER)
ANALYST = SessionUser(id="6", name="Mike Ross", role=Role.ANALYST)


def _emit(container, n):
    for i in range(n):
        container.audit.record(ADMIN, AuditAction.UPDATE, target_id=f"T-{i}", target_name=f"Item {i}")


def test_feed_is_newest_first_and_limited(container):
    _emit(container, 25)

    feed = container.notification_service.feed()
    assert len(feed) == 20
    assert feed[0].message == "Administrator updated Item 24"
    assert container.notification_service.unread_count() == 20


def test_mark_read_and_mark_all_read(container):
    _emit(container, 3)
    service = container.notification_service

    first = service.feed()[0]
    service.mark_read(first.id)
    assert service.unread_count() == 2
    assert service.mark_all_read() == 2
    assert service.unread_count() == 0


def test_mark_read_unknown_id(container):
    with pytest.raises(NotFoundError):
        container.notification_service.mark_read(999)


def test_delete_notification(container):
    _emit(container, 2)
    service = container.notification_service
    target = service.feed()[0]

    service.delete(target.id)

    assert [n.id for n in service.feed()] == [target.id - 1]
    with pytest.raises(NotFoundError):
        service.delete(target.id)


def test_audit_log_visibility(container):
    _emit(container, 2)

    logs = container.notification_service.audit_log(actor=MANAGER)
    assert logs[0].target_id == "T-1"
    with pytest.raises(AuthorizationError):
        container.notification_service.audit_log(actor=ANALYST)
