from __future__ import annotations

import pytest

from src.labnexus.labnexus.core.enums import AuditAction, Role, UserStatus
from src.labnexus.labnexus.core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from src.labnexus.labnexus.users.model import SessionUser
from src.labnexus.labnexus.users.service import default_avatar

ADMIN = SessionUser(id="1", name="Administrator", role=Role.ADMIN)
SUPPORT = SessionUser(id="3", name="Muhammad Luthfi Alfiyansyah", role=Role.SUPPORTING)
CHEMIST = SessionUser(id="5", name="Emily Chen", role=Role.CHEMIST)


def test_authenticate_seed_admin(container):
    user = container.auth_service.authenticate("admin@sss.com", "admin")
    assert user == ADMIN


def test_authenticate_ignores_email_case(container):
    assert container.auth_service.authenticate(" Chemist@LabNexus.com ", "1234").id == "5"


def test_wrong_password_and_unknown_email(container):
    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate("admin@sss.com", "nope")
    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate("ghost@sss.com", "admin")


def test_passwords_are_not_stored_in_plaintext(client):
    stored = client.users.get("1").password_hash
    assert stored and stored != "admin"


def test_register_creates_analyst(container, client):
    session_user = container.auth_service.register(name="Dana", email="Dana@Lab.com", password="secret")

    assert session_user.role == Role.ANALYST
    stored = client.users.get(session_user.id)
    assert stored.email == "dana@lab.com"
    assert stored.avatar == default_avatar("Dana")
    assert container.auth_service.authenticate("dana@lab.com", "secret").id == session_user.id


def test_register_duplicate_email(container):
    with pytest.raises(ValidationError, match="already registered"):
        container.auth_service.register(name="Other", email="ADMIN@sss.com", password="secret")


def test_register_short_password(container):
    with pytest.raises(ValidationError):
        container.auth_service.register(name="Dana", email="dana@lab.com", password="abc")


def test_default_avatar_encodes_name():
    assert default_avatar("Mike Ross") == "https://ui-avatars.com/api/?name=Mike+Ross&background=0ea5e9&color=fff"


def test_create_user_is_audited(container, client):
    user = container.user_service.create(
        actor=SUPPORT, name="New Chemist", email="new@lab.com", password="pass1", role="Chemist"
    )

    assert client.users.get(user.id).role == Role.CHEMIST
    log = client.audit_logs.list()[0]
    assert (log.action, log.target_id, log.target_name) == (AuditAction.CREATE, user.id, "New Chemist")
    assert client.notifications.list()[0].title == "New User Added"


def test_create_requires_password_and_unique_email(container):
    with pytest.raises(ValidationError):
        container.user_service.create(actor=ADMIN, name="X", email="x@lab.com", password="", role="Analyst")
    with pytest.raises(ValidationError):
        container.user_service.create(actor=ADMIN, name="X", email="admin@sss.com", password="pass1", role="Analyst")


def test_only_support_roles_manage_users(container):
    with pytest.raises(AuthorizationError):
        container.user_service.create(actor=CHEMIST, name="X", email="x@lab.com", password="pass1", role="Analyst")
    with pytest.raises(AuthorizationError):
        container.user_service.delete(actor=CHEMIST, user_id="6")


def test_update_keeps_password_when_blank(container, client):
    before = client.users.get("6").password_hash

    updated = container.user_service.update(actor=ADMIN, user_id="6", name="Michael Ross", password="")

    assert updated.name == "Michael Ross"
    assert client.users.get("6").password_hash == before


def test_update_password_and_deactivate(container):
    container.user_service.update(actor=ADMIN, user_id="6", password="newpass")
    assert container.auth_service.authenticate("analyst@labnexus.com", "newpass").id == "6"

    container.user_service.update(actor=ADMIN, user_id="6", status=UserStatus.INACTIVE.value)
    with pytest.raises(AuthenticationError):
        container.auth_service.authenticate("analyst@labnexus.com", "newpass")


def test_update_email_conflict(container):
    with pytest.raises(ValidationError):
        container.user_service.update(actor=ADMIN, user_id="6", email="chemist@labnexus.com")


def test_update_unknown_user(container):
    with pytest.raises(NotFoundError):
        container.user_service.update(actor=ADMIN, user_id="404", name="X")


def test_delete_user(container, client):
    container.user_service.delete(actor=ADMIN, user_id="6")

    assert client.users.get("6") is None
    assert client.notifications.list()[0].message == "Administrator deleted Mike Ross"


def test_cannot_delete_self(container, client):
    with pytest.raises(ValidationError):
        container.user_service.delete(actor=ADMIN, user_id="1")
    assert client.users.get("1") is not None
