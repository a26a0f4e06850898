from __future__ import annotations

import logging
import uuid
from typing import List, Optional
from urllib.parse import quote_plus

from werkzeug.security import check_password_hash, generate_password_hash

from ..api.client import DataClient
from ..common.validators import optional_enum, require_enum, require_max_bytes, require_min_length, require_non_empty
from ..core.constants import MAX_AVATAR_BYTES, MIN_PASSWORD_LENGTH
from ..core.enums import SUPPORT_ROLES, AuditAction, Role, UserStatus
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..notifications.audit import AuditTrail
from .model import SessionUser, User

logger = logging.getLogger(__name__)


def default_avatar(name: str) -> str:
    return f"https://ui-avatars.com/api/?name={quote_plus(name)}&background=0ea5e9&color=fff"


def _normalize_email(email: Optional[str]) -> str:
    return require_non_empty(email, "Email").lower()


def _email_taken(users: List[User], email: str, *, exclude_id: Optional[str] = None) -> bool:
    return any(u.email.lower() == email and u.id != exclude_id for u in users)


class AuthService:
    """Use case: sign in and self-registration."""

    def __init__(self, client: DataClient):
        self._client = client

    def _find_by_email(self, email: str) -> Optional[User]:
        for user in self._client.users.list():
            if user.email.lower() == email:
                return user
        return None

    def authenticate(self, email: str, password: str) -> SessionUser:
        user = self._find_by_email((email or "").strip().lower())
        if not user or not user.is_active or not user.password_hash:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # Unknown hash method in a stored value.
            ok = False
        if not ok:
            raise AuthenticationError("Invalid email or password")

        logger.info("user %s signed in", user.id)
        return SessionUser(id=user.id, name=user.name, role=user.role)

    def register(self, *, name: str, email: str, password: str) -> SessionUser:
        """Self-registration always yields an Analyst account."""

        name = require_non_empty(name, "Name")
        email = _normalize_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if self._find_by_email(email):
            raise ValidationError("This email is already registered. Please sign in.")

        user = User(
            id=str(uuid.uuid4()),
            name=name,
            email=email,
            role=Role.ANALYST,
            avatar=default_avatar(name),
            password_hash=generate_password_hash(password),
        )
        self._client.users.add(user)
        logger.info("user %s registered", user.id)
        return SessionUser(id=user.id, name=user.name, role=user.role)


class UserService:
    """Use case: manage users (Admin/Supporting)."""

    def __init__(self, client: DataClient, audit: AuditTrail):
        self._client = client
        self._audit = audit

    @staticmethod
    def _require_manager(actor: SessionUser) -> None:
        if actor.role not in SUPPORT_ROLES:
            raise AuthorizationError("Only Admin or Supporting users can manage users")

    def list(self) -> List[User]:
        return self._client.users.list()

    def create(
        self,
        *,
        actor: SessionUser,
        name: str,
        email: str,
        password: str,
        role,
        avatar: Optional[str] = None,
    ) -> User:
        self._require_manager(actor)

        name = require_non_empty(name, "Name")
        email = _normalize_email(email)
        role = require_enum(Role, role, "Role")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        avatar = require_max_bytes(avatar, "Avatar", MAX_AVATAR_BYTES)

        if _email_taken(self._client.users.list(), email):
            raise ValidationError("A user with this email already exists.")

        user = User(
            id=str(uuid.uuid4()),
            name=name,
            email=email,
            role=role,
            avatar=avatar or default_avatar(name),
            password_hash=generate_password_hash(password),
        )
        self._client.users.add(user)
        self._audit.record(actor, AuditAction.CREATE, target_id=user.id, target_name=user.name, subject="User")
        return user

    def update(
        self,
        *,
        actor: SessionUser,
        user_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
        role=None,
        password: Optional[str] = None,
        avatar: Optional[str] = None,
        status=None,
    ) -> User:
        """Partial update; a blank password leaves the current one untouched."""

        self._require_manager(actor)

        user = self._client.users.get(user_id)
        if not user:
            raise NotFoundError("User does not exist")

        changes = {}
        if name is not None:
            changes["name"] = require_non_empty(name, "Name")
        if email is not None:
            email = _normalize_email(email)
            if _email_taken(self._client.users.list(), email, exclude_id=user.id):
                raise ValidationError("A user with this email already exists.")
            changes["email"] = email
        role = optional_enum(Role, role, "Role")
        if role is not None:
            changes["role"] = role
        status = optional_enum(UserStatus, status, "Status")
        if status is not None:
            if status == UserStatus.INACTIVE and user.id == actor.id:
                raise ValidationError("You cannot deactivate your own account")
            changes["status"] = status
        if password:
            require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
            changes["password_hash"] = generate_password_hash(password)
        if avatar is not None:
            changes["avatar"] = require_max_bytes(avatar, "Avatar", MAX_AVATAR_BYTES)

        if changes and not self._client.users.update(user.id, **changes):
            raise NotFoundError("User does not exist")

        updated = self._client.users.get(user.id) or user
        self._audit.record(actor, AuditAction.UPDATE, target_id=user.id, target_name=updated.name, subject="User")
        return updated

    def delete(self, *, actor: SessionUser, user_id: str) -> None:
        self._require_manager(actor)
        if str(user_id) == actor.id:
            raise ValidationError("You cannot delete your own account")

        user = self._client.users.get(user_id)
        if not user:
            raise NotFoundError("User does not exist")
        if not self._client.users.delete(user.id):
            raise NotFoundError("User does not exist")

        self._audit.record(actor, AuditAction.DELETE, target_id=user.id, target_name=user.name, subject="User")
