from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role, UserStatus


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: Plain data object, no storage access here.
    """

    id: str
    name: str
    email: str
    role: Role
    avatar: Optional[str] = None
    password_hash: Optional[str] = None
    status: UserStatus = UserStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == UserStatus.ACTIVE


@dataclass(frozen=True)
class SessionUser:
    """The acting user of one session, as kept in the Flask session."""

    id: str
    name: str
    role: Role
