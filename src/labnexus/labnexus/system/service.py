from __future__ import annotations

import logging
import secrets
from typing import Any, Dict

from ..api.client import DataClient
from ..core.constants import DATABASE_TARGET_ID
from ..core.enums import SUPPORT_ROLES, AuditAction
from ..core.exceptions import AuthorizationError, ValidationError
from ..equipment.cache import InventoryCache
from ..notifications.audit import AuditTrail
from ..users.model import SessionUser

logger = logging.getLogger(__name__)


class SystemService:
    """Startup initialization and the two-step global reset."""

    def __init__(self, client: DataClient, audit: AuditTrail, cache: InventoryCache):
        self._client = client
        self._audit = audit
        self._cache = cache
        self._pending: Dict[str, str] = {}

    @staticmethod
    def _require_admin(actor: SessionUser) -> None:
        if actor.role not in SUPPORT_ROLES:
            raise AuthorizationError("Only Admin or Supporting users can reset the database")

    def initialize(self) -> Dict[str, Any]:
        result = self._client.init()
        logger.info("storage initialized: %s", result)
        self._cache.clear()
        return result

    def request_reset(self, actor: SessionUser) -> str:
        """First step: hand out a single-use confirmation token."""

        self._require_admin(actor)
        token = secrets.token_urlsafe(16)
        self._pending[actor.id] = token
        return token

    def reset(self, actor: SessionUser, token: str) -> Dict[str, Any]:
        """Second step: wipe all data back to seed defaults.

        The RESET entry is written after the wipe so it survives it.
        """

        self._require_admin(actor)
        expected = self._pending.pop(actor.id, None)
        if not expected or not token or not secrets.compare_digest(expected, str(token)):
            raise ValidationError("Reset was not confirmed")

        logger.warning("global reset requested by user %s", actor.id)
        result = self._client.reset()
        self._audit.record(
            actor,
            AuditAction.RESET,
            target_id=DATABASE_TARGET_ID,
            target_name="System Database",
            subject="System",
            details="Full database reset to defaults",
        )
        self._cache.refresh()
        return result
