from __future__ import annotations

import logging
from typing import List

from ..api.client import DataClient
from ..core.constants import CATEGORIES_SETTING_ID
from ..database.seed import SEED_CATEGORIES

logger = logging.getLogger(__name__)


class CategoryService:
    """Ordered, append-only category vocabulary kept in Settings."""

    def __init__(self, client: DataClient):
        self._client = client

    def list(self) -> List[str]:
        values = self._client.settings.get(CATEGORIES_SETTING_ID)
        if values is None:
            return list(SEED_CATEGORIES)
        return values

    def ensure(self, category: str) -> bool:
        """Append ``category`` unless already present. Returns True when added."""

        category = (category or "").strip()
        if not category:
            return False
        current = self.list()
        if category in current:
            return False
        self._client.settings.put(CATEGORIES_SETTING_ID, current + [category])
        logger.info("category added: %s", category)
        return True
