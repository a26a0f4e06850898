from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..api.client import DataClient
from ..users.model import User
from .categories import CategoryService
from .model import Equipment


@dataclass(frozen=True)
class InventoryView:
    """Result of one full fetch: what every dependent view renders from."""

    equipment: List[Equipment] = field(default_factory=list)
    users: List[User] = field(default_factory=list)
    categories: List[str] = field(default_factory=list)


class InventoryCache:
    """Keeps the last full fetch. No incremental updates: refresh re-reads everything."""

    def __init__(self, client: DataClient, categories: CategoryService):
        self._client = client
        self._categories = categories
        self._view: Optional[InventoryView] = None

    @property
    def view(self) -> InventoryView:
        if self._view is None:
            return self.refresh()
        return self._view

    def refresh(self) -> InventoryView:
        self._view = InventoryView(
            equipment=self._client.equipment.list(),
            users=self._client.users.list(),
            categories=self._categories.list(),
        )
        return self._view

    def clear(self) -> None:
        self._view = None
