from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Sequence, Union

Key = Union[str, int]
Record = Dict[str, Any]


class TableStore(Protocol):
    """Storage contract for one entity collection.

    Records are plain dicts in domain field names (camelCase). Every method
    raises ``StorageError`` when the underlying engine fails.
    """

    name: str

    def list(self, *, limit: Optional[int] = None) -> Sequence[Record]:
        raise NotImplementedError

    def get(self, key: Key) -> Optional[Record]:
        raise NotImplementedError

    def insert(self, record: Record) -> Key:
        """Insert one record and return its identity (auto id or supplied key)."""

        raise NotImplementedError

    def replace(self, record: Record) -> bool:
        """Overwrite every column of the row keyed by ``record['id']``.

        Returns False when no such row exists.
        """

        raise NotImplementedError

    def patch(self, key: Key, partial: Record) -> bool:
        raise NotImplementedError

    def delete(self, key: Key) -> bool:
        raise NotImplementedError

    def bulk_upsert(self, records: Sequence[Record]) -> int:
        """Insert-or-replace each record in order (last write wins).

        Rows are committed one by one; a failure leaves earlier rows in place.
        Returns the number of rows written.
        """

        raise NotImplementedError


class StorageBackend(Protocol):
    """A set of TableStores plus schema lifecycle."""

    def table(self, name: str) -> TableStore:
        raise NotImplementedError

    def initialize(self, *, reset: bool = False) -> Dict[str, Any]:
        """Create missing tables and seed defaults when empty.

        With ``reset=True`` every table is dropped and recreated first.
        """

        raise NotImplementedError
