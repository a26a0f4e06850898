from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..core.exceptions import StorageError
from .dialects import SQLDialect
from .repository import Key, Record, TableStore
from .schema import TableSpec

logger = logging.getLogger(__name__)


class SQLTableStore(TableStore):
    """TableStore over any SQL dialect, driven by a TableSpec."""

    def __init__(self, spec: TableSpec, dialect: SQLDialect):
        self._spec = spec
        self._dialect = dialect
        self.name = spec.name

    @property
    def spec(self) -> TableSpec:
        return self._spec

    def _fail(self, operation: str, exc: BaseException) -> StorageError:
        logger.error("storage %s on %s failed: %s", operation, self.name, exc)
        return StorageError(str(exc), operation=operation, table=self.name)

    def _q(self, ident: str) -> str:
        return self._dialect.quote(ident)

    def _key(self, key: Key):
        return int(key) if self._spec.auto_id else str(key)

    def list(self, *, limit: Optional[int] = None) -> Sequence[Record]:
        sql = f"SELECT * FROM {self._q(self.name)} ORDER BY {self._spec.order_by}"
        params: list[object] = []
        if limit is not None:
            sql += f" LIMIT {self._dialect.placeholder}"
            params.append(int(limit))
        try:
            with self._dialect.cursor() as (_, cur):
                cur.execute(sql, tuple(params))
                rows = self._dialect.fetchall(cur)
        except self._dialect.errors as exc:
            raise self._fail("list", exc) from exc
        return [self._spec.to_record(r) for r in rows]

    def get(self, key: Key) -> Optional[Record]:
        sql = (
            f"SELECT * FROM {self._q(self.name)} "
            f"WHERE {self._q(self._spec.key_column)}={self._dialect.placeholder}"
        )
        try:
            key = self._key(key)
        except (TypeError, ValueError):
            return None
        try:
            with self._dialect.cursor() as (_, cur):
                cur.execute(sql, (key,))
                row = self._dialect.fetchone(cur)
        except self._dialect.errors as exc:
            raise self._fail("get", exc) from exc
        return self._spec.to_record(row) if row else None

    def insert(self, record: Record) -> Key:
        row = self._spec.to_row(record, include_key=not self._spec.auto_id)
        if not self._spec.auto_id and row.get(self._spec.key_column) in (None, ""):
            raise StorageError("primary key is required", operation="insert", table=self.name, status=400)
        cols = list(row)
        sql = (
            f"INSERT INTO {self._q(self.name)} ({', '.join(self._q(c) for c in cols)}) "
            f"VALUES ({self._dialect.placeholders(len(cols))})"
        )
        try:
            with self._dialect.cursor() as (_, cur):
                cur.execute(sql, tuple(row[c] for c in cols))
                if self._spec.auto_id:
                    return self._dialect.last_insert_id(cur)
        except self._dialect.errors as exc:
            raise self._fail("insert", exc) from exc
        return row[self._spec.key_column]

    def replace(self, record: Record) -> bool:
        key = record.get(self._spec.key_field)
        if key in (None, ""):
            raise StorageError("primary key is required", operation="replace", table=self.name, status=400)
        # Full replace: fields missing from the record are written as NULL.
        full = {f: record.get(f) for f, _ in self._spec.fields}
        row = self._spec.to_row(full, include_key=False)
        return self._update("replace", key, row)

    def patch(self, key: Key, partial: Record) -> bool:
        row = self._spec.to_row(partial, include_key=False)
        if not row:
            return self.get(key) is not None
        return self._update("patch", key, row)

    def _update(self, operation: str, key: Key, row: Record) -> bool:
        try:
            key = self._key(key)
        except (TypeError, ValueError):
            return False
        assignments = ", ".join(f"{self._q(c)}={self._dialect.placeholder}" for c in row)
        sql = (
            f"UPDATE {self._q(self.name)} SET {assignments} "
            f"WHERE {self._q(self._spec.key_column)}={self._dialect.placeholder}"
        )
        try:
            with self._dialect.cursor() as (_, cur):
                cur.execute(sql, tuple(row.values()) + (key,))
                return cur.rowcount > 0
        except self._dialect.errors as exc:
            raise self._fail(operation, exc) from exc

    def delete(self, key: Key) -> bool:
        sql = f"DELETE FROM {self._q(self.name)} WHERE {self._q(self._spec.key_column)}={self._dialect.placeholder}"
        try:
            key = self._key(key)
        except (TypeError, ValueError):
            return False
        try:
            with self._dialect.cursor() as (_, cur):
                cur.execute(sql, (key,))
                return cur.rowcount > 0
        except self._dialect.errors as exc:
            raise self._fail("delete", exc) from exc

    def bulk_upsert(self, records: Sequence[Record]) -> int:
        written = 0
        try:
            with self._dialect.cursor() as (conn, cur):
                for record in records:
                    row = self._spec.to_row({f: record.get(f) for f, _ in self._spec.fields})
                    if row.get(self._spec.key_column) in (None, ""):
                        raise StorageError(
                            f"row {written + 1} has no primary key",
                            operation="bulk_upsert",
                            table=self.name,
                            status=400,
                        )
                    cols = list(row)
                    cur.execute(self._dialect.upsert_sql(self._spec, cols), tuple(row[c] for c in cols))
                    conn.commit()
                    written += 1
        except self._dialect.errors as exc:
            raise self._fail("bulk_upsert", exc) from exc
        return written

    def count(self) -> int:
        try:
            with self._dialect.cursor() as (_, cur):
                cur.execute(f"SELECT COUNT(*) AS n FROM {self._q(self.name)}")
                row = self._dialect.fetchone(cur)
        except self._dialect.errors as exc:
            raise self._fail("count", exc) from exc
        return int(row["n"]) if row else 0
