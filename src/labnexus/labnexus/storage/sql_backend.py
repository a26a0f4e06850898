from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Tuple

from ..core.exceptions import StorageError
from ..database.connection import DatabaseConnection
from ..database.seed import seed_defaults
from ..database.sqlite_base import SQLiteConfig, SQLiteConnection
from .dialects import MySQLDialect, SQLDialect, SQLiteDialect
from .repository import StorageBackend
from .schema import TABLE_ORDER, TABLES
from .sql_store import SQLTableStore

logger = logging.getLogger(__name__)


class SQLStorageBackend(StorageBackend):
    """Backend over one SQL database; one SQLTableStore per table."""

    def __init__(self, dialect: SQLDialect):
        self._dialect = dialect
        self._stores = {name: SQLTableStore(spec, dialect) for name, spec in TABLES.items()}

    @property
    def dialect(self) -> SQLDialect:
        return self._dialect

    def table(self, name: str) -> SQLTableStore:
        store = self._stores.get(name)
        if store is None:
            raise StorageError(f"unknown table {name!r}", operation="table", table=name, status=405)
        return store

    def list_tables(self) -> List[str]:
        return self._dialect.list_tables()

    def _exec_all(self, statements: List[Tuple[str, str]], operation: str) -> None:
        """Run (table, statement) pairs; a failure names the table it hit."""

        table = None
        try:
            with self._dialect.cursor() as (_, cur):
                for table, stmt in statements:
                    cur.execute(stmt)
        except self._dialect.errors as exc:
            raise StorageError(str(exc), operation=operation, table=table) from exc

    def drop_all(self) -> None:
        self._exec_all([(n, self._dialect.drop_table_sql(TABLES[n])) for n in reversed(TABLE_ORDER)], "reset")

    def create_all(self) -> None:
        self._exec_all([(n, self._dialect.create_table_sql(TABLES[n])) for n in TABLE_ORDER], "init")

    def initialize(self, *, reset: bool = False) -> Dict[str, Any]:
        if reset:
            logger.warning("dropping all %s tables", self._dialect.name)
            self.drop_all()
        self.create_all()

        seeded: Mapping[str, int] = {}
        if self.table("users").count() == 0:
            seeded = seed_defaults(self)
            logger.info("seeded default data: %s", dict(seeded))
        return {"success": True, "message": "Database Ready", "seeded": bool(seeded)}


class MySQLStorageBackend(SQLStorageBackend):
    """Relational store behind the HTTP handler."""

    def __init__(self, conn_factory: DatabaseConnection):
        super().__init__(MySQLDialect(conn_factory))


# Columns introduced after the first local schema version.
LOCAL_MIGRATIONS: Dict[int, List[tuple]] = {
    2: [("job_requests", "completion_comment")],
}


class LocalStorageBackend(SQLStorageBackend):
    """Embedded store kept in a single SQLite file.

    The schema is versioned with ``PRAGMA user_version``; older files are
    migrated forward before use.
    """

    def __init__(self, path: str, *, schema_version: int):
        self._path = path
        self._schema_version = int(schema_version)
        super().__init__(SQLiteDialect(SQLiteConnection(SQLiteConfig(path=path))))

    @property
    def path(self) -> str:
        return self._path

    def _migrate(self, current: int) -> None:
        dialect: SQLiteDialect = self._dialect  # type: ignore[assignment]
        for version in range(current + 1, self._schema_version + 1):
            steps = LOCAL_MIGRATIONS.get(version, [])
            statements = []
            for table, column in steps:
                with dialect.cursor() as (_, cur):
                    cur.execute(f"PRAGMA table_info({dialect.quote(table)})")
                    existing = {r["name"] for r in dialect.fetchall(cur)}
                if column not in existing:
                    statements.append((table, dialect.add_column_sql(TABLES[table], column)))
            if statements:
                self._exec_all(statements, "migrate")
            logger.info("local schema migrated to version %s", version)

    def initialize(self, *, reset: bool = False) -> Dict[str, Any]:
        dialect: SQLiteDialect = self._dialect  # type: ignore[assignment]
        try:
            current = dialect.get_version()
            has_tables = bool(dialect.list_tables())
        except dialect.errors as exc:
            raise StorageError(str(exc), operation="init") from exc

        if not reset and has_tables and current < self._schema_version:
            try:
                self._migrate(current)
            except dialect.errors as exc:
                raise StorageError(str(exc), operation="migrate") from exc

        result = super().initialize(reset=reset)
        try:
            dialect.set_version(self._schema_version)
        except dialect.errors as exc:
            raise StorageError(str(exc), operation="init") from exc
        result["schemaVersion"] = self._schema_version
        return result
