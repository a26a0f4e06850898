"""SQL differences between the embedded (SQLite) and relational (MySQL) stores."""

from __future__ import annotations

import sqlite3
from typing import Callable, ContextManager, List, Sequence, Tuple, Type

import mysql.connector

from ..database import mysql_base, sqlite_base
from .schema import TableSpec


class SQLDialect:
    name = "sql"
    placeholder = "?"
    quote_char = '"'
    errors: Tuple[Type[BaseException], ...] = ()

    def __init__(self, cursor_factory: Callable[..., ContextManager], conn_factory):
        self._cursor_factory = cursor_factory
        self._conn_factory = conn_factory

    def cursor(self) -> ContextManager:
        return self._cursor_factory(self._conn_factory)

    def fetchone(self, cur):
        raise NotImplementedError

    def fetchall(self, cur):
        raise NotImplementedError

    def quote(self, ident: str) -> str:
        return f"{self.quote_char}{ident}{self.quote_char}"

    def placeholders(self, n: int) -> str:
        return ",".join([self.placeholder] * n)

    # -------- DDL --------
    def column_type(self, spec: TableSpec, column: str) -> str:
        raise NotImplementedError

    def create_table_sql(self, spec: TableSpec) -> str:
        cols = [f"{self.quote(c)} {self.column_type(spec, c)}" for c in spec.columns]
        return f"CREATE TABLE IF NOT EXISTS {self.quote(spec.name)} ({', '.join(cols)})"

    def drop_table_sql(self, spec: TableSpec) -> str:
        return f"DROP TABLE IF EXISTS {self.quote(spec.name)}"

    def add_column_sql(self, spec: TableSpec, column: str) -> str:
        return f"ALTER TABLE {self.quote(spec.name)} ADD COLUMN {self.quote(column)} {self.column_type(spec, column)}"

    # -------- DML --------
    def upsert_sql(self, spec: TableSpec, columns: Sequence[str]) -> str:
        raise NotImplementedError

    def last_insert_id(self, cur) -> int:
        return int(cur.lastrowid)


class SQLiteDialect(SQLDialect):
    name = "sqlite"
    placeholder = "?"
    quote_char = '"'
    errors = (sqlite3.Error,)

    def __init__(self, conn_factory: sqlite_base.SQLiteConnection):
        super().__init__(sqlite_base.db_cursor, conn_factory)

    def fetchone(self, cur):
        return sqlite_base.fetchone(cur)

    def fetchall(self, cur):
        return sqlite_base.fetchall(cur)

    def column_type(self, spec: TableSpec, column: str) -> str:
        if column == spec.key_column:
            return "INTEGER PRIMARY KEY AUTOINCREMENT" if spec.auto_id else "TEXT PRIMARY KEY NOT NULL"
        if column in spec.unique_columns:
            return "TEXT UNIQUE"
        if column in spec.bool_columns:
            return "INTEGER NOT NULL DEFAULT 0"
        return "TEXT"

    def upsert_sql(self, spec: TableSpec, columns: Sequence[str]) -> str:
        cols = ", ".join(self.quote(c) for c in columns)
        updates = ", ".join(
            f"{self.quote(c)}=excluded.{self.quote(c)}" for c in columns if c != spec.key_column
        )
        return (
            f"INSERT INTO {self.quote(spec.name)} ({cols}) VALUES ({self.placeholders(len(columns))}) "
            f"ON CONFLICT({self.quote(spec.key_column)}) DO UPDATE SET {updates}"
        )

    def list_tables(self) -> List[str]:
        with self.cursor() as (_, cur):
            cur.execute("SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'")
            return [r["name"] for r in self.fetchall(cur)]

    def get_version(self) -> int:
        with self.cursor() as (_, cur):
            cur.execute("PRAGMA user_version")
            row = cur.fetchone()
            return int(row[0]) if row else 0

    def set_version(self, version: int) -> None:
        with self.cursor() as (_, cur):
            cur.execute(f"PRAGMA user_version = {int(version)}")


class MySQLDialect(SQLDialect):
    name = "mysql"
    placeholder = "%s"
    quote_char = "`"
    errors = (mysql.connector.Error,)

    def __init__(self, conn_factory):
        super().__init__(mysql_base.db_cursor, conn_factory)

    def fetchone(self, cur):
        return mysql_base.fetchone(cur)

    def fetchall(self, cur):
        return mysql_base.fetchall(cur)

    def column_type(self, spec: TableSpec, column: str) -> str:
        if column == spec.key_column:
            return "INT AUTO_INCREMENT PRIMARY KEY" if spec.auto_id else "VARCHAR(191) NOT NULL PRIMARY KEY"
        if column in spec.unique_columns:
            return "VARCHAR(191) UNIQUE"
        if column in spec.bool_columns:
            return "TINYINT(1) NOT NULL DEFAULT 0"
        if spec.column_types.get(column) == "long":
            return "LONGTEXT"
        return "TEXT"

    def create_table_sql(self, spec: TableSpec) -> str:
        return super().create_table_sql(spec) + " CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"

    def upsert_sql(self, spec: TableSpec, columns: Sequence[str]) -> str:
        cols = ", ".join(self.quote(c) for c in columns)
        updates = ", ".join(
            f"{self.quote(c)}=VALUES({self.quote(c)})" for c in columns if c != spec.key_column
        )
        return (
            f"INSERT INTO {self.quote(spec.name)} ({cols}) VALUES ({self.placeholders(len(columns))}) "
            f"ON DUPLICATE KEY UPDATE {updates}"
        )

    def list_tables(self) -> List[str]:
        with self.cursor() as (conn, _):
            cur = conn.cursor()
            try:
                cur.execute("SHOW TABLES")
                return [row[0] for row in cur.fetchall()]
            finally:
                cur.close()
