# src/mapping_fixtures/backend/sqlite.py
import datetime
import logging
import sqlite3
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from ..errors import (
    ConnectionError,
    DatabaseError,
    OperationalError,
    QueryError,
    StoreObjectNotFoundError,
)
from .base import StorageBackend
from .config import SQLiteConnectionConfig
from .dialect import SQLiteDialect

_NOT_FOUND_PREFIXES = ('no such table', 'no such column', 'unknown database')


class SQLiteBackend(StorageBackend):
    """SQLite storage backend. Schemas are attached databases."""

    flavor = 'sqlite'

    driver_types = {
        Decimal: float,
        datetime.datetime: str,
    }

    def __init__(self, connection_config: Optional[SQLiteConnectionConfig] = None, **kwargs):
        super().__init__(connection_config or SQLiteConnectionConfig(), **kwargs)
        self._dialect = SQLiteDialect()

    @property
    def dialect(self) -> SQLiteDialect:
        return self._dialect

    def connect(self) -> None:
        """Open the database file (or in-memory database)"""
        try:
            self._connection = sqlite3.connect(**self.config.to_dict())
            self.log(logging.INFO, f"Connected to SQLite database {self.config.database} "
                                   f"(SQLite {sqlite3.sqlite_version})")
        except sqlite3.Error as e:
            raise ConnectionError(f"Failed to connect to SQLite: {e}")

    def disconnect(self) -> None:
        if self._connection:
            self._connection.close()
            self._connection = None
            self.log(logging.INFO, "Disconnected from SQLite")

    def _driver_errors(self) -> Tuple[type, ...]:
        return (sqlite3.Error,)

    def _row_to_dict(self, cursor, row) -> Dict[str, Any]:
        return {description[0]: value for description, value in zip(cursor.description, row)}

    def _handle_error(self, error: Exception) -> None:
        """Handle database errors"""
        message = str(error)
        if isinstance(error, sqlite3.OperationalError):
            if message.lower().startswith(_NOT_FOUND_PREFIXES):
                name = message.split(':', 1)[1].strip() if ':' in message else None
                raise StoreObjectNotFoundError(f"SQLite object not found: {message}", name) from error
            raise OperationalError(f"SQLite operational error: {message}") from error
        elif isinstance(error, sqlite3.DatabaseError):
            raise DatabaseError(f"SQLite database error: {message}") from error
        elif isinstance(error, sqlite3.Error):
            raise QueryError(f"SQLite query error: {message}") from error
        else:
            raise error

    def _attach_target(self, schema: str) -> str:
        database = self.config.database
        if not database or database == ':memory:':
            return ':memory:'
        path = Path(database)
        return str(path.with_name(f"{path.stem}.{schema}.db"))

    def schema_exists(self, schema: str) -> bool:
        rows = self.fetch_all("PRAGMA database_list")
        return any(row['name'] == schema for row in rows)

    def create_schema(self, schema: str) -> None:
        if self.schema_exists(schema):
            return
        target = self._attach_target(schema)
        self.execute(f"ATTACH DATABASE ? AS {self.dialect.format_identifier(schema)}", (target,))
        self.log(logging.INFO, f"Attached schema {schema} ({target})")

    def table_exists(self, table: str, schema: Optional[str] = None) -> bool:
        if schema and not self.schema_exists(schema):
            return False
        master = self.dialect.qualify('sqlite_master', schema)
        row = self.fetch_one(f"SELECT COUNT(*) AS n FROM {master} WHERE type = 'table' AND name = ?", (table,))
        return bool(row and row['n'])
