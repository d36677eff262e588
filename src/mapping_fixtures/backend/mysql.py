# src/mapping_fixtures/backend/mysql.py
import logging
from typing import Any, Dict, Optional, Tuple

import mysql.connector
from mysql.connector.errors import (
    DatabaseError as MySQLDatabaseError,
    Error as MySQLError,
    IntegrityError as MySQLIntegrityError,
    OperationalError as MySQLOperationalError,
    ProgrammingError,
)

from ..errors import (
    ConnectionError,
    DatabaseError,
    OperationalError,
    QueryError,
    StoreObjectNotFoundError,
)
from .base import StorageBackend
from .config import MySQLConnectionConfig
from .dialect import MySQLDialect

# ER_NO_SUCH_TABLE, ER_BAD_DB_ERROR, ER_BAD_FIELD_ERROR
NOT_FOUND_ERRNOS = {1146: 'table', 1049: 'database', 1054: 'column'}


class MySQLBackend(StorageBackend):
    """MySQL synchronous storage backend implementation.

    Schemas are MySQL databases. The configured database is created on demand and
    selected once it exists, so the backend can connect before provisioning it.
    """

    flavor = 'mysql'

    def __init__(self, connection_config: Optional[MySQLConnectionConfig] = None, **kwargs):
        super().__init__(connection_config or MySQLConnectionConfig(), **kwargs)
        self._connection_args = self.config.to_dict()
        self._dialect = MySQLDialect()
        self._server_version_cache = self.config.version

    @property
    def dialect(self) -> MySQLDialect:
        """Get the MySQL dialect instance"""
        return self._dialect

    def connect(self) -> None:
        """Establish connection to MySQL server"""
        try:
            self._connection = mysql.connector.connect(**self._connection_args)
            version = self.get_server_version()
            self.log(logging.INFO, f"Connected to MySQL server version {'.'.join(map(str, version))}")
        except MySQLError as e:
            raise ConnectionError(f"Failed to connect to MySQL: {e}")

        if self.config.database and self.schema_exists(self.config.database):
            self._use(self.config.database)

    def disconnect(self) -> None:
        """Close connection to MySQL server"""
        if self._connection:
            self._connection.close()
            self._connection = None
            self.log(logging.INFO, "Disconnected from MySQL")

    def get_server_version(self) -> tuple:
        """Get MySQL server version"""
        if self._server_version_cache:
            return self._server_version_cache

        self.log(logging.DEBUG, "Querying MySQL server version")
        cursor = self._connection.cursor()
        try:
            cursor.execute("SELECT VERSION()")
            version_str = cursor.fetchone()[0]
        finally:
            cursor.close()

        version_parts = version_str.split('-')[0].split('.')
        version = tuple(int(part) for part in version_parts[:3])
        if len(version) < 3:
            version = version + (0,) * (3 - len(version))

        self._server_version_cache = version
        self.log(logging.DEBUG, f"Detected MySQL server version: {'.'.join(map(str, version))}")
        return version

    def _driver_errors(self) -> Tuple[type, ...]:
        return (MySQLError,)

    def _row_to_dict(self, cursor, row) -> Dict[str, Any]:
        return {description[0]: value for description, value in zip(cursor.description, row)}

    def _handle_error(self, error: Exception) -> None:
        """Handle database errors"""
        errno = getattr(error, 'errno', None)
        if errno in NOT_FOUND_ERRNOS:
            raise StoreObjectNotFoundError(
                f"MySQL {NOT_FOUND_ERRNOS[errno]} not found: {error}", getattr(error, 'msg', None)
            ) from error
        if isinstance(error, MySQLIntegrityError):
            raise DatabaseError(f"MySQL integrity error: {error}") from error
        elif isinstance(error, MySQLOperationalError):
            raise OperationalError(f"MySQL operational error: {error}") from error
        elif isinstance(error, ProgrammingError):
            raise QueryError(f"MySQL query error: {error}") from error
        elif isinstance(error, MySQLDatabaseError):
            raise DatabaseError(f"MySQL database error: {error}") from error
        elif isinstance(error, MySQLError):
            raise QueryError(f"MySQL query error: {error}") from error
        else:
            raise error

    def _use(self, schema: str) -> None:
        self.execute(f"USE {self.dialect.format_identifier(schema)}")
        self.log(logging.DEBUG, f"Selected database {schema}")

    def schema_exists(self, schema: str) -> bool:
        row = self.fetch_one(
            "SELECT COUNT(*) AS n FROM information_schema.schemata WHERE schema_name = %s", (schema,)
        )
        return bool(row and row['n'])

    def create_schema(self, schema: str) -> None:
        self.execute(f"CREATE DATABASE IF NOT EXISTS {self.dialect.format_identifier(schema)} "
                     f"CHARACTER SET {self.config.charset}")
        self.log(logging.INFO, f"Ensured MySQL database {schema} exists")
        if schema == self.config.database:
            self._use(schema)

    def table_exists(self, table: str, schema: Optional[str] = None) -> bool:
        schema = schema or self.config.database
        if not schema:
            return False
        row = self.fetch_one(
            "SELECT COUNT(*) AS n FROM information_schema.tables WHERE table_schema = %s AND table_name = %s",
            (schema, table),
        )
        return bool(row and row['n'])
