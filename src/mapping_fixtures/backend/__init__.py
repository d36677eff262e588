# src/mapping_fixtures/backend/__init__.py
"""
Storage backends the shared fixtures run against.

- SQLiteBackend: standard-library sqlite3, schemas as attached databases
- MySQLBackend: mysql-connector-python, schemas as MySQL databases
- Both translate driver errors into mapping_fixtures.errors
"""

from .base import QueryResult, StorageBackend, sql_logger
from .config import ConnectionConfig, MySQLConnectionConfig, SQLiteConnectionConfig
from .dialect import MySQLDialect, SQLDialect, SQLiteDialect
from .mysql import MySQLBackend
from .sqlite import SQLiteBackend

__all__ = [
    # Backends
    'StorageBackend',
    'SQLiteBackend',
    'MySQLBackend',
    'QueryResult',
    'sql_logger',

    # Configuration
    'ConnectionConfig',
    'SQLiteConnectionConfig',
    'MySQLConnectionConfig',

    # Dialects
    'SQLDialect',
    'SQLiteDialect',
    'MySQLDialect',
]
