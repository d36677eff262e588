# src/mapping_fixtures/__init__.py
"""
Mapping fixtures for testing an ORM against the Northwind dataset.

This package provides:
- Northwind entity records, with mapped variants composed from a base record and an
  extras record
- A declarative mapping override layer (exclude, rename, table, schema, key) compiled
  into immutable mappings
- Read-only, no-tracking query contexts
- Shared store fixtures that seed SQLite or MySQL stores once per test class
- Generic query tests (mapping_fixtures.testsuite) that any fixture can run

Architecture:
- SQLiteBackend: standard-library sqlite3, schemas as attached databases
- MySQLBackend: mysql-connector-python, schemas as MySQL databases
- Both share statement execution and logging through StorageBackend
"""

__version__ = "0.3.0"

from .context import Query, QueryContext, QueryTrackingBehavior
from .entities import (
    Customer,
    CustomerExtras,
    Employee,
    EmployeeExtras,
    EntityKind,
    MappedEntity,
    Order,
    OrderExtras,
    ShipVia,
)
from .errors import (
    ConnectionError,
    ContextDisposedError,
    DatabaseError,
    FixtureNotInitializedError,
    InvalidMappingError,
    OperationalError,
    QueryError,
    SeedVerificationError,
    StoreObjectNotFoundError,
)
from .fixture import (
    MappingQueryFixtureBase,
    MySQLMappingQueryFixture,
    SharedStoreFixture,
    SQLiteMappingQueryFixture,
    SQLiteSchemaMappingQueryFixture,
)
from .mapping import (
    EXCLUDED,
    KEPT,
    ColumnMapping,
    EntityMapping,
    EntityOverrides,
    Excluded,
    Kept,
    Renamed,
    compile_entity_mapping,
)
from .model import MappingModel, ModelBuilder
from .sql_logger import TestSqlLogger

__all__ = [
    # Entities
    'Customer',
    'Employee',
    'Order',
    'CustomerExtras',
    'EmployeeExtras',
    'OrderExtras',
    'EntityKind',
    'MappedEntity',
    'ShipVia',

    # Mapping
    'EntityOverrides',
    'Excluded',
    'Kept',
    'Renamed',
    'EXCLUDED',
    'KEPT',
    'ColumnMapping',
    'EntityMapping',
    'compile_entity_mapping',
    'MappingModel',
    'ModelBuilder',

    # Contexts
    'Query',
    'QueryContext',
    'QueryTrackingBehavior',

    # Fixtures
    'SharedStoreFixture',
    'MappingQueryFixtureBase',
    'SQLiteMappingQueryFixture',
    'SQLiteSchemaMappingQueryFixture',
    'MySQLMappingQueryFixture',
    'TestSqlLogger',

    # Errors
    'DatabaseError',
    'ConnectionError',
    'OperationalError',
    'QueryError',
    'StoreObjectNotFoundError',
    'InvalidMappingError',
    'ContextDisposedError',
    'FixtureNotInitializedError',
    'SeedVerificationError',
]
