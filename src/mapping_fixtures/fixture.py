# src/mapping_fixtures/fixture.py
"""Shared store fixtures.

A fixture is created once per test class. `initialize()` compiles the mapping model,
connects the backend and provisions (or verifies) the seeded Northwind dataset;
`create_context()` then hands out one read-only context per test; `dispose()` releases
the connection and every context still open at the end of the class.
"""

import logging
import weakref
from abc import ABC, abstractmethod
from typing import Optional

from .backend import MySQLBackend, MySQLConnectionConfig, SQLiteBackend, SQLiteConnectionConfig
from .backend.base import StorageBackend
from .context import QueryContext
from .entities import EntityKind
from .errors import FixtureNotInitializedError
from .mapping import EntityOverrides
from .model import MappingModel, ModelBuilder
from .northwind.seed import NorthwindSeeder
from .sql_logger import TestSqlLogger

logger = logging.getLogger(__name__)


class SharedStoreFixture(ABC):
    """Owns one backend connection and one compiled mapping model for a whole test class."""

    store_name = 'Northwind'
    # Schema the mapped tables live in; None or '' selects the store's default schema.
    database_schema: Optional[str] = None

    def __init__(self):
        self._backend: Optional[StorageBackend] = None
        self._model: Optional[MappingModel] = None
        self._contexts: "weakref.WeakSet[QueryContext]" = weakref.WeakSet()
        self.test_sql_logger = TestSqlLogger()

    @abstractmethod
    def create_backend(self) -> StorageBackend:
        """Create (but do not connect) the backend for this store flavor."""

    def on_model_creating(self, builder: ModelBuilder) -> None:
        """Register entity overrides. Subclasses extend this and call super()."""

    def build_model(self) -> MappingModel:
        builder = ModelBuilder()
        self.on_model_creating(builder)
        return builder.build()

    @property
    def initialized(self) -> bool:
        return self._model is not None and self._backend is not None

    @property
    def model(self) -> MappingModel:
        if self._model is None:
            raise FixtureNotInitializedError(f"{type(self).__name__} has not been initialized")
        return self._model

    @property
    def backend(self) -> StorageBackend:
        if self._backend is None:
            raise FixtureNotInitializedError(f"{type(self).__name__} has not been initialized")
        return self._backend

    def initialize(self, database_schema: Optional[str] = None) -> 'SharedStoreFixture':
        """Compile the model and make sure the seeded store is reachable.

        Args:
            database_schema: overrides the class's `database_schema` for this instance.

        Raises:
            InvalidMappingError: the overrides do not compile; nothing is connected.
            SeedVerificationError: the store holds data other than the seeded dataset.
        """
        if self.initialized:
            return self
        if database_schema is not None:
            self.database_schema = database_schema

        model = self.build_model()
        backend = self.create_backend()
        self.test_sql_logger.install(backend)
        try:
            backend.connect()
            NorthwindSeeder(backend, self.database_schema).ensure()
        except Exception:
            self.test_sql_logger.uninstall()
            backend.disconnect()
            raise
        self.test_sql_logger.clear()

        self._model = model
        self._backend = backend
        logger.info(f"Initialized {type(self).__name__} for {self.store_name} "
                    f"(schema: {self.database_schema or 'default'})")
        return self

    def create_context(self) -> QueryContext:
        if not self.initialized:
            raise FixtureNotInitializedError(
                f"Call initialize() on {type(self).__name__} before creating contexts"
            )
        context = QueryContext(self._backend, self._model)
        self._contexts.add(context)
        return context

    def dispose(self) -> None:
        # Outstanding contexts are disposed together with the fixture
        for context in list(self._contexts):
            context.dispose()
        self._contexts.clear()
        if self._backend is not None:
            self._backend.disconnect()
            self._backend = None
        if self.test_sql_logger.installed:
            self.test_sql_logger.uninstall()
        self._model = None
        logger.info(f"Disposed {type(self).__name__}")

    def __enter__(self) -> 'SharedStoreFixture':
        return self.initialize()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()


class MappingQueryFixtureBase(SharedStoreFixture):
    """Maps the mapped Northwind entities onto the store, one persisted field each.

    Customers are deliberately mapped to a table (and, when a schema is in use, a
    schema) that does not exist. Flavor fixtures overlay the real names on top;
    without that overlay customers compile fine but fail when queried.
    """

    def on_model_creating(self, builder: ModelBuilder) -> None:
        super().on_model_creating(builder)

        customer = (
            EntityOverrides(EntityKind.CUSTOMER)
            .exclude('address', 'city', 'company_name', 'contact_name', 'contact_title',
                     'country', 'fax', 'phone', 'postal_code', 'region')
            .set_key('customer_id')
            .rename_column('company_name2', 'Broken')
            .set_table('Broken')
        )
        if self.database_schema:
            customer = customer.set_schema('wrong')
        builder.entity(customer)

        builder.entity(
            EntityOverrides(EntityKind.EMPLOYEE)
            .exclude('address', 'birth_date', 'city', 'country', 'extension', 'first_name',
                     'hire_date', 'home_phone', 'last_name', 'notes', 'photo', 'photo_path',
                     'postal_code', 'region', 'reports_to', 'title', 'title_of_courtesy')
            .set_key('employee_id')
            .rename_column('city2', 'City')
            .set_table('Employees')
            .set_schema(self.database_schema)
        )

        builder.entity(
            EntityOverrides(EntityKind.ORDER)
            .exclude('customer_id', 'employee_id', 'freight', 'order_date', 'required_date',
                     'ship_address', 'ship_city', 'ship_country', 'ship_name', 'ship_postal_code',
                     'ship_region', 'ship_via', 'shipped_date')
            .set_key('order_id')
            .rename_column('ship_via2', 'ShipVia')
            .set_table('Orders')
            .set_schema(self.database_schema)
        )

    def map_customers_to_store(self, builder: ModelBuilder) -> None:
        """Overlay the store's real customer table on the broken relational mapping."""
        builder.entity(
            EntityOverrides(EntityKind.CUSTOMER)
            .rename_column('company_name2', 'CompanyName')
            .set_table('Customers')
            .set_schema(self.database_schema)
        )


class SQLiteMappingQueryFixture(MappingQueryFixtureBase):
    """In-memory SQLite store in the default schema."""

    database_schema = None

    def __init__(self, database: str = ':memory:'):
        super().__init__()
        self.database = database

    def create_backend(self) -> StorageBackend:
        return SQLiteBackend(SQLiteConnectionConfig(database=self.database))

    def on_model_creating(self, builder: ModelBuilder) -> None:
        super().on_model_creating(builder)
        self.map_customers_to_store(builder)


class SQLiteSchemaMappingQueryFixture(SQLiteMappingQueryFixture):
    """SQLite store with the Northwind tables in an attached `northwind` schema."""

    database_schema = 'northwind'


class MySQLMappingQueryFixture(MappingQueryFixtureBase):
    """MySQL store; the configured database is the schema."""

    def __init__(self, config: MySQLConnectionConfig):
        super().__init__()
        self.config = config
        self.database_schema = config.database

    def create_backend(self) -> StorageBackend:
        return MySQLBackend(self.config)

    def on_model_creating(self, builder: ModelBuilder) -> None:
        super().on_model_creating(builder)
        self.map_customers_to_store(builder)
