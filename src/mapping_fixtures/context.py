# src/mapping_fixtures/context.py
"""Read-only query contexts over a compiled mapping model.

A context is short-lived: create one per test, use it inside a `with` block and let the
block dispose it. Queries are lazy; nothing reaches the store until a query is
realized with `to_list()`, iteration, `count()` or `first()`. Realized entities are
detached snapshots: the context keeps no reference to them and never writes back.
"""

import logging
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .adapters import AdapterRegistry
from .backend.base import StorageBackend
from .entities import EntityKind, MappedEntity, shape_of
from .errors import ContextDisposedError
from .mapping import ColumnMapping, EntityMapping
from .model import MappingModel

logger = logging.getLogger(__name__)


class QueryTrackingBehavior(Enum):
    NO_TRACKING = 'no_tracking'


class Query:
    """A lazy, immutable query over one mapped entity kind.

    Field references are checked against the mapping as the query is composed, so a
    query naming an excluded field fails before any SQL is built.
    """

    def __init__(self, context: 'QueryContext', mapping: EntityMapping,
                 projection: Optional[ColumnMapping] = None,
                 ordering: Tuple[ColumnMapping, ...] = (),
                 limit: Optional[int] = None):
        self._context = context
        self._mapping = mapping
        self._projection = projection
        self._ordering = ordering
        self._limit = limit

    @property
    def mapping(self) -> EntityMapping:
        return self._mapping

    def _derive(self, **changes) -> 'Query':
        state = {
            'projection': self._projection,
            'ordering': self._ordering,
            'limit': self._limit,
        }
        state.update(changes)
        return Query(self._context, self._mapping, **state)

    def select(self, field: str) -> 'Query':
        """Project every row to the value of one mapped field."""
        return self._derive(projection=self._mapping.column_for(field))

    def order_by(self, *fields: str) -> 'Query':
        return self._derive(ordering=self._ordering + tuple(self._mapping.column_for(f) for f in fields))

    def take(self, count: int) -> 'Query':
        if count < 0:
            raise ValueError(f"take() needs a non-negative count, got {count}")
        return self._derive(limit=count)

    def to_sql(self) -> str:
        dialect = self._context.backend.dialect
        columns = [self._projection] if self._projection else list(self._mapping.columns)
        return dialect.format_select(
            [(c.column, c.field) for c in columns],
            self._mapping.table,
            self._mapping.schema,
            order_by=[c.column for c in self._ordering],
            limit=self._limit,
        )

    def _materialize(self, row: Dict[str, Any]) -> Any:
        adapters = self._context.adapter_registry
        if self._projection is not None:
            return adapters.from_database(row[self._projection.field], self._projection.python_type)

        shape = shape_of(self._mapping.kind)
        values = {'base': {}, 'extras': {}}
        for column in self._mapping.columns:
            values[column.origin][column.field] = adapters.from_database(row[column.field], column.python_type)
        return MappedEntity(
            self._mapping.kind,
            shape.base(**values['base']),
            shape.extras(**values['extras']),
            self._mapping.field_names,
        )

    def to_list(self) -> List[Any]:
        rows = self._context._fetch(self.to_sql())
        return [self._materialize(row) for row in rows]

    def __iter__(self) -> Iterator[Any]:
        return iter(self.to_list())

    def count(self) -> int:
        dialect = self._context.backend.dialect
        columns = [self._projection] if self._projection else list(self._mapping.columns)
        sql = dialect.format_count(self._mapping.table, self._mapping.schema, [c.column for c in columns])
        if self._limit is not None:
            return min(int(self._context._fetch(sql)[0]['count']), self._limit)
        return int(self._context._fetch(sql)[0]['count'])

    def first(self) -> Optional[Any]:
        results = self.take(1 if self._limit is None else min(self._limit, 1)).to_list()
        return results[0] if results else None


class QueryContext:
    """Scoped, read-only handle for querying mapped entities through a shared backend."""

    def __init__(self, backend: StorageBackend, model: MappingModel,
                 adapter_registry: Optional[AdapterRegistry] = None):
        self._backend = backend
        self._model = model
        self._adapter_registry = adapter_registry or backend.adapter_registry
        self._disposed = False
        self.query_tracking_behavior = QueryTrackingBehavior.NO_TRACKING

    @property
    def backend(self) -> StorageBackend:
        self._check_not_disposed()
        return self._backend

    @property
    def model(self) -> MappingModel:
        return self._model

    @property
    def adapter_registry(self) -> AdapterRegistry:
        return self._adapter_registry

    @property
    def disposed(self) -> bool:
        return self._disposed

    def _check_not_disposed(self) -> None:
        if self._disposed:
            raise ContextDisposedError("Cannot use a query context after it has been disposed")

    def query(self, kind: EntityKind) -> Query:
        self._check_not_disposed()
        return Query(self, self._model.mapping_for(kind))

    def _fetch(self, sql: str) -> List[Dict[str, Any]]:
        self._check_not_disposed()
        return self._backend.fetch_all(sql)

    def dispose(self) -> None:
        # The backend belongs to the fixture; a context only gives up its handle.
        if not self._disposed:
            self._disposed = True
            logger.debug("Disposed query context")

    def __enter__(self) -> 'QueryContext':
        self._check_not_disposed()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.dispose()
