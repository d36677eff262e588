# src/mapping_fixtures/backend/base.py
import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..adapters import AdapterRegistry, default_adapter_registry
from ..errors import ConnectionError
from .config import ConnectionConfig
from .dialect import SQLDialect

# Every statement a backend executes is logged here at DEBUG, with the backend
# attached to the record as `backend`.
sql_logger = logging.getLogger('mapping_fixtures.sql')


@dataclass
class QueryResult:
    data: Optional[List[Dict[str, Any]]] = None
    affected_rows: int = 0
    duration: float = 0.0


class StorageBackend(ABC):
    """Synchronous storage backend: one connection, statement execution and error translation."""

    flavor: str = None

    # Python type -> type the driver expects for parameters of that type
    driver_types: Dict[type, type] = {}

    def __init__(self, connection_config: ConnectionConfig, logger: Optional[logging.Logger] = None):
        self.config = connection_config
        self._logger = logger or logging.getLogger(f"{__package__}.{type(self).__name__}")
        self._connection = None
        self.adapter_registry: AdapterRegistry = default_adapter_registry()

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def log(self, level: int, msg: str, *args, **kwargs) -> None:
        self._logger.log(level, msg, *args, **kwargs)

    @property
    @abstractmethod
    def dialect(self) -> SQLDialect:
        pass

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    @abstractmethod
    def connect(self) -> None:
        pass

    @abstractmethod
    def disconnect(self) -> None:
        pass

    @abstractmethod
    def _handle_error(self, error: Exception) -> None:
        """Translate a driver error into this package's hierarchy and raise it."""

    @abstractmethod
    def _driver_errors(self) -> Tuple[type, ...]:
        pass

    @abstractmethod
    def _row_to_dict(self, cursor, row) -> Dict[str, Any]:
        pass

    @abstractmethod
    def schema_exists(self, schema: str) -> bool:
        pass

    @abstractmethod
    def create_schema(self, schema: str) -> None:
        pass

    @abstractmethod
    def table_exists(self, table: str, schema: Optional[str] = None) -> bool:
        pass

    def _ensure_connected(self) -> None:
        if not self._connection:
            self.log(logging.DEBUG, "No active connection, establishing new connection")
            self.connect()
            if not self._connection:
                raise ConnectionError(f"{type(self).__name__} failed to connect")

    def _convert_params(self, params: Optional[Sequence[Any]]) -> Tuple:
        if not params:
            return ()
        return tuple(
            self.adapter_registry.to_database(value, self.driver_types.get(type(value)))
            for value in params
        )

    def _log_sql(self, sql: str, params: Optional[Sequence[Any]] = None) -> None:
        if self.config.log_queries:
            self.log(self.config.log_level, f"Executing SQL: {sql}")
        sql_logger.debug(sql, extra={'backend': self, 'params': tuple(params or ())})

    def execute(self, sql: str, params: Optional[Sequence[Any]] = None) -> QueryResult:
        """Execute one statement and fetch its rows, if it returns any."""
        start_time = time.perf_counter()
        self._ensure_connected()
        self._log_sql(sql, params)

        cursor = self._connection.cursor()
        try:
            if params:
                cursor.execute(sql, self._convert_params(params))
            else:
                cursor.execute(sql)
            data = None
            if cursor.description:
                data = [self._row_to_dict(cursor, row) for row in cursor.fetchall()]
            else:
                self._commit()
            duration = time.perf_counter() - start_time
            self.log(logging.DEBUG, f"Statement completed in {duration:.3f}s")
            return QueryResult(data=data, affected_rows=cursor.rowcount, duration=duration)
        except self._driver_errors() as e:
            self.log(logging.DEBUG, f"Statement failed: {e}")
            self._handle_error(e)
        finally:
            cursor.close()

    def execute_many(self, sql: str, params_list: Sequence[Sequence[Any]]) -> QueryResult:
        """Execute batch operations"""
        start_time = time.perf_counter()
        self._ensure_connected()
        self.log(logging.INFO, f"Executing batch operation: {sql} with {len(params_list)} parameter sets")
        sql_logger.debug(sql, extra={'backend': self, 'params': ()})

        cursor = self._connection.cursor()
        try:
            cursor.executemany(sql, [self._convert_params(params) for params in params_list])
            self._commit()
            duration = time.perf_counter() - start_time
            self.log(logging.INFO,
                     f"Batch operation completed, affected {cursor.rowcount} rows, duration={duration:.3f}s")
            return QueryResult(affected_rows=cursor.rowcount, duration=duration)
        except self._driver_errors() as e:
            self.log(logging.ERROR, f"Error in batch operation: {e}")
            self._handle_error(e)
        finally:
            cursor.close()

    def _commit(self) -> None:
        self._connection.commit()

    def fetch_all(self, sql: str, params: Optional[Sequence[Any]] = None) -> List[Dict[str, Any]]:
        return self.execute(sql, params).data or []

    def fetch_one(self, sql: str, params: Optional[Sequence[Any]] = None) -> Optional[Dict[str, Any]]:
        rows = self.fetch_all(sql, params)
        return rows[0] if rows else None

    def count_rows(self, table: str, schema: Optional[str] = None) -> int:
        row = self.fetch_one(self.dialect.format_count(table, schema))
        return int(row['count'])

    def __enter__(self) -> 'StorageBackend':
        self._ensure_connected()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.disconnect()
