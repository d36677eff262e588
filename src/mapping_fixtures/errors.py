# src/mapping_fixtures/errors.py
"""Error hierarchy shared by the mapping layer, the backends and the fixtures."""

from typing import Iterable, Optional


class DatabaseError(Exception):
    """Base class for every error raised by this package."""


class ConnectionError(DatabaseError):
    """The backing store could not be reached."""


class OperationalError(DatabaseError):
    """The backing store rejected an operation for a reason unrelated to the query text."""


class QueryError(DatabaseError):
    """A query failed while being executed."""


class StoreObjectNotFoundError(QueryError):
    """A table, schema or column referenced by a mapping does not exist in the store.

    Raised when a query is realized, never when the mapping is compiled: a mapping may
    point at a store object that does not exist as long as it is never queried.
    """

    def __init__(self, message: str, object_name: Optional[str] = None):
        super().__init__(message)
        self.object_name = object_name


class InvalidMappingError(DatabaseError):
    """Mapping overrides for an entity cannot be compiled, or a query references an unmapped field."""

    def __init__(self, entity: str, problems: Iterable[str]):
        self.entity = entity
        self.problems = list(problems)
        super().__init__(f"Invalid mapping for {entity}: {'; '.join(self.problems)}")


class ContextDisposedError(DatabaseError):
    """A query context was used after it was disposed."""


class FixtureNotInitializedError(DatabaseError):
    """A shared fixture was asked for a context before initialize() ran."""


class SeedVerificationError(DatabaseError):
    """An existing store does not hold the expected seeded dataset."""
