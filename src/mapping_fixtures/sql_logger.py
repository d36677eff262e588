import logging
from typing import Any, List, Optional

from .backend.base import sql_logger

# Level of the SQL logger before the first capture was installed; restored when the
# last installed capture is removed.
_saved_level: Optional[int] = None


def _installed_captures() -> List['TestSqlLogger']:
    return [h for h in sql_logger.handlers if isinstance(h, TestSqlLogger)]


class TestSqlLogger(logging.Handler):
    """Captures the SQL one backend executes, for inspection by tests.

    Install it on a backend; statements from other backends sharing the
    `mapping_fixtures.sql` logger are ignored. Any number of captures may be
    installed at once.
    """

    __test__ = False  # not a pytest test class

    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self._backend: Optional[Any] = None
        self.sql_statements: List[str] = []

    def install(self, backend: Any) -> 'TestSqlLogger':
        global _saved_level
        if not _installed_captures():
            _saved_level = sql_logger.level
        if sql_logger.level == logging.NOTSET or sql_logger.level > logging.DEBUG:
            sql_logger.setLevel(logging.DEBUG)
        self._backend = backend
        sql_logger.addHandler(self)
        return self

    def uninstall(self) -> None:
        global _saved_level
        sql_logger.removeHandler(self)
        self._backend = None
        if not _installed_captures() and _saved_level is not None:
            sql_logger.setLevel(_saved_level)
            _saved_level = None

    @property
    def installed(self) -> bool:
        return self._backend is not None

    def emit(self, record: logging.LogRecord) -> None:
        if getattr(record, 'backend', None) is not self._backend:
            return
        self.sql_statements.append(record.getMessage())

    @property
    def sql(self) -> str:
        return '\n\n'.join(self.sql_statements)

    def clear(self) -> None:
        self.sql_statements.clear()
