# src/mapping_fixtures/backend/config.py
"""Connection configuration for the storage backends

Each backend flavor has its own dataclass extending the base ConnectionConfig with the
parameters its driver understands.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass
class ConnectionConfig:
    """Parameters shared by every backend flavor."""

    database: Optional[str] = None
    log_queries: bool = False
    log_level: int = logging.INFO
    options: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to a dictionary of non-None driver parameters."""
        config_dict = {'database': self.database}
        config_dict.update(self.options)
        return {key: value for key, value in config_dict.items() if value is not None}


@dataclass
class SQLiteConnectionConfig(ConnectionConfig):
    """SQLite connection configuration.

    `database` is a file path or ":memory:". Schemas other than the default one are
    attached databases; for a file database they are stored next to it as
    `<stem>.<schema>.db`, for an in-memory database they are in-memory as well.
    """

    database: Optional[str] = ':memory:'
    timeout: float = 5.0
    check_same_thread: bool = False

    def to_dict(self) -> Dict[str, Any]:
        config_dict = super().to_dict()
        config_dict['timeout'] = self.timeout
        config_dict['check_same_thread'] = self.check_same_thread
        return config_dict


@dataclass
class MySQLConnectionConfig(ConnectionConfig):
    """MySQL connection configuration with MySQL-specific parameters.

    `database` doubles as the schema the Northwind tables are provisioned in.
    """

    host: str = 'localhost'
    port: int = 3306
    username: Optional[str] = None
    password: Optional[str] = None
    charset: str = 'utf8mb4'
    collation: Optional[str] = None
    version: Optional[Tuple[int, int, int]] = None

    # MySQL-specific connection options
    auth_plugin: Optional[str] = None
    autocommit: bool = True
    init_command: Optional[str] = "SET sql_mode='STRICT_TRANS_TABLES'"
    connect_timeout: int = 10

    # MySQL-specific flags
    use_pure: bool = True
    get_warnings: bool = True
    ssl_disabled: Optional[bool] = None

    def __post_init__(self):
        if isinstance(self.version, list):
            self.version = tuple(self.version)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary, including MySQL-specific parameters.

        The database is left out: it is selected once the schema is known to exist.
        """
        config_dict = super().to_dict()
        config_dict.pop('database', None)

        mysql_params = {
            'host': self.host,
            'port': self.port,
            'user': self.username,
            'password': self.password,
            'charset': self.charset,
            'collation': self.collation,
            'auth_plugin': self.auth_plugin,
            'autocommit': self.autocommit,
            'init_command': self.init_command,
            'connection_timeout': self.connect_timeout,
            'use_pure': self.use_pure,
            'get_warnings': self.get_warnings,
            'ssl_disabled': self.ssl_disabled,
        }

        # Only include non-None values
        for key, value in mysql_params.items():
            if value is not None:
                config_dict[key] = value

        return config_dict
