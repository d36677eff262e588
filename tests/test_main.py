import json

import pytest

from mapping_fixtures.__main__ import create_fixture, main, parse_args
from mapping_fixtures.fixture import MySQLMappingQueryFixture, SQLiteMappingQueryFixture


def test_counts_entities_in_sqlite(capsys):
    main(['--backend', 'sqlite', '--log-level', 'WARNING'])

    assert json.loads(capsys.readouterr().out) == {'customer': 91, 'employee': 9, 'order': 830}


def test_counts_entities_in_schema(capsys, tmp_path):
    main(['--sqlite-database', str(tmp_path / 'northwind.db'), '--schema', 'sales', '--log-level', 'WARNING'])

    assert json.loads(capsys.readouterr().out) == {'customer': 91, 'employee': 9, 'order': 830}
    assert (tmp_path / 'northwind.sales.db').exists()


def test_create_fixture():
    sqlite_fixture = create_fixture(parse_args(['--schema', 'sales']))
    assert isinstance(sqlite_fixture, SQLiteMappingQueryFixture)
    assert sqlite_fixture.database_schema == 'sales'

    mysql_fixture = create_fixture(parse_args(['--backend', 'mysql', '--host', 'db', '--database', 'nw']))
    assert isinstance(mysql_fixture, MySQLMappingQueryFixture)
    assert mysql_fixture.config.host == 'db'
    assert mysql_fixture.database_schema == 'nw'


def test_connection_failure_exits():
    with pytest.raises(SystemExit) as exc_info:
        main(['--backend', 'mysql', '--host', '127.0.0.1', '--port', '1', '--log-level', 'CRITICAL'])

    assert exc_info.value.code == 1


def test_invalid_log_level():
    with pytest.raises(ValueError, match="Invalid log level"):
        main(['--log-level', 'LOUD'])
