import datetime
import logging
from decimal import Decimal

import pytest

from mapping_fixtures.backend import SQLiteBackend, SQLiteConnectionConfig
from mapping_fixtures.errors import DatabaseError, OperationalError, StoreObjectNotFoundError


@pytest.fixture
def backend():
    backend = SQLiteBackend(SQLiteConnectionConfig())
    backend.connect()
    backend.execute('CREATE TABLE "Items" ("ItemID" INTEGER PRIMARY KEY, "Price" REAL, "Added" TEXT)')
    yield backend
    backend.disconnect()


def test_execute_returns_rows(backend):
    backend.execute_many(
        'INSERT INTO "Items" ("ItemID", "Price", "Added") VALUES (?, ?, ?)',
        [(1, Decimal('1.25'), datetime.datetime(1996, 7, 4)), (2, None, None)],
    )

    rows = backend.fetch_all('SELECT "ItemID", "Price", "Added" FROM "Items" ORDER BY "ItemID"')

    assert rows == [
        {'ItemID': 1, 'Price': 1.25, 'Added': '1996-07-04 00:00:00'},
        {'ItemID': 2, 'Price': None, 'Added': None},
    ]
    assert backend.count_rows('Items') == 2


def test_fetch_one_without_rows(backend):
    assert backend.fetch_one('SELECT * FROM "Items"') is None


def test_missing_table_is_store_object_not_found(backend):
    with pytest.raises(StoreObjectNotFoundError) as exc_info:
        backend.fetch_all('SELECT * FROM "Broken"')

    assert exc_info.value.object_name == 'Broken'


def test_missing_schema_is_store_object_not_found(backend):
    with pytest.raises(StoreObjectNotFoundError):
        backend.fetch_all('SELECT * FROM "wrong"."Broken"')


def test_missing_column_is_store_object_not_found(backend):
    with pytest.raises(StoreObjectNotFoundError):
        backend.fetch_all('SELECT Broken FROM "Items"')


def test_syntax_error_is_operational_error(backend):
    with pytest.raises(OperationalError):
        backend.execute('SELEC 1')


def test_constraint_violation_is_database_error(backend):
    backend.execute('INSERT INTO "Items" ("ItemID") VALUES (?)', (1,))

    with pytest.raises(DatabaseError):
        backend.execute('INSERT INTO "Items" ("ItemID") VALUES (?)', (1,))


def test_attached_schema(backend):
    assert not backend.schema_exists('northwind')

    backend.create_schema('northwind')
    backend.create_schema('northwind')

    assert backend.schema_exists('northwind')
    assert not backend.table_exists('Items', 'northwind')
    backend.execute('CREATE TABLE "northwind"."Items" ("ItemID" INTEGER)')
    assert backend.table_exists('Items', 'northwind')


def test_table_exists(backend):
    assert backend.table_exists('Items')
    assert not backend.table_exists('Broken')
    assert not backend.table_exists('Items', 'wrong')


def test_attach_target_next_to_database_file(tmp_path):
    backend = SQLiteBackend(SQLiteConnectionConfig(database=str(tmp_path / 'northwind.db')))

    assert backend._attach_target('sales') == str(tmp_path / 'northwind.sales.db')
    assert SQLiteBackend()._attach_target('sales') == ':memory:'


def test_connects_on_first_use():
    backend = SQLiteBackend()

    assert not backend.is_connected
    with backend:
        assert backend.fetch_one('SELECT 1 AS one') == {'one': 1}
        assert backend.is_connected
    assert not backend.is_connected


def test_log_queries(caplog):
    caplog.set_level(logging.INFO, logger='mapping_fixtures.backend')
    backend = SQLiteBackend(SQLiteConnectionConfig(log_queries=True))
    try:
        backend.fetch_all('SELECT 1 AS one')
    finally:
        backend.disconnect()

    assert "Executing SQL: SELECT 1 AS one" in caplog.text


def test_queries_are_not_logged_by_default(caplog):
    caplog.set_level(logging.INFO, logger='mapping_fixtures.backend')
    backend = SQLiteBackend()
    try:
        backend.fetch_all('SELECT 1 AS one')
    finally:
        backend.disconnect()

    assert "Executing SQL" not in caplog.text


def test_options_are_passed_to_driver():
    config = SQLiteConnectionConfig(options={'isolation_level': 'IMMEDIATE'})

    assert config.to_dict()['isolation_level'] == 'IMMEDIATE'
    backend = SQLiteBackend(config)
    try:
        backend.connect()
        assert backend._connection.isolation_level == 'IMMEDIATE'
    finally:
        backend.disconnect()


def test_result_reports_rows_and_duration(backend):
    result = backend.execute('INSERT INTO "Items" ("ItemID") VALUES (?)', (1,))

    assert result.data is None
    assert result.affected_rows == 1
    assert result.duration >= 0

    result = backend.execute_many('INSERT INTO "Items" ("ItemID") VALUES (?)', [(2,), (3,)])
    assert result.affected_rows == 2
    assert result.duration >= 0
