"""Pytest configuration for the mapping fixture tests

Configures logging and the markers used to select tests by store flavor.
"""

import logging

import pytest

from mapping_fixtures import SQLiteMappingQueryFixture

# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@pytest.fixture
def sqlite_fixture():
    """An initialized in-memory SQLite mapping fixture, disposed after the test."""
    fixture = SQLiteMappingQueryFixture().initialize()
    yield fixture
    fixture.dispose()


# Configure pytest markers for flavor-specific tests
def pytest_configure(config):
    """Configure pytest markers"""
    config.addinivalue_line(
        "markers", "mysql: mark test as MySQL-specific"
    )
    config.addinivalue_line(
        "markers", "sqlite: mark test as SQLite-specific"
    )


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on test names"""
    for item in items:
        name = f"{item.fspath} {item.nodeid}".lower()
        if "mysql" in name:
            item.add_marker(pytest.mark.mysql)
        elif "sqlite" in name:
            item.add_marker(pytest.mark.sqlite)
