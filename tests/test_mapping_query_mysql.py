"""
Bridge module that runs the generic mapping query tests against the first configured
MySQL scenario (see tests/config_manager.py). Skipped when none is configured.
"""
import pytest

from mapping_fixtures.testsuite import MappingQueryTestBase

from .providers.mapping import MappingQueryProvider

provider = MappingQueryProvider()


class TestMySQLMappingQuery(MappingQueryTestBase):

    @classmethod
    def create_fixture(cls):
        scenarios = provider.get_test_scenarios('mysql')
        if not scenarios:
            pytest.skip("No MySQL scenario configured")
        return provider.create_fixture(scenarios[0])
