# src/mapping_fixtures/testsuite/mapping_query.py
"""Generic read-only query tests for mapping fixtures.

Backends wire these tests up by subclassing `MappingQueryTestBase` in a module that
pytest collects (its name must start with `Test`) and implementing `create_fixture()`.
One fixture instance is shared by every test of the subclass; it is initialized in
`setup_class` and disposed in `teardown_class`.
"""

from collections import Counter

from ..entities import EntityKind, MappedEntity, ShipVia
from ..fixture import MappingQueryFixtureBase


class MappingQueryTestBase:
    fixture: MappingQueryFixtureBase = None

    @classmethod
    def create_fixture(cls) -> MappingQueryFixtureBase:
        raise NotImplementedError(f"{cls.__name__} must implement create_fixture()")

    @classmethod
    def setup_class(cls):
        cls.fixture = cls.create_fixture()
        cls.fixture.initialize()

    @classmethod
    def teardown_class(cls):
        if cls.fixture is not None:
            cls.fixture.dispose()
            cls.fixture = None

    def create_context(self):
        return self.fixture.create_context()

    def test_all_customers(self):
        with self.create_context() as context:
            customers = context.query(EntityKind.CUSTOMER).to_list()

            assert len(customers) == 91

    def test_all_employees(self):
        with self.create_context() as context:
            employees = context.query(EntityKind.EMPLOYEE).to_list()

            assert len(employees) == 9

    def test_all_orders(self):
        with self.create_context() as context:
            orders = context.query(EntityKind.ORDER).to_list()

            assert len(orders) == 830

    def test_project_nullable_enum(self):
        with self.create_context() as context:
            ship_vias = context.query(EntityKind.ORDER).select('ship_via2').to_list()

            assert len(ship_vias) == 830
            assert all(value is None or isinstance(value, ShipVia) for value in ship_vias)

    def test_renamed_column_is_readable(self):
        with self.create_context() as context:
            employees = context.query(EntityKind.EMPLOYEE).order_by('employee_id').to_list()

            assert len(employees) == 9
            assert all(isinstance(e, MappedEntity) for e in employees)
            assert employees[0].city2 == 'Seattle'
            assert Counter(e.city2 for e in employees)['London'] == 4

    def test_count_matches_enumeration(self):
        with self.create_context() as context:
            assert context.query(EntityKind.ORDER).count() == 830
            assert context.query(EntityKind.ORDER).select('ship_via2').count() == 830

    def test_contexts_observe_identical_data(self):
        with self.create_context() as first:
            first_orders = first.query(EntityKind.ORDER).order_by('order_id').to_list()
        with self.create_context() as second:
            second_orders = second.query(EntityKind.ORDER).order_by('order_id').to_list()

        assert first_orders == second_orders
