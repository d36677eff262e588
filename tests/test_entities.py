from decimal import Decimal

import pytest

from mapping_fixtures.entities import (
    Customer,
    CustomerExtras,
    EntityKind,
    MappedEntity,
    Order,
    OrderExtras,
    ShipVia,
    shape_of,
)


class TestEntityShape:
    def test_fields_of_order(self):
        shape = shape_of(EntityKind.ORDER)
        names = [f.name for f in shape.fields()]

        assert names[0] == 'order_id'
        assert names[-1] == 'ship_via2'
        assert len(names) == 15

    def test_field_info(self):
        shape = shape_of(EntityKind.ORDER)

        freight = shape.field('freight')
        assert freight.column == 'Freight'
        assert freight.python_type is Decimal
        assert freight.nullable
        assert freight.origin == 'base'

        ship_via2 = shape.field('ship_via2')
        assert ship_via2.column == 'ShipVia2'
        assert ship_via2.python_type is ShipVia
        assert ship_via2.origin == 'extras'

    def test_unknown_field(self):
        shape = shape_of(EntityKind.CUSTOMER)

        assert shape.field('city2') is None
        assert not shape.has_field('city2')
        assert shape.has_field('company_name2')

    def test_default_tables(self):
        assert shape_of(EntityKind.CUSTOMER).default_table == 'Customers'
        assert shape_of(EntityKind.EMPLOYEE).default_table == 'Employees'
        assert shape_of(EntityKind.ORDER).default_table == 'Orders'


class TestMappedEntity:
    def make_customer(self):
        return MappedEntity(
            EntityKind.CUSTOMER,
            Customer(customer_id='ALFKI'),
            CustomerExtras(company_name2='Alfreds Futterkiste'),
            ('customer_id', 'company_name2'),
        )

    def test_mapped_fields_are_readable(self):
        customer = self.make_customer()

        assert customer.customer_id == 'ALFKI'
        assert customer.company_name2 == 'Alfreds Futterkiste'

    def test_excluded_field_is_not_readable(self):
        customer = self.make_customer()

        with pytest.raises(AttributeError, match="'company_name' is not a mapped field of customer"):
            customer.company_name

    def test_records_stay_reachable(self):
        customer = self.make_customer()

        assert customer.base.customer_id == 'ALFKI'
        assert customer.base.company_name is None

    def test_to_dict(self):
        assert self.make_customer().to_dict() == {
            'company_name2': 'Alfreds Futterkiste',
            'customer_id': 'ALFKI',
        }

    def test_equality(self):
        assert self.make_customer() == self.make_customer()

        order = MappedEntity(EntityKind.ORDER, Order(order_id=10248), OrderExtras(ShipVia.THREE), ('order_id', 'ship_via2'))
        assert order != self.make_customer()
        assert order.ship_via2 is ShipVia.THREE

    def test_repr(self):
        assert repr(self.make_customer()) == (
            "MappedEntity(CUSTOMER, company_name2='Alfreds Futterkiste', customer_id='ALFKI')"
        )
