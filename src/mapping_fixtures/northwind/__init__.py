# src/mapping_fixtures/northwind/__init__.py
from .seed import (
    CUSTOMER_IDS,
    EXPECTED_ROW_COUNTS,
    FIRST_ORDER_ID,
    ORDER_COUNT,
    NorthwindSeeder,
    customers,
    employees,
    load_schema_sql,
    orders,
)

__all__ = [
    'CUSTOMER_IDS',
    'EXPECTED_ROW_COUNTS',
    'FIRST_ORDER_ID',
    'ORDER_COUNT',
    'NorthwindSeeder',
    'customers',
    'employees',
    'load_schema_sql',
    'orders',
]
