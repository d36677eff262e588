# src/mapping_fixtures/northwind/seed.py
"""The fixed Northwind-style dataset every mapping test asserts against.

Keys follow Northwind: the 91 customer ids, the 9 employees and order ids
10248..11077. Descriptive customer and order columns are synthetic but
deterministic, so every provisioned store holds the same rows.
"""

import dataclasses
import datetime
import logging
import os
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..backend.base import StorageBackend
from ..entities import Customer, Employee, Order
from ..errors import SeedVerificationError

logger = logging.getLogger(__name__)

CUSTOMER_IDS: Tuple[str, ...] = (
    'ALFKI', 'ANATR', 'ANTON', 'AROUT', 'BERGS', 'BLAUS', 'BLONP', 'BOLID', 'BONAP', 'BOTTM',
    'BSBEV', 'CACTU', 'CENTC', 'CHOPS', 'COMMI', 'CONSH', 'DRACD', 'DUMON', 'EASTC', 'ERNSH',
    'FAMIA', 'FISSA', 'FOLIG', 'FOLKO', 'FRANK', 'FRANR', 'FRANS', 'FURIB', 'GALED', 'GODOS',
    'GOURL', 'GREAL', 'GROSR', 'HANAR', 'HILAA', 'HUNGC', 'HUNGO', 'ISLAT', 'KOENE', 'LACOR',
    'LAMAI', 'LAUGB', 'LAZYK', 'LEHMS', 'LETSS', 'LILAS', 'LINOD', 'LONEP', 'MAGAA', 'MAISD',
    'MEREP', 'MORGK', 'NORTS', 'OCEAN', 'OLDWO', 'OTTIK', 'PARIS', 'PERIC', 'PICCO', 'PRINI',
    'QUEDE', 'QUEEN', 'QUICK', 'RANCH', 'RATTC', 'REGGC', 'RICAR', 'RICSU', 'ROMEY', 'SANTG',
    'SAVEA', 'SEVES', 'SIMOB', 'SPECD', 'SPLIR', 'SUPRD', 'THEBI', 'THECR', 'TOMSP', 'TORTU',
    'TRADH', 'TRAIH', 'VAFFE', 'VICTE', 'VINET', 'WANDK', 'WARTH', 'WELLI', 'WHITC', 'WILMK',
    'WOLZA',
)

FIRST_ORDER_ID = 10248
ORDER_COUNT = 830
UNSHIPPED_ORDERS = 21

EXPECTED_ROW_COUNTS: Dict[str, int] = {
    'Customers': len(CUSTOMER_IDS),
    'Employees': 9,
    'Orders': ORDER_COUNT,
}

_LOCATIONS = (
    ('Berlin', None, '12209', 'Germany'),
    ('México D.F.', None, '05021', 'Mexico'),
    ('London', None, 'WA1 1DP', 'UK'),
    ('Luleå', None, 'S-958 22', 'Sweden'),
    ('Marseille', None, '13008', 'France'),
    ('Madrid', None, '28023', 'Spain'),
    ('Tsawassen', 'BC', 'T2F 8M4', 'Canada'),
    ('Buenos Aires', None, '1010', 'Argentina'),
    ('São Paulo', 'SP', '05432-043', 'Brazil'),
    ('Seattle', 'WA', '98124', 'USA'),
    ('Torino', None, '10100', 'Italy'),
)
_CONTACT_TITLES = ('Sales Representative', 'Owner', 'Order Administrator', 'Marketing Manager',
                   'Accounting Manager', 'Sales Agent')

_FIRST_ORDER_DATE = datetime.datetime(1996, 7, 4)
_LAST_ORDER_DATE = datetime.datetime(1998, 5, 6)


def customers() -> List[Customer]:
    result = []
    for i, customer_id in enumerate(CUSTOMER_IDS):
        city, region, postal_code, country = _LOCATIONS[i % len(_LOCATIONS)]
        result.append(Customer(
            customer_id=customer_id,
            company_name=f"{customer_id.capitalize()} Trading",
            contact_name=f"Contact {customer_id}",
            contact_title=_CONTACT_TITLES[i % len(_CONTACT_TITLES)],
            address=f"{100 + i} Main Street",
            city=city,
            region=region,
            postal_code=postal_code,
            country=country,
            phone=f"(5) 555-{4000 + i:04d}",
            fax=f"(5) 555-{5000 + i:04d}" if i % 3 else None,
        ))
    return result


def employees() -> List[Employee]:
    rows = [
        (1, 'Davolio', 'Nancy', 'Sales Representative', 'Ms.', (1948, 12, 8), (1992, 5, 1),
         '507 - 20th Ave. E. Apt. 2A', 'Seattle', 'WA', '98122', 'USA', '(206) 555-9857', '5467', 2),
        (2, 'Fuller', 'Andrew', 'Vice President, Sales', 'Dr.', (1952, 2, 19), (1992, 8, 14),
         '908 W. Capital Way', 'Tacoma', 'WA', '98401', 'USA', '(206) 555-9482', '3457', None),
        (3, 'Leverling', 'Janet', 'Sales Representative', 'Ms.', (1963, 8, 30), (1992, 4, 1),
         '722 Moss Bay Blvd.', 'Kirkland', 'WA', '98033', 'USA', '(206) 555-3412', '3355', 2),
        (4, 'Peacock', 'Margaret', 'Sales Representative', 'Mrs.', (1937, 9, 19), (1993, 5, 3),
         '4110 Old Redmond Rd.', 'Redmond', 'WA', '98052', 'USA', '(206) 555-8122', '5176', 2),
        (5, 'Buchanan', 'Steven', 'Sales Manager', 'Mr.', (1955, 3, 4), (1993, 10, 17),
         '14 Garrett Hill', 'London', None, 'SW1 8JR', 'UK', '(71) 555-4848', '3453', 2),
        (6, 'Suyama', 'Michael', 'Sales Representative', 'Mr.', (1963, 7, 2), (1993, 10, 17),
         'Coventry House Miner Rd.', 'London', None, 'EC2 7JR', 'UK', '(71) 555-7773', '428', 5),
        (7, 'King', 'Robert', 'Sales Representative', 'Mr.', (1960, 5, 29), (1994, 1, 2),
         'Edgeham Hollow Winchester Way', 'London', None, 'RG1 9SP', 'UK', '(71) 555-5598', '465', 5),
        (8, 'Callahan', 'Laura', 'Inside Sales Coordinator', 'Ms.', (1958, 1, 9), (1994, 3, 5),
         '4726 - 11th Ave. N.E.', 'Seattle', 'WA', '98105', 'USA', '(206) 555-1189', '2344', 2),
        (9, 'Dodsworth', 'Anne', 'Sales Representative', 'Ms.', (1966, 1, 27), (1994, 11, 15),
         '7 Houndstooth Rd.', 'London', None, 'WG2 7LT', 'UK', '(71) 555-4444', '452', 5),
    ]
    return [
        Employee(
            employee_id=employee_id, last_name=last_name, first_name=first_name, title=title,
            title_of_courtesy=courtesy, birth_date=datetime.datetime(*birth), hire_date=datetime.datetime(*hire),
            address=address, city=city, region=region, postal_code=postal_code, country=country,
            home_phone=phone, extension=extension, reports_to=reports_to,
            notes=f"{first_name} {last_name} joined Northwind in {hire[0]}.",
            photo_path=f"http://accweb/emmployees/{last_name.lower()}.bmp",
        )
        for (employee_id, last_name, first_name, title, courtesy, birth, hire, address, city, region,
             postal_code, country, phone, extension, reports_to) in rows
    ]


def orders() -> List[Order]:
    customers_by_id = {c.customer_id: c for c in customers()}
    span = (_LAST_ORDER_DATE - _FIRST_ORDER_DATE).days
    result = []
    for i in range(ORDER_COUNT):
        # 37 is coprime with 91, so every customer places orders
        customer = customers_by_id[CUSTOMER_IDS[(i * 37) % len(CUSTOMER_IDS)]]
        order_date = _FIRST_ORDER_DATE + datetime.timedelta(days=i * span // (ORDER_COUNT - 1))
        shipped = i < ORDER_COUNT - UNSHIPPED_ORDERS
        result.append(Order(
            order_id=FIRST_ORDER_ID + i,
            customer_id=customer.customer_id,
            employee_id=(i * 5) % 9 + 1,
            order_date=order_date,
            required_date=order_date + datetime.timedelta(days=28),
            shipped_date=order_date + datetime.timedelta(days=i % 10 + 1) if shipped else None,
            ship_via=i % 3 + 1,
            freight=Decimal((i * 7919) % 100000) / Decimal(100),
            ship_name=customer.company_name,
            ship_address=customer.address,
            ship_city=customer.city,
            ship_region=customer.region,
            ship_postal_code=customer.postal_code,
            ship_country=customer.country,
        ))
    return result


def _as_row(record: Any) -> Tuple[List[str], Tuple]:
    fields = dataclasses.fields(record)
    return [f.metadata['column'] for f in fields], tuple(getattr(record, f.name) for f in fields)


SEED_DATA = {
    'Customers': customers,
    'Employees': employees,
    'Orders': orders,
}


def load_schema_sql(flavor: str, table: str) -> str:
    """Helper to load a table's DDL for one backend flavor."""
    schema_path = os.path.join(os.path.dirname(__file__), 'schema', flavor, f"{table}.sql")
    with open(schema_path, 'r', encoding='utf-8') as f:
        return f.read()


class NorthwindSeeder:
    """Provisions the Northwind tables in one schema of a backend, or verifies them.

    Tables that are missing are created and seeded. Tables that already exist must
    hold exactly the expected number of rows; anything else is a
    `SeedVerificationError` rather than a silent reseed.
    """

    def __init__(self, backend: StorageBackend, schema: Optional[str] = None):
        self.backend = backend
        self.schema = schema or None

    def _existing_counts(self) -> Dict[str, Optional[int]]:
        counts = {}
        for table in EXPECTED_ROW_COUNTS:
            if self.backend.table_exists(table, self.schema):
                counts[table] = self.backend.count_rows(table, self.schema)
            else:
                counts[table] = None
        return counts

    def _create_and_seed(self, table: str) -> None:
        dialect = self.backend.dialect
        ddl = load_schema_sql(self.backend.flavor, table)
        self.backend.execute(ddl.format(table=dialect.qualify(table, self.schema)))

        records = SEED_DATA[table]()
        columns, _ = _as_row(records[0])
        rows: Sequence[Tuple] = [_as_row(record)[1] for record in records]
        self.backend.execute_many(dialect.format_insert(table, columns, self.schema), rows)
        logger.info(f"Seeded {len(rows)} rows into {table}")

    def ensure(self) -> bool:
        """Make sure the dataset is present.

        Returns:
            True if any table had to be created, False if everything was already there.

        Raises:
            SeedVerificationError: an existing table holds an unexpected row count.
        """
        if self.schema:
            self.backend.create_schema(self.schema)

        counts = self._existing_counts()
        mismatched = {
            table: count for table, count in counts.items()
            if count is not None and count != EXPECTED_ROW_COUNTS[table]
        }
        if mismatched:
            details = ', '.join(
                f"{table} has {count} rows, expected {EXPECTED_ROW_COUNTS[table]}"
                for table, count in mismatched.items()
            )
            raise SeedVerificationError(f"Store {self.schema or '(default schema)'} is not the seeded dataset: {details}")

        missing = [table for table, count in counts.items() if count is None]
        for table in missing:
            self._create_and_seed(table)

        if missing:
            logger.info(f"Provisioned Northwind tables {', '.join(missing)} in {self.schema or 'default schema'}")
        else:
            logger.info(f"Verified existing Northwind dataset in {self.schema or 'default schema'}")
        return bool(missing)
