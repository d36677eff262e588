# src/mapping_fixtures/entities.py
"""Northwind entity records and their mapped variants.

Base records (`Customer`, `Employee`, `Order`) mirror the Northwind tables. The fields
that only exist for mapping tests live in separate "extras" records, joined to the base
record by `EntityKind` inside a `MappedEntity` rather than through subclassing.

Every field carries its default column name in the dataclass field metadata.
"""

import dataclasses
import datetime
import typing
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Any, Dict, Optional, Tuple, Type, Union


def column(name: str, default: Any = None) -> Any:
    """Declare a dataclass field stored under column `name` by default."""
    return field(default=default, metadata={'column': name})


class ShipVia(IntEnum):
    ONE = 1
    TWO = 2
    THREE = 3


class EntityKind(Enum):
    CUSTOMER = 'customer'
    EMPLOYEE = 'employee'
    ORDER = 'order'


@dataclass
class Customer:
    customer_id: Optional[str] = column('CustomerID')
    company_name: Optional[str] = column('CompanyName')
    contact_name: Optional[str] = column('ContactName')
    contact_title: Optional[str] = column('ContactTitle')
    address: Optional[str] = column('Address')
    city: Optional[str] = column('City')
    region: Optional[str] = column('Region')
    postal_code: Optional[str] = column('PostalCode')
    country: Optional[str] = column('Country')
    phone: Optional[str] = column('Phone')
    fax: Optional[str] = column('Fax')


@dataclass
class Employee:
    employee_id: Optional[int] = column('EmployeeID')
    last_name: Optional[str] = column('LastName')
    first_name: Optional[str] = column('FirstName')
    title: Optional[str] = column('Title')
    title_of_courtesy: Optional[str] = column('TitleOfCourtesy')
    birth_date: Optional[datetime.datetime] = column('BirthDate')
    hire_date: Optional[datetime.datetime] = column('HireDate')
    address: Optional[str] = column('Address')
    city: Optional[str] = column('City')
    region: Optional[str] = column('Region')
    postal_code: Optional[str] = column('PostalCode')
    country: Optional[str] = column('Country')
    home_phone: Optional[str] = column('HomePhone')
    extension: Optional[str] = column('Extension')
    photo: Optional[bytes] = column('Photo')
    notes: Optional[str] = column('Notes')
    reports_to: Optional[int] = column('ReportsTo')
    photo_path: Optional[str] = column('PhotoPath')


@dataclass
class Order:
    order_id: Optional[int] = column('OrderID')
    customer_id: Optional[str] = column('CustomerID')
    employee_id: Optional[int] = column('EmployeeID')
    order_date: Optional[datetime.datetime] = column('OrderDate')
    required_date: Optional[datetime.datetime] = column('RequiredDate')
    shipped_date: Optional[datetime.datetime] = column('ShippedDate')
    ship_via: Optional[int] = column('ShipVia')
    freight: Optional[Decimal] = column('Freight')
    ship_name: Optional[str] = column('ShipName')
    ship_address: Optional[str] = column('ShipAddress')
    ship_city: Optional[str] = column('ShipCity')
    ship_region: Optional[str] = column('ShipRegion')
    ship_postal_code: Optional[str] = column('ShipPostalCode')
    ship_country: Optional[str] = column('ShipCountry')


@dataclass
class CustomerExtras:
    company_name2: Optional[str] = column('CompanyName2')


@dataclass
class EmployeeExtras:
    city2: Optional[str] = column('City2')


@dataclass
class OrderExtras:
    ship_via2: Optional[ShipVia] = column('ShipVia2')


@dataclass(frozen=True)
class FieldInfo:
    """A field of an entity shape, with the record it belongs to."""
    name: str
    column: str
    python_type: type
    nullable: bool
    origin: str  # 'base' or 'extras'


def _unwrap_optional(hint: Any) -> Tuple[type, bool]:
    if typing.get_origin(hint) is Union:
        args = [arg for arg in typing.get_args(hint) if arg is not type(None)]
        if len(args) == 1:
            return args[0], True
    return hint, False


@dataclass(frozen=True)
class EntityShape:
    """The base and extras record types that make up one entity kind."""
    kind: EntityKind
    base: Type
    extras: Type
    default_table: str

    def fields(self) -> Tuple[FieldInfo, ...]:
        result = []
        for origin, record in (('base', self.base), ('extras', self.extras)):
            hints = typing.get_type_hints(record)
            for f in dataclasses.fields(record):
                python_type, nullable = _unwrap_optional(hints[f.name])
                result.append(FieldInfo(f.name, f.metadata['column'], python_type, nullable, origin))
        return tuple(result)

    def field(self, name: str) -> Optional[FieldInfo]:
        for info in self.fields():
            if info.name == name:
                return info
        return None

    def has_field(self, name: str) -> bool:
        return self.field(name) is not None


ENTITY_SHAPES: Dict[EntityKind, EntityShape] = {
    EntityKind.CUSTOMER: EntityShape(EntityKind.CUSTOMER, Customer, CustomerExtras, 'Customers'),
    EntityKind.EMPLOYEE: EntityShape(EntityKind.EMPLOYEE, Employee, EmployeeExtras, 'Employees'),
    EntityKind.ORDER: EntityShape(EntityKind.ORDER, Order, OrderExtras, 'Orders'),
}


def shape_of(kind: EntityKind) -> EntityShape:
    return ENTITY_SHAPES[kind]


class MappedEntity:
    """A detached snapshot of one mapped row.

    Holds the base record and the extras record of its kind. Attribute access only
    resolves fields that the entity's mapping persists; the records themselves remain
    reachable through `base` and `extras`.
    """

    __slots__ = ('kind', 'base', 'extras', '_mapped')

    def __init__(self, kind: EntityKind, base: Any, extras: Any, mapped_fields: Tuple[str, ...] = ()):
        self.kind = kind
        self.base = base
        self.extras = extras
        self._mapped = frozenset(mapped_fields)

    def __getattr__(self, name: str) -> Any:
        mapped = object.__getattribute__(self, '_mapped')
        if name not in mapped:
            raise AttributeError(
                f"'{name}' is not a mapped field of {object.__getattribute__(self, 'kind').name.lower()}"
            )
        extras = object.__getattribute__(self, 'extras')
        if hasattr(extras, name):
            return getattr(extras, name)
        return getattr(object.__getattribute__(self, 'base'), name)

    def to_dict(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in sorted(self._mapped)}

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, MappedEntity):
            return NotImplemented
        return (self.kind, self.base, self.extras) == (other.kind, other.base, other.extras)

    def __repr__(self) -> str:
        fields = ', '.join(f"{k}={v!r}" for k, v in self.to_dict().items())
        return f"MappedEntity({self.kind.name}, {fields})"
