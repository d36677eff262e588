# src/mapping_fixtures/adapters.py
import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Type


class SQLTypeAdapter:
    """Converts values between a Python field type and what a database driver returns."""

    @property
    def supported_types(self) -> Dict[Type, List[Any]]:
        raise NotImplementedError

    def to_database(self, value: Any, target_type: Type, options: Optional[Dict[str, Any]] = None) -> Any:
        raise NotImplementedError

    def from_database(self, value: Any, target_type: Type, options: Optional[Dict[str, Any]] = None) -> Any:
        raise NotImplementedError


class EnumAdapter(SQLTypeAdapter):
    """
    Adapts Python Enum members to their stored value (int for IntEnum) and vice-versa.
    """
    @property
    def supported_types(self) -> Dict[Type, List[Any]]:
        return {Enum: [int, str]}

    def to_database(self, value: Enum, target_type: Type, options: Optional[Dict[str, Any]] = None) -> Any:
        if value is None:
            return None
        return value.value

    def from_database(self, value: Any, target_type: Type, options: Optional[Dict[str, Any]] = None) -> Enum:
        if value is None:
            return None
        if isinstance(value, target_type):
            return value
        if isinstance(value, (bytes, str)) and issubclass(target_type, int):
            value = int(value)
        return target_type(value)


class DecimalAdapter(SQLTypeAdapter):
    """
    Adapts Python Decimal to DECIMAL/NUMERIC (or REAL/TEXT on SQLite) and vice-versa.
    """
    @property
    def supported_types(self) -> Dict[Type, List[Any]]:
        return {Decimal: [Decimal, float, str]}

    def to_database(self, value: Decimal, target_type: Type, options: Optional[Dict[str, Any]] = None) -> Any:
        if value is None:
            return None
        if target_type is float:
            return float(value)
        if target_type is str:
            return str(value)
        return value

    def from_database(self, value: Any, target_type: Type, options: Optional[Dict[str, Any]] = None) -> Decimal:
        if value is None:
            return None
        if isinstance(value, Decimal):
            return value
        # str() first so floats keep their shortest repr
        return Decimal(str(value))


class DatetimeAdapter(SQLTypeAdapter):
    """
    Adapts Python datetime to DATETIME (or ISO-8601 TEXT on SQLite) and vice-versa.
    """
    @property
    def supported_types(self) -> Dict[Type, List[Any]]:
        return {datetime.datetime: [datetime.datetime, str]}

    def to_database(self, value: datetime.datetime, target_type: Type,
                    options: Optional[Dict[str, Any]] = None) -> Any:
        if value is None:
            return None
        if target_type is str:
            return value.isoformat(sep=' ')
        return value

    def from_database(self, value: Any, target_type: Type,
                      options: Optional[Dict[str, Any]] = None) -> datetime.datetime:
        if value is None:
            return None
        if isinstance(value, datetime.datetime):
            return value
        if isinstance(value, datetime.date):
            return datetime.datetime(value.year, value.month, value.day)
        if isinstance(value, bytes):
            value = value.decode('utf-8')
        return datetime.datetime.fromisoformat(value)


class AdapterRegistry:
    """Looks up the adapter for a field type. Subclasses of a registered type share its adapter."""

    def __init__(self):
        self._adapters: Dict[Type, SQLTypeAdapter] = {}

    def register(self, adapter: SQLTypeAdapter, py_type: Type, allow_override: bool = False) -> None:
        if py_type in self._adapters and not allow_override:
            raise ValueError(f"An adapter for {py_type.__name__} is already registered")
        self._adapters[py_type] = adapter

    def get_adapter(self, py_type: Type) -> Optional[SQLTypeAdapter]:
        if not isinstance(py_type, type):
            return None
        for candidate in py_type.__mro__:
            if candidate in self._adapters:
                return self._adapters[candidate]
        return None

    def from_database(self, value: Any, py_type: Type) -> Any:
        adapter = self.get_adapter(py_type)
        if adapter is None:
            return value
        return adapter.from_database(value, py_type)

    def to_database(self, value: Any, target_type: Optional[Type] = None) -> Any:
        if value is None:
            return None
        adapter = self.get_adapter(type(value))
        if adapter is None:
            return value
        return adapter.to_database(value, target_type)


def default_adapter_registry(overrides: Tuple[SQLTypeAdapter, ...] = ()) -> AdapterRegistry:
    registry = AdapterRegistry()
    for adapter in (EnumAdapter(), DecimalAdapter(), DatetimeAdapter()) + tuple(overrides):
        for py_type in adapter.supported_types:
            registry.register(adapter, py_type, allow_override=True)
    return registry
