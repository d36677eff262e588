# src/mapping_fixtures/mapping.py
"""Mapping override layer.

Overrides are plain data: an `EntityOverrides` value lists, per field, one rule out of
`Excluded`, `Renamed(column)` or `Kept`, together with the entity's key, table and
schema. The operations on `EntityOverrides` never mutate it, they return a new value.

`compile_entity_mapping` validates a set of overrides and produces the immutable
`EntityMapping` that query contexts read from. Compilation performs no I/O, so a
mapping may name a table or schema that does not exist in the store.
"""

import dataclasses
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple

from .entities import EntityKind, FieldInfo, shape_of
from .errors import InvalidMappingError


class FieldRule:
    """Persistence rule for one field."""


@dataclass(frozen=True)
class Excluded(FieldRule):
    pass


@dataclass(frozen=True)
class Kept(FieldRule):
    pass


@dataclass(frozen=True)
class Renamed(FieldRule):
    column: str


EXCLUDED = Excluded()
KEPT = Kept()


@dataclass(frozen=True)
class EntityOverrides:
    """Declarative overrides for one entity kind.

    `schema` is None when this set of overrides does not touch the schema, and the
    empty string when it explicitly selects the store's default schema.
    """
    kind: EntityKind
    key: Optional[str] = None
    table: Optional[str] = None
    schema: Optional[str] = None
    rules: Tuple[Tuple[str, FieldRule], ...] = ()

    def _require_field(self, name: str) -> None:
        if not shape_of(self.kind).has_field(name):
            raise InvalidMappingError(self.kind.name.lower(), [f"unknown field '{name}'"])

    def _with_rule(self, name: str, rule: FieldRule) -> 'EntityOverrides':
        self._require_field(name)
        return dataclasses.replace(self, rules=self.rules + ((name, rule),))

    def exclude(self, *fields: str) -> 'EntityOverrides':
        overrides = self
        for name in fields:
            overrides = overrides._with_rule(name, EXCLUDED)
        return overrides

    def keep(self, *fields: str) -> 'EntityOverrides':
        overrides = self
        for name in fields:
            overrides = overrides._with_rule(name, KEPT)
        return overrides

    def rename_column(self, name: str, column: str) -> 'EntityOverrides':
        return self._with_rule(name, Renamed(column))

    def set_key(self, name: str) -> 'EntityOverrides':
        self._require_field(name)
        return dataclasses.replace(self, key=name)

    def set_table(self, table: str) -> 'EntityOverrides':
        return dataclasses.replace(self, table=table)

    def set_schema(self, schema: Optional[str]) -> 'EntityOverrides':
        return dataclasses.replace(self, schema='' if schema is None else schema)

    def overlay(self, other: 'EntityOverrides') -> 'EntityOverrides':
        """Apply a later layer of overrides on top of this one.

        Key, table and schema set by `other` win. A field that `other` gives any rule
        loses every rule this layer gave it.
        """
        if other.kind is not self.kind:
            raise InvalidMappingError(
                self.kind.name.lower(), [f"cannot overlay overrides for {other.kind.name.lower()}"]
            )
        replaced = {name for name, _ in other.rules}
        return EntityOverrides(
            kind=self.kind,
            key=other.key if other.key is not None else self.key,
            table=other.table if other.table is not None else self.table,
            schema=other.schema if other.schema is not None else self.schema,
            rules=tuple(r for r in self.rules if r[0] not in replaced) + other.rules,
        )


@dataclass(frozen=True)
class ColumnMapping:
    field: str
    column: str
    python_type: type
    nullable: bool
    origin: str
    is_key: bool = False


@dataclass(frozen=True)
class EntityMapping:
    """Compiled, immutable mapping of one entity kind onto a table."""
    kind: EntityKind
    table: str
    schema: Optional[str]
    key: ColumnMapping
    columns: Tuple[ColumnMapping, ...]
    excluded: FrozenSet[str]

    @property
    def entity_name(self) -> str:
        return self.kind.name.lower()

    @property
    def qualified_name(self) -> str:
        return f"{self.schema}.{self.table}" if self.schema else self.table

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(c.field for c in self.columns)

    def column_for(self, name: str) -> ColumnMapping:
        """Look up the column of a persisted field.

        Excluded and unknown fields are not part of the mapped shape and are rejected.
        """
        for column in self.columns:
            if column.field == name:
                return column
        if name in self.excluded:
            raise InvalidMappingError(self.entity_name, [f"field '{name}' is excluded from the mapping"])
        raise InvalidMappingError(self.entity_name, [f"unknown field '{name}'"])


def _resolve_rules(overrides: EntityOverrides, problems: List[str]) -> Dict[str, FieldRule]:
    resolved: Dict[str, FieldRule] = {}
    for name, rule in overrides.rules:
        previous = resolved.get(name)
        if previous is None or previous == rule:
            resolved[name] = rule
            continue
        if isinstance(previous, Excluded) or isinstance(rule, Excluded):
            problems.append(f"field '{name}' is both excluded and mapped")
        elif isinstance(previous, Renamed) and isinstance(rule, Renamed):
            problems.append(f"field '{name}' is renamed to both '{previous.column}' and '{rule.column}'")
        else:
            # Kept and Renamed agree that the field is persisted
            resolved[name] = rule if isinstance(rule, Renamed) else previous
    return resolved


def _column_name(info: FieldInfo, rule: Optional[FieldRule]) -> str:
    if isinstance(rule, Renamed):
        return rule.column
    return info.column


def compile_entity_mapping(overrides: EntityOverrides) -> EntityMapping:
    """Validate overrides and build the immutable mapping for their entity kind.

    Raises:
        InvalidMappingError: listing every problem found.
    """
    shape = shape_of(overrides.kind)
    entity = overrides.kind.name.lower()
    problems: List[str] = []

    rules = _resolve_rules(overrides, problems)

    if overrides.key is None:
        problems.append("no key declared")
    elif isinstance(rules.get(overrides.key), Excluded):
        problems.append(f"key field '{overrides.key}' is excluded")

    table = overrides.table if overrides.table is not None else shape.default_table
    if not table:
        problems.append("table name is empty")

    columns: List[ColumnMapping] = []
    excluded = set()
    key_column = None
    for info in shape.fields():
        rule = rules.get(info.name)
        is_key = info.name == overrides.key
        if isinstance(rule, Excluded):
            excluded.add(info.name)
            continue
        if rule is None and not is_key:
            problems.append(f"field '{info.name}' has no persistence rule")
            continue
        column = _column_name(info, rule)
        if not column:
            problems.append(f"field '{info.name}' is renamed to an empty column name")
            continue
        mapped = ColumnMapping(info.name, column, info.python_type, info.nullable, info.origin, is_key)
        if is_key:
            key_column = mapped
        columns.append(mapped)

    seen: Dict[str, str] = {}
    for mapped in columns:
        folded = mapped.column.casefold()
        if folded in seen:
            problems.append(
                f"fields '{seen[folded]}' and '{mapped.field}' both map to column '{mapped.column}'"
            )
        else:
            seen[folded] = mapped.field

    if problems:
        raise InvalidMappingError(entity, problems)

    return EntityMapping(
        kind=overrides.kind,
        table=table,
        schema=overrides.schema or None,
        key=key_column,
        columns=tuple(columns),
        excluded=frozenset(excluded),
    )
