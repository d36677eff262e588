# src/mapping_fixtures/model.py
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Set

from .entities import EntityKind
from .errors import InvalidMappingError
from .mapping import EntityMapping, EntityOverrides, compile_entity_mapping

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MappingModel:
    """Compiled mappings of every entity kind in a model. Shared read-only by all contexts."""
    entities: Mapping[EntityKind, EntityMapping]

    def mapping_for(self, kind: EntityKind) -> EntityMapping:
        try:
            return self.entities[kind]
        except KeyError:
            raise InvalidMappingError(kind.name.lower(), ["entity is not part of the model"]) from None

    def __contains__(self, kind: EntityKind) -> bool:
        return kind in self.entities

    def __iter__(self) -> Iterator[EntityMapping]:
        return iter(self.entities.values())


class ModelBuilder:
    """Collects layers of entity overrides and compiles them into a `MappingModel`.

    Registering overrides for a kind that already has some overlays the new layer on
    top of the existing one.
    """

    def __init__(self):
        self._overrides: Dict[EntityKind, EntityOverrides] = {}
        self._ignored: Set[EntityKind] = set()

    def entity(self, overrides: EntityOverrides) -> 'ModelBuilder':
        existing = self._overrides.get(overrides.kind)
        self._overrides[overrides.kind] = overrides if existing is None else existing.overlay(overrides)
        self._ignored.discard(overrides.kind)
        return self

    def ignore(self, kind: EntityKind) -> 'ModelBuilder':
        self._overrides.pop(kind, None)
        self._ignored.add(kind)
        return self

    def overrides_for(self, kind: EntityKind) -> EntityOverrides:
        return self._overrides[kind]

    def build(self) -> MappingModel:
        compiled: Dict[EntityKind, EntityMapping] = {}
        errors: List[str] = []
        for kind, overrides in self._overrides.items():
            try:
                compiled[kind] = compile_entity_mapping(overrides)
            except InvalidMappingError as e:
                errors.extend(f"{e.entity}: {problem}" for problem in e.problems)
        if errors:
            raise InvalidMappingError('model', errors)
        for mapping in compiled.values():
            logger.debug(f"Mapped {mapping.entity_name} to {mapping.qualified_name} "
                         f"({', '.join(c.column for c in mapping.columns)})")
        return MappingModel(MappingProxyType(compiled))
