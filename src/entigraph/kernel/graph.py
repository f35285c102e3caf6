"""Entity graph: ordered entities with lookup by source and display name."""

from collections import Counter
from collections.abc import Iterable
from typing import Dict, List, Set

from .entity import Entity, is_polymorphic_reference, is_reference_field
from .errors import DuplicateEntityError


class EntityGraph:
    """Read-only view over the normalized entities of one schema build."""

    def __init__(self, entities: Iterable[Entity]):
        self.entities: List[Entity] = list(entities)
        self._by_source_name: Dict[str, Entity] = {}
        self._by_display_name: Dict[str, Entity] = {}
        self._build()

    def _build(self):
        """Index entities, rejecting duplicate names."""
        for kind, names in (
            ("source", [e.source_name for e in self.entities]),
            ("display", [e.display_name for e in self.entities]),
        ):
            duplicates = {name for name, count in Counter(names).items() if count > 1}
            if duplicates:
                raise DuplicateEntityError(duplicates, kind=kind)

        for entity in self.entities:
            self._by_source_name[entity.source_name] = entity
            self._by_display_name[entity.display_name] = entity

    def __len__(self) -> int:
        return len(self.entities)

    def __iter__(self):
        return iter(self.entities)

    def entity_by_source_name(self, name: str) -> Entity | None:
        """Get entity by source name."""
        return self._by_source_name.get(name)

    def entity_by_display_name(self, name: str) -> Entity | None:
        """Get entity by display name."""
        return self._by_display_name.get(name)

    def referenced_source_names(self, entity: Entity) -> Set[str]:
        """Get every entity source name referenced by the entity's link fields."""
        names: Set[str] = set()
        for field in entity.fields:
            if is_reference_field(field) and field.target_entity_source_name:
                names.add(field.target_entity_source_name)
            elif is_polymorphic_reference(field):
                names.update(field.target_entity_source_names)
        return names

    def unresolved_references(self) -> Dict[str, List[str]]:
        """Map entity source name -> sorted referenced names absent from the graph.

        Diagnostics only: unresolved references degrade to an opaque id when
        the schema is built.
        """
        unresolved = {}
        for entity in self.entities:
            missing = sorted(n for n in self.referenced_source_names(entity) if n not in self._by_source_name)
            if missing:
                unresolved[entity.source_name] = missing
        return unresolved
