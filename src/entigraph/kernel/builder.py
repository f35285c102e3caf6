"""Build the output schema from an entity graph.

The build runs in three phases:
1. register one empty object type per entity, keyed by display name
2. populate every type's field list, looking referenced types up by name
3. build the root query from the queryable entities

Field lists are only populated once every entity type is registered, so
entities may reference each other in any order, cycles included.
"""

import logging
from collections.abc import Iterable
from typing import Dict, Optional, Union

from .entity import Entity, Field, FieldKind, assert_reference_field, is_polymorphic_reference, is_scalar_field
from .errors import SchemaBuildError
from .graph import EntityGraph
from .schema import (
    ArgumentDef,
    FieldDef,
    ObjectTypeDef,
    ScalarTypeDef,
    Schema,
    TypeRef,
    list_of,
    named,
    non_null,
)

logger = logging.getLogger(__name__)


DEFAULT_QUERY_TYPE_NAME = "Query"

ID_TYPE = "ID"
INT_TYPE = "Int"

BUILTIN_SCALARS = frozenset({"ID", "String", "Boolean", "Int", "Float"})

# Kind -> leaf type name. Multi-picklist is the only kind wrapped in a list.
SCALAR_TYPE_NAMES: Dict[FieldKind, str] = {
    FieldKind.ID: "ID",
    FieldKind.STRING: "String",
    FieldKind.BOOLEAN: "Boolean",
    FieldKind.INT: "Int",
    FieldKind.FLOAT: "Float",
    FieldKind.DATE: "Date",
    FieldKind.DATETIME: "DateTime",
    FieldKind.BASE64: "Base64",
    FieldKind.CURRENCY: "Currency",
    FieldKind.TEXTAREA: "TextArea",
    FieldKind.PERCENT: "Percent",
    FieldKind.PHONE: "Phone",
    FieldKind.URL: "URL",
    FieldKind.EMAIL: "Email",
    FieldKind.ANY: "AnyType",
    FieldKind.ADDRESS: "Address",
    FieldKind.LOCATION: "Location",
    FieldKind.PICKLIST: "String",
    FieldKind.MULTI_PICKLIST: "String",
    FieldKind.COMBOBOX: "String",
}

# Entity type names share one namespace with these.
LEAF_TYPE_NAMES = frozenset(SCALAR_TYPE_NAMES.values())


def scalar_type_ref(kind: FieldKind) -> TypeRef:
    """Output type of a scalar kind, before nullability wrapping."""
    ref = named(SCALAR_TYPE_NAMES[kind])
    if kind == FieldKind.MULTI_PICKLIST:
        return list_of(ref)
    return ref


class SchemaBuilder:
    """Builds one Schema from one EntityGraph.

    The type registry lives on the builder instance and is scoped to a single
    build call; nothing is cached across builds.
    """

    def __init__(self, graph: EntityGraph, query_type_name: str = DEFAULT_QUERY_TYPE_NAME):
        self.graph = graph
        self.query_type_name = query_type_name
        self._types: Dict[str, ObjectTypeDef] = {}
        self._scalars: Dict[str, ScalarTypeDef] = {}

    def build_schema(self) -> Schema:
        self._types = {}
        self._scalars = {}

        self._build_types()
        self._populate_types()
        query = self._build_query()

        logger.info(
            "Built schema: %d types, %d operations",
            len(self._types),
            len(query.fields),
        )
        return Schema(
            query=query,
            types=dict(self._types),
            scalars={name: self._scalars[name] for name in sorted(self._scalars)},
        )

    def _build_types(self) -> None:
        """Register an empty object type per entity (first writer wins)."""
        for entity in self.graph.entities:
            if entity.display_name == self.query_type_name:
                raise SchemaBuildError(
                    f"Entity {entity.source_name} collides with the query type name '{self.query_type_name}'"
                )
            if entity.display_name in LEAF_TYPE_NAMES:
                raise SchemaBuildError(
                    f"Entity {entity.source_name} collides with the leaf type name '{entity.display_name}'"
                )
            if entity.display_name in self._types:
                logger.warning("Type %s already registered; skipping %s", entity.display_name, entity.source_name)
                continue
            self._types[entity.display_name] = ObjectTypeDef(
                name=entity.display_name,
                source_name=entity.source_name,
            )

    def _populate_types(self) -> None:
        for entity in self.graph.entities:
            object_type = self._types[entity.display_name]
            if object_type.source_name != entity.source_name:
                continue
            object_type.fields = {
                field.display_name: self._build_field(entity, field)
                for field in entity.fields
            }

    def _build_query(self) -> ObjectTypeDef:
        query = ObjectTypeDef(name=self.query_type_name)

        for entity in self.graph.entities:
            if not entity.capabilities.queryable:
                continue

            entity_type = named(self._lookup_type(entity.display_name).name)

            query.fields[f"{entity.display_name}_by_id"] = FieldDef(
                name=f"{entity.display_name}_by_id",
                type=entity_type,
                args=[ArgumentDef(name="id", type=self._scalar(ID_TYPE))],
            )
            query.fields[entity.display_name] = FieldDef(
                name=entity.display_name,
                type=list_of(entity_type),
                args=[
                    ArgumentDef(name="limit", type=non_null(self._scalar(INT_TYPE))),
                    ArgumentDef(name="offset", type=self._scalar(INT_TYPE)),
                ],
            )

        return query

    def _build_field(self, entity: Entity, field: Field) -> FieldDef:
        if is_scalar_field(field):
            type_ref = scalar_type_ref(field.kind)
            self._scalar(type_ref.named_type)
        else:
            type_ref = self._reference_type(entity, field)

        if not field.config.nillable:
            type_ref = non_null(type_ref)

        return FieldDef(name=field.display_name, type=type_ref)

    def _reference_type(self, entity: Entity, field: Field) -> TypeRef:
        """Link to the target type, or fall back to an opaque id."""
        target: Optional[Entity] = None
        if not is_polymorphic_reference(field):
            reference = assert_reference_field(field)
            if reference.target_entity_source_name:
                target = self.graph.entity_by_source_name(reference.target_entity_source_name)

        if target is None:
            logger.debug(
                "Reference %s.%s has no single known target; using %s",
                entity.source_name, field.source_name, ID_TYPE,
            )
            return self._scalar(ID_TYPE)

        return named(self._lookup_type(target.display_name).name)

    def _lookup_type(self, name: str) -> ObjectTypeDef:
        object_type = self._types.get(name)
        if object_type is None:
            raise SchemaBuildError(f"Type '{name}' is not registered")
        return object_type

    def _scalar(self, name: str) -> TypeRef:
        """Record a leaf type as used and return a reference to it."""
        if name not in self._scalars:
            self._scalars[name] = ScalarTypeDef(name=name, builtin=name in BUILTIN_SCALARS)
        return named(name)


def build(
    graph: Union[EntityGraph, Iterable[Entity]],
    query_type_name: str = DEFAULT_QUERY_TYPE_NAME,
) -> Schema:
    """Build a schema from a graph or a plain sequence of entities."""
    if not isinstance(graph, EntityGraph):
        graph = EntityGraph(graph)
    return SchemaBuilder(graph, query_type_name=query_type_name).build_schema()
