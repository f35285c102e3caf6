"""Canonical entity/field model produced by the normalizer.

All models are frozen: an Entity is built once per normalizer pass and is
read-only for the rest of a schema build.
"""

from enum import Enum
from typing import Annotated, Literal, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field as PydanticField

from .errors import FieldVariantError


class FieldKind(str, Enum):
    """Closed set of field kinds."""

    STRING = "string"
    BOOLEAN = "boolean"
    INT = "int"
    FLOAT = "float"
    DATE = "date"
    DATETIME = "datetime"
    BASE64 = "base64"
    ID = "id"
    CURRENCY = "currency"
    TEXTAREA = "textarea"
    PERCENT = "percent"
    PHONE = "phone"
    URL = "url"
    EMAIL = "email"
    ANY = "any"
    ADDRESS = "address"
    LOCATION = "location"
    PICKLIST = "picklist"
    MULTI_PICKLIST = "multi_picklist"
    COMBOBOX = "combobox"
    REFERENCE = "reference"
    POLYMORPHIC_REFERENCE = "polymorphic_reference"


SCALAR_KINDS = frozenset(
    kind for kind in FieldKind
    if kind not in (FieldKind.REFERENCE, FieldKind.POLYMORPHIC_REFERENCE)
)


class FieldConfig(BaseModel):
    """Per-field capability flags. Only `nillable` affects schema shape."""
    nillable: bool = True
    creatable: bool = False
    updatable: bool = False
    filterable: bool = False
    groupable: bool = False
    sortable: bool = False
    aggregatable: bool = False

    model_config = ConfigDict(frozen=True, extra="forbid")


class EntityCapabilities(BaseModel):
    """Per-entity capability flags. Only `queryable` affects schema shape."""
    creatable: bool = False
    updatable: bool = False
    deletable: bool = False
    queryable: bool = False

    model_config = ConfigDict(frozen=True, extra="forbid")


ScalarKind = Literal[
    FieldKind.STRING,
    FieldKind.BOOLEAN,
    FieldKind.INT,
    FieldKind.FLOAT,
    FieldKind.DATE,
    FieldKind.DATETIME,
    FieldKind.BASE64,
    FieldKind.ID,
    FieldKind.CURRENCY,
    FieldKind.TEXTAREA,
    FieldKind.PERCENT,
    FieldKind.PHONE,
    FieldKind.URL,
    FieldKind.EMAIL,
    FieldKind.ANY,
    FieldKind.ADDRESS,
    FieldKind.LOCATION,
    FieldKind.PICKLIST,
    FieldKind.MULTI_PICKLIST,
    FieldKind.COMBOBOX,
]


class ScalarField(BaseModel):
    """A field holding a leaf value."""
    kind: ScalarKind
    source_name: str
    display_name: str
    config: FieldConfig = FieldConfig()

    model_config = ConfigDict(frozen=True, extra="forbid")


class ReferenceField(BaseModel):
    """A link to exactly one entity.

    `target_entity_source_name` is None when the source record listed no
    target at all; the builder treats that like any other unresolvable link.
    """
    kind: Literal[FieldKind.REFERENCE] = FieldKind.REFERENCE
    source_name: str
    display_name: str  # derived from the relationship name, not the field name
    relationship_name: str
    target_entity_source_name: Optional[str] = None
    config: FieldConfig = FieldConfig()

    model_config = ConfigDict(frozen=True, extra="forbid")


class PolymorphicReferenceField(BaseModel):
    """A link that may point at any of several entities."""
    kind: Literal[FieldKind.POLYMORPHIC_REFERENCE] = FieldKind.POLYMORPHIC_REFERENCE
    source_name: str
    display_name: str
    relationship_name: str
    target_entity_source_names: Tuple[str, ...]
    config: FieldConfig = FieldConfig()

    model_config = ConfigDict(frozen=True, extra="forbid")


# The kind tag selects the variant, so a scalar can never carry a link kind.
Field = Annotated[
    Union[ScalarField, ReferenceField, PolymorphicReferenceField],
    PydanticField(discriminator="kind"),
]


class ChildRelationship(BaseModel):
    """A named reverse edge pointing at the owning entity from another one.

    Carried in the model but not consumed by the schema builder.
    """
    source_name: str
    display_name: str
    target_entity_source_name: str

    model_config = ConfigDict(frozen=True, extra="forbid")


class Entity(BaseModel):
    """One node type of the remote data model."""
    source_name: str
    display_name: str
    capabilities: EntityCapabilities = EntityCapabilities()
    fields: Tuple[Field, ...] = ()
    child_links: Tuple[ChildRelationship, ...] = ()

    model_config = ConfigDict(frozen=True, extra="forbid")

    def field_by_display_name(self, name: str) -> Field | None:
        """Get field by display name."""
        for f in self.fields:
            if f.display_name == name:
                return f
        return None

    def reference_fields(self) -> list[Union[ReferenceField, PolymorphicReferenceField]]:
        """Get all link-shaped fields, in declaration order."""
        return [f for f in self.fields if not is_scalar_field(f)]


def is_scalar_field(field: Field) -> bool:
    return field.kind in SCALAR_KINDS


def assert_scalar_field(field: Field) -> ScalarField:
    if not is_scalar_field(field):
        raise FieldVariantError(f"Expected a scalar field but received a {field.kind.value}.")
    return field


def is_reference_field(field: Field) -> bool:
    return field.kind == FieldKind.REFERENCE


def assert_reference_field(field: Field) -> ReferenceField:
    if not is_reference_field(field):
        raise FieldVariantError(f"Expected a reference field but received a {field.kind.value}.")
    return field


def is_polymorphic_reference(field: Field) -> bool:
    return field.kind == FieldKind.POLYMORPHIC_REFERENCE
