"""Output schema description.

Object types refer to each other by name, so a cyclic entity graph maps to
a finite, serializable description. `Schema.get_type` resolves a name back
to its type definition.
"""

from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


class TypeRef(BaseModel):
    """A reference to an output type, possibly wrapped as list or non-null."""
    kind: Literal["named", "list", "non_null"]
    name: Optional[str] = None  # set for "named"
    of_type: Optional["TypeRef"] = None  # set for "list" and "non_null"

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="after")
    def check_shape(self) -> "TypeRef":
        if self.kind == "named":
            if not self.name or self.of_type is not None:
                raise ValueError("A named type reference needs a name and no wrapped type")
        elif self.of_type is None or self.name is not None:
            raise ValueError(f"A {self.kind} type reference needs a wrapped type and no name")
        return self

    def __str__(self) -> str:
        if self.kind == "named":
            return self.name
        if self.kind == "list":
            return f"[{self.of_type}]"
        return f"{self.of_type}!"

    @property
    def is_non_null(self) -> bool:
        return self.kind == "non_null"

    @property
    def named_type(self) -> str:
        """Name of the innermost named type."""
        ref = self
        while ref.kind != "named":
            ref = ref.of_type
        return ref.name


def named(name: str) -> TypeRef:
    return TypeRef(kind="named", name=name)


def list_of(of_type: TypeRef) -> TypeRef:
    return TypeRef(kind="list", of_type=of_type)


def non_null(of_type: TypeRef) -> TypeRef:
    if of_type.is_non_null:
        return of_type
    return TypeRef(kind="non_null", of_type=of_type)


class ScalarTypeDef(BaseModel):
    """A leaf type."""
    name: str
    builtin: bool = False

    model_config = ConfigDict(frozen=True, extra="forbid")


class ArgumentDef(BaseModel):
    """An argument of a root query operation."""
    name: str
    type: TypeRef

    model_config = ConfigDict(frozen=True, extra="forbid")


class FieldDef(BaseModel):
    """A field of an object type. Entity fields carry only a type."""
    name: str
    type: TypeRef
    args: List[ArgumentDef] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class ObjectTypeDef(BaseModel):
    """An object type. Fields are filled in after every type is registered."""
    name: str
    fields: Dict[str, FieldDef] = Field(default_factory=dict)
    source_name: Optional[str] = None  # entity source name, None for the query type

    model_config = ConfigDict(extra="forbid")


class Schema(BaseModel):
    """Bound set of types plus the root query type."""
    query: ObjectTypeDef
    types: Dict[str, ObjectTypeDef] = Field(default_factory=dict)  # entity types, graph order
    scalars: Dict[str, ScalarTypeDef] = Field(default_factory=dict)  # leaf types in use, sorted by name

    model_config = ConfigDict(extra="forbid")

    def get_type(self, name: str) -> ObjectTypeDef | ScalarTypeDef | None:
        """Resolve a type name to its definition."""
        if name == self.query.name:
            return self.query
        return self.types.get(name) or self.scalars.get(name)

    def resolve(self, ref: TypeRef) -> ObjectTypeDef | ScalarTypeDef | None:
        """Resolve the innermost named type of a reference."""
        return self.get_type(ref.named_type)

    def operation_names(self) -> List[str]:
        return list(self.query.fields)
