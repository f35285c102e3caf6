"""Pydantic models for raw entity metadata records.

These mirror the decoded shape of a describe call on the remote data model.
Fetching and decoding belong to the caller; the kernel only reads these
in-memory records. Unknown keys are ignored because real describe payloads
carry far more than the normalizer needs.
"""

from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class RawFieldRecord(BaseModel):
    """A field entry of a describe record."""
    name: Optional[str] = None
    type: Optional[str] = None  # source type tag, e.g. "string", "double", "reference"
    nillable: bool = True
    createable: bool = False
    updateable: bool = False
    filterable: bool = False
    groupable: bool = False
    sortable: bool = False
    aggregatable: bool = False
    relationship_name: Optional[str] = Field(None, alias="relationshipName")
    reference_to: List[str] = Field(default_factory=list, alias="referenceTo")
    polymorphic_foreign_key: bool = Field(False, alias="polymorphicForeignKey")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RawChildRelationshipRecord(BaseModel):
    """A child relationship entry of a describe record.

    The relationship name is nullable in practice even though the remote
    documentation says otherwise.
    """
    child_sobject: Optional[str] = Field(None, alias="childSObject")
    field: Optional[str] = None
    relationship_name: Optional[str] = Field(None, alias="relationshipName")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RawEntityRecord(BaseModel):
    """A describe record for one entity."""
    name: Optional[str] = None
    label: Optional[str] = None
    createable: bool = False
    updateable: bool = False
    deletable: bool = False
    queryable: bool = False
    # Entries stay unvalidated here; the normalizer validates them one at a
    # time so a single malformed entry does not reject the whole record.
    fields: List[Any] = Field(default_factory=list)
    child_relationships: List[Any] = Field(
        default_factory=list, alias="childRelationships"
    )

    model_config = ConfigDict(extra="ignore", populate_by_name=True)
