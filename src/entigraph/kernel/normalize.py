"""Normalize raw describe records into the canonical Entity model.

Rules:
- Field kinds come from a closed mapping of source type tags; an unknown
  tag is an error, never a silent default.
- "reference" splits into single vs polymorphic on the polymorphic marker
  or on more than one declared target.
- A reference without a relationship name is dropped (expected absence).
- A child relationship without a relationship name is dropped.
- Compound fields (e.g. address, name) pass through like any other field;
  the atomic fields they overlap with are kept as well.
- Ordering is the record's insertion order.
"""

import logging
import re
from collections.abc import Iterable, Mapping
from typing import Any, List, Optional, Tuple, Union

from pydantic import BaseModel, Field as PydanticField, ValidationError

from ..codes import NormalizationCode
from ..contracts import NormalizationIssue
from .builder import LEAF_TYPE_NAMES
from .describe import RawChildRelationshipRecord, RawEntityRecord, RawFieldRecord
from .entity import (
    ChildRelationship,
    Entity,
    EntityCapabilities,
    Field,
    FieldConfig,
    FieldKind,
    PolymorphicReferenceField,
    ReferenceField,
    ScalarField,
)
from .errors import (
    InvalidNameError,
    MissingIdentityError,
    NormalizationError,
    UnknownFieldTypeError,
)

logger = logging.getLogger(__name__)


SOURCE_TYPE_KINDS: dict[str, FieldKind] = {
    "string": FieldKind.STRING,
    "boolean": FieldKind.BOOLEAN,
    "int": FieldKind.INT,
    "double": FieldKind.FLOAT,
    "date": FieldKind.DATE,
    "datetime": FieldKind.DATETIME,
    "base64": FieldKind.BASE64,
    "id": FieldKind.ID,
    "currency": FieldKind.CURRENCY,
    "textarea": FieldKind.TEXTAREA,
    "percent": FieldKind.PERCENT,
    "phone": FieldKind.PHONE,
    "url": FieldKind.URL,
    "email": FieldKind.EMAIL,
    "combobox": FieldKind.COMBOBOX,
    "picklist": FieldKind.PICKLIST,
    "multipicklist": FieldKind.MULTI_PICKLIST,
    "anyType": FieldKind.ANY,
    "address": FieldKind.ADDRESS,
    "location": FieldKind.LOCATION,
}

REFERENCE_TYPE = "reference"

# Acronym runs ("SLA" in "SLAExpiration"), words, digit runs with their suffix ("2nd").
_WORD_RE = re.compile(r"[A-Z]+(?=[A-Z][a-z])|[A-Z]?[a-z]+|[A-Z]+|[0-9]+[a-z]*")
_INVALID_NAME_CHARS_RE = re.compile(r"[^_0-9A-Za-z]")
_NON_ASCII_RE = re.compile(r"[^\x00-\x7f]")


RawEntity = Union[RawEntityRecord, Mapping[str, Any]]


class NormalizationResult(BaseModel):
    """Entities that normalized cleanly plus everything that was dropped."""
    entities: List[Entity] = PydanticField(default_factory=list)
    issues: List[NormalizationIssue] = PydanticField(default_factory=list)

    @property
    def errors(self) -> List[NormalizationIssue]:
        return [i for i in self.issues if i.is_error]

    @property
    def ok(self) -> bool:
        return not self.errors


def _check_ascii(name: str) -> None:
    # Output names are ASCII identifiers; other letters would vanish silently.
    if _NON_ASCII_RE.search(name):
        raise InvalidNameError(f"Name '{name}' has non-ASCII characters")


def camel_case(name: str) -> str:
    """Camel-case a source name.

    Examples: "AccountId" -> "accountId", "My_Field__c" -> "myFieldC",
    "SLAExpirationDate__c" -> "slaExpirationDateC".
    """
    _check_ascii(name)
    words = _WORD_RE.findall(name)
    if not words:
        raise InvalidNameError(f"Name '{name}' has no usable characters")
    head, *rest = words
    result = head.lower() + "".join(w[:1].upper() + w[1:].lower() for w in rest)
    if result[0].isdigit():
        result = "_" + result
    return result


def schema_type_name(name: str) -> str:
    """Derive an entity display name usable as a schema type name."""
    _check_ascii(name)
    result = _INVALID_NAME_CHARS_RE.sub("_", name)
    if not result.strip("_"):
        raise InvalidNameError(f"Name '{name}' has no usable characters")
    if result[0].isdigit():
        result = "_" + result
    return result


def _coerce(model: type[BaseModel], raw: Any, entity: Optional[str] = None) -> Any:
    """Validate a raw record, converting pydantic errors to NormalizationError."""
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        element = raw.get("name") if isinstance(raw, Mapping) else None
        raise NormalizationError(
            f"Malformed {model.__name__}: {e.error_count()} validation error(s)",
            entity=entity,
            element=element,
        ) from e


def _field_config(raw: RawFieldRecord) -> FieldConfig:
    return FieldConfig(
        nillable=raw.nillable,
        creatable=raw.createable,
        updatable=raw.updateable,
        filterable=raw.filterable,
        groupable=raw.groupable,
        sortable=raw.sortable,
        aggregatable=raw.aggregatable,
    )


def normalize_field(raw: Union[RawFieldRecord, Mapping[str, Any]], entity: Optional[str] = None) -> Optional[Field]:
    """Normalize one field record.

    Returns None for an expected absence (reference without relationship name).

    Raises:
        MissingIdentityError: the record has no name.
        UnknownFieldTypeError: the type tag is outside the supported set.
        NormalizationError: the record is otherwise malformed.
    """
    record: RawFieldRecord = _coerce(RawFieldRecord, raw, entity)
    if not record.name:
        raise MissingIdentityError("Field record has no name", entity=entity)

    config = _field_config(record)

    if record.type == REFERENCE_TYPE:
        # Some standard references (e.g. Account.DelegatedApproverId) carry no
        # relationship name even though the documentation says they always do.
        if not record.relationship_name:
            return None

        display_name = camel_case(record.relationship_name)
        if record.polymorphic_foreign_key or len(record.reference_to) > 1:
            return PolymorphicReferenceField(
                source_name=record.name,
                display_name=display_name,
                relationship_name=record.relationship_name,
                target_entity_source_names=tuple(record.reference_to),
                config=config,
            )
        return ReferenceField(
            source_name=record.name,
            display_name=display_name,
            relationship_name=record.relationship_name,
            target_entity_source_name=record.reference_to[0] if record.reference_to else None,
            config=config,
        )

    kind = SOURCE_TYPE_KINDS.get(record.type) if record.type is not None else None
    if kind is None:
        raise UnknownFieldTypeError(str(record.type), entity=entity, element=record.name)

    return ScalarField(
        kind=kind,
        source_name=record.name,
        display_name=camel_case(record.name),
        config=config,
    )


def normalize_child_relationship(
    raw: Union[RawChildRelationshipRecord, Mapping[str, Any]], entity: Optional[str] = None
) -> Optional[ChildRelationship]:
    """Normalize one child relationship; None when it has no relationship name."""
    record: RawChildRelationshipRecord = _coerce(RawChildRelationshipRecord, raw, entity)
    if not record.relationship_name:
        return None
    if not record.child_sobject:
        raise MissingIdentityError(
            f"Child relationship '{record.relationship_name}' has no child entity",
            entity=entity,
            element=record.relationship_name,
        )
    return ChildRelationship(
        source_name=record.relationship_name,
        display_name=camel_case(record.relationship_name),
        target_entity_source_name=record.child_sobject,
    )


def _issue(code: NormalizationCode, severity: str, message: str,
           entity: Optional[str] = None, element: Optional[str] = None) -> NormalizationIssue:
    return NormalizationIssue(code=code, severity=severity, entity=entity, element=element, message=message)


def _issue_from_error(error: NormalizationError, entity: Optional[str] = None) -> NormalizationIssue:
    return _issue(
        NormalizationCode(error.code), "error", str(error), error.entity or entity, error.element,
    )


def _normalize_entity(
    raw: RawEntity, strict: bool = False
) -> Tuple[Entity, List[NormalizationIssue]]:
    record: RawEntityRecord = _coerce(RawEntityRecord, raw)
    if not record.name:
        raise MissingIdentityError("Entity record has no name")

    entity_name = record.name
    issues: List[NormalizationIssue] = []
    fields: List[Field] = []
    seen_names: set[str] = set()

    for raw_field in record.fields:
        try:
            field = normalize_field(raw_field, entity_name)
        except NormalizationError as e:
            if strict:
                raise
            logger.warning("Skipping field on %s: %s", entity_name, e)
            issues.append(_issue_from_error(e, entity_name))
            continue

        if field is None:
            element = raw_field.get("name") if isinstance(raw_field, Mapping) else getattr(raw_field, "name", None)
            logger.debug("Dropping reference %s.%s: no relationship name", entity_name, element)
            issues.append(_issue(
                NormalizationCode.MISSING_RELATIONSHIP_NAME, "drop",
                "Reference field has no relationship name", entity_name, element,
            ))
            continue

        if field.display_name in seen_names:
            message = f"Field display name '{field.display_name}' already used on {entity_name}"
            if strict:
                raise NormalizationError(message, entity=entity_name, element=field.source_name)
            logger.warning("Skipping field %s.%s: %s", entity_name, field.source_name, message)
            issues.append(_issue(
                NormalizationCode.DUPLICATE_FIELD_NAME, "error", message, entity_name, field.source_name,
            ))
            continue

        seen_names.add(field.display_name)
        fields.append(field)

    child_links: List[ChildRelationship] = []
    for raw_rel in record.child_relationships:
        try:
            rel = normalize_child_relationship(raw_rel, entity_name)
        except NormalizationError as e:
            if strict:
                raise
            logger.warning("Skipping child relationship on %s: %s", entity_name, e)
            issues.append(_issue_from_error(e, entity_name))
            continue
        if rel is None:
            issues.append(_issue(
                NormalizationCode.MISSING_CHILD_RELATIONSHIP_NAME, "drop",
                "Child relationship has no relationship name", entity_name,
            ))
            continue
        child_links.append(rel)

    entity = Entity(
        source_name=entity_name,
        display_name=schema_type_name(entity_name),
        capabilities=EntityCapabilities(
            creatable=record.createable,
            updatable=record.updateable,
            deletable=record.deletable,
            queryable=record.queryable,
        ),
        fields=tuple(fields),
        child_links=tuple(child_links),
    )
    return entity, issues


def normalize(raw: RawEntity, strict: bool = False) -> Entity:
    """Normalize one describe record into an Entity.

    Malformed fields and child relationships are skipped (or raised when
    `strict` is set). A record without a name raises MissingIdentityError.
    """
    entity, _ = _normalize_entity(raw, strict=strict)
    return entity


def normalize_all(records: Iterable[RawEntity], strict: bool = False) -> NormalizationResult:
    """Normalize a sequence of describe records.

    Each record is isolated: a rejected record is reported and the rest
    still normalize. A record whose source or display name repeats an
    earlier record is rejected rather than shadowing it, and so is one whose
    display name is already a leaf type name (e.g. "Location").
    """
    result = NormalizationResult()
    source_names: set[str] = set()
    display_names: set[str] = set()

    for raw in records:
        try:
            entity, issues = _normalize_entity(raw, strict=strict)
        except NormalizationError as e:
            if strict:
                raise
            logger.warning("Rejecting entity record: %s", e)
            result.issues.append(_issue_from_error(e))
            continue

        result.issues.extend(issues)

        if entity.source_name in source_names or entity.display_name in display_names:
            message = (
                f"Entity '{entity.source_name}' collides with an earlier entity "
                f"(display name '{entity.display_name}')"
            )
            if strict:
                raise NormalizationError(message, entity=entity.source_name)
            logger.warning("Rejecting entity record: %s", message)
            result.issues.append(_issue(
                NormalizationCode.DUPLICATE_ENTITY_NAME, "error", message, entity.source_name,
            ))
            continue

        if entity.display_name in LEAF_TYPE_NAMES:
            message = f"Entity '{entity.source_name}' takes the leaf type name '{entity.display_name}'"
            if strict:
                raise NormalizationError(message, entity=entity.source_name)
            logger.warning("Rejecting entity record: %s", message)
            result.issues.append(_issue(
                NormalizationCode.RESERVED_TYPE_NAME, "error", message, entity.source_name,
            ))
            continue

        source_names.add(entity.source_name)
        display_names.add(entity.display_name)
        result.entities.append(entity)

    logger.info(
        "Normalized %d entities (%d issues)", len(result.entities), len(result.issues)
    )
    return result
