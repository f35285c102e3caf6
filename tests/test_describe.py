"""Tests for raw describe record models: alias handling and unknown keys."""

from entigraph.kernel.describe import (
    RawChildRelationshipRecord,
    RawEntityRecord,
    RawFieldRecord,
)


def test_unknown_keys_ignored():
    record = RawFieldRecord.model_validate({
        "name": "Name",
        "type": "string",
        "length": 255,
        "label": "Account Name",
        "soapType": "xsd:string",
    })
    assert record.name == "Name"
    assert record.model_extra is None
    assert "length" not in record.model_dump()


def test_aliases_and_field_names_both_accepted():
    by_alias = RawFieldRecord.model_validate({
        "name": "AccountId", "type": "reference",
        "relationshipName": "Account", "referenceTo": ["Account"], "polymorphicForeignKey": False,
    })
    by_name = RawFieldRecord(
        name="AccountId", type="reference",
        relationship_name="Account", reference_to=["Account"], polymorphic_foreign_key=False,
    )
    assert by_alias == by_name


def test_defaults():
    record = RawFieldRecord.model_validate({"name": "Name", "type": "string"})
    assert record.nillable is True
    assert record.createable is False
    assert record.reference_to == []
    assert record.relationship_name is None

    entity = RawEntityRecord.model_validate({"name": "Account"})
    assert entity.queryable is False
    assert entity.fields == []
    assert entity.child_relationships == []


def test_entries_left_unvalidated_on_entity():
    """A bad entry does not fail the entity record itself."""
    entity = RawEntityRecord.model_validate({
        "name": "Account",
        "fields": [{"name": "Flag", "nillable": "sometimes"}, 42],
    })
    assert len(entity.fields) == 2


def test_child_relationship_alias():
    rel = RawChildRelationshipRecord.model_validate(
        {"childSObject": "Contact", "field": "AccountId", "relationshipName": "Contacts", "cascadeDelete": False}
    )
    assert rel.child_sobject == "Contact"
    assert rel.relationship_name == "Contacts"
