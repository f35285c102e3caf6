"""Pytest configuration and shared describe-record fixtures.

No sys.path hacks - tests should import from installed entigraph package.
"""

import pytest


def field_record(name, type, **overrides):
    """Build a describe field entry with the flags a real payload carries."""
    record = {
        "name": name,
        "type": type,
        "nillable": True,
        "createable": True,
        "updateable": True,
        "filterable": True,
        "groupable": False,
        "sortable": True,
        "aggregatable": False,
        "relationshipName": None,
        "referenceTo": [],
        "polymorphicForeignKey": False,
    }
    record.update(overrides)
    return record


def reference_record(name, relationship_name, targets, **overrides):
    return field_record(
        name,
        "reference",
        relationshipName=relationship_name,
        referenceTo=list(targets),
        **overrides,
    )


def entity_record(name, fields=(), queryable=True, child_relationships=(), **overrides):
    record = {
        "name": name,
        "label": name,
        "createable": True,
        "updateable": True,
        "deletable": True,
        "queryable": queryable,
        "fields": list(fields),
        "childRelationships": list(child_relationships),
    }
    record.update(overrides)
    return record


@pytest.fixture
def account_record():
    """Queryable Account with a required name."""
    return entity_record(
        "Account",
        fields=[
            field_record("Id", "id", nillable=False),
            field_record("Name", "string", nillable=False),
        ],
        child_relationships=[
            {"childSObject": "Contact", "field": "AccountId", "relationshipName": "Contacts"},
        ],
    )


@pytest.fixture
def contact_record():
    """Non-queryable Contact linking to Account."""
    return entity_record(
        "Contact",
        fields=[
            field_record("Id", "id"),
            reference_record("AccountId", "Account", ["Account"]),
        ],
        queryable=False,
    )
