"""Tests for entigraph public API."""

import pytest
from pydantic import ValidationError

from entigraph.api import BuildResult, build_schema, normalize_records, render_sdl
from entigraph.codes import NormalizationCode
from entigraph.config import settings as settings_module
from entigraph.kernel.entity import Entity, EntityCapabilities
from entigraph.kernel.errors import DuplicateEntityError, MissingIdentityError

from conftest import entity_record, field_record, reference_record


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Each test reads ENTIGRAPH_* from a clean environment."""
    for key in ("ENTIGRAPH_STRICT_NORMALIZATION", "ENTIGRAPH_QUERY_TYPE_NAME"):
        monkeypatch.delenv(key, raising=False)
    settings_module.reset_settings()
    yield
    settings_module.reset_settings()


def test_build_schema_from_records(account_record, contact_record):
    result = build_schema([account_record, contact_record])

    assert isinstance(result, BuildResult)
    assert result.ok is True
    assert result.type_names == ["Account", "Contact"]
    assert result.operation_names == ["Account_by_id", "Account"]
    assert result.digest.startswith("sha256:")
    assert result.unresolved_references == {}


def test_build_schema_reports_issues_and_unresolved():
    records = [
        entity_record(None),
        entity_record("Opportunity", fields=[
            field_record("Id", "id"),
            reference_record("CampaignId", "Campaign", ["Campaign"]),
            reference_record("DelegatedApproverId", None, ["User"]),
        ]),
    ]
    result = build_schema(records)

    assert result.ok is False
    codes = [i.code for i in result.issues]
    assert NormalizationCode.MISSING_IDENTITY in codes
    assert NormalizationCode.MISSING_RELATIONSHIP_NAME in codes
    assert result.unresolved_references == {"Opportunity": ["Campaign"]}
    fields = result.graph_schema.types["Opportunity"].fields
    assert str(fields["campaign"].type) == "ID"
    assert "delegatedApproverId" not in fields


def test_build_schema_from_entities():
    entities = [Entity(source_name="Lead", display_name="Lead", capabilities=EntityCapabilities(queryable=True))]
    result = build_schema(entities)
    assert result.issues == []
    assert result.operation_names == ["Lead_by_id", "Lead"]


def test_build_schema_duplicate_entities_rejected():
    entities = [
        Entity(source_name="Lead", display_name="Lead"),
        Entity(source_name="Lead2", display_name="Lead"),
    ]
    with pytest.raises(DuplicateEntityError):
        build_schema(entities)


def test_build_is_idempotent(account_record, contact_record):
    first = build_schema([account_record, contact_record])
    second = build_schema([account_record, contact_record])
    assert first.digest == second.digest
    assert first.graph_schema.model_dump() == second.graph_schema.model_dump()
    assert render_sdl(first) == render_sdl(second.graph_schema)


def test_query_type_name_from_settings(monkeypatch, account_record):
    monkeypatch.setenv("ENTIGRAPH_QUERY_TYPE_NAME", "Root")
    settings_module.reset_settings()
    result = build_schema([account_record])
    assert result.graph_schema.query.name == "Root"
    assert "type Root {" in render_sdl(result)


def test_explicit_query_type_name_wins(monkeypatch, account_record):
    monkeypatch.setenv("ENTIGRAPH_QUERY_TYPE_NAME", "Root")
    settings_module.reset_settings()
    result = build_schema([account_record], query_type_name="Query")
    assert result.graph_schema.query.name == "Query"


def test_strict_from_settings(monkeypatch):
    monkeypatch.setenv("ENTIGRAPH_STRICT_NORMALIZATION", "true")
    settings_module.reset_settings()
    with pytest.raises(MissingIdentityError):
        normalize_records([entity_record(None)])


def test_normalize_records_lenient_by_default(account_record):
    result = normalize_records([entity_record(None), account_record])
    assert [e.source_name for e in result.entities] == ["Account"]
    assert len(result.errors) == 1


def test_empty_input():
    result = build_schema([])
    assert result.type_names == []
    assert result.operation_names == []
    assert render_sdl(result) == "type Query\n"


def test_entity_named_like_leaf_type_rejected():
    """A Location object is reported and left out; location fields keep the leaf type."""
    result = build_schema([
        entity_record("Location", fields=[field_record("Id", "id"), field_record("Coords", "location")]),
        entity_record("Site", fields=[field_record("Coords", "location")]),
    ])

    assert result.ok is False
    assert [i.code for i in result.issues] == [NormalizationCode.RESERVED_TYPE_NAME]
    assert result.issues[0].entity == "Location"
    assert result.type_names == ["Site"]
    assert "Location" in result.graph_schema.scalars
    assert str(result.graph_schema.types["Site"].fields["coords"].type) == "Location"
    assert render_sdl(result).count("Location") == 2  # scalar declaration + field type


def test_prebuilt_entity_with_link_kind_on_scalar_rejected():
    with pytest.raises(ValidationError):
        build_schema([Entity.model_validate({
            "source_name": "A",
            "display_name": "A",
            "fields": [{"kind": "reference", "source_name": "BId", "display_name": "b"}],
        })])
