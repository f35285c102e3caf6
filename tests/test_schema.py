"""Tests for schema.py type references."""

import pytest
from pydantic import ValidationError
from entigraph.kernel.schema import TypeRef, list_of, named, non_null


def test_wrappers_render():
    assert str(non_null(list_of(named("String")))) == "[String]!"
    assert non_null(non_null(named("ID"))) == non_null(named("ID"))


@pytest.mark.parametrize("kwargs", [
    {"kind": "named"},
    {"kind": "named", "name": ""},
    {"kind": "named", "name": "ID", "of_type": {"kind": "named", "name": "ID"}},
    {"kind": "list"},
    {"kind": "non_null"},
    {"kind": "list", "name": "ID", "of_type": {"kind": "named", "name": "ID"}},
])
def test_malformed_type_ref_rejected(kwargs):
    """Named refs carry only a name, wrappers only a wrapped type."""
    with pytest.raises(ValidationError):
        TypeRef(**kwargs)


def test_nested_malformed_type_ref_rejected():
    with pytest.raises(ValidationError):
        TypeRef.model_validate({"kind": "non_null", "of_type": {"kind": "list"}})
