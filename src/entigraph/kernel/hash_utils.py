"""Hash utilities with explicit canonicalization rules for stable schema digests.

Key rules:
- Object keys sorted recursively
- Arrays preserve order (field and type order is part of a schema's shape)
- Floats BANNED (hard validation error)
- Strings normalized to NFC
- Non-JSON types forbidden
"""

import json
import hashlib
import unicodedata
from typing import Any

from .schema import FieldDef, ObjectTypeDef, Schema, TypeRef


class CanonicalizationError(ValueError):
    """Raised when an object cannot be canonicalized."""
    pass


def _normalize_string(s: str) -> str:
    """Normalize string to NFC (Unicode Normalization Form Canonical Composition)."""
    return unicodedata.normalize('NFC', s)


def _canonicalize_value(obj: Any, path: str = "") -> Any:
    """Validate and canonicalize a single value."""
    if obj is None or isinstance(obj, bool):
        return obj
    elif isinstance(obj, int):
        return obj
    elif isinstance(obj, float):
        raise CanonicalizationError(f"Floats are not allowed (at {path or '<root>'})")
    elif isinstance(obj, str):
        return _normalize_string(obj)
    elif isinstance(obj, dict):
        result = {}
        for key, value in sorted(obj.items()):
            if not isinstance(key, str):
                raise CanonicalizationError(
                    f"Dictionary keys must be strings at {path or '<root>'}, got {type(key).__name__}"
                )
            result[_normalize_string(key)] = _canonicalize_value(value, f"{path}.{key}" if path else key)
        return result
    elif isinstance(obj, (list, tuple)):
        return [_canonicalize_value(item, f"{path}[{i}]") for i, item in enumerate(obj)]
    else:
        raise CanonicalizationError(
            f"Non-JSON type at {path or '<root>'}: {type(obj).__name__}. "
            f"Only None, bool, int, str, dict, and list are allowed."
        )


def canonicalize_json(obj: Any) -> str:
    """Canonicalize a JSON-serializable object to a stable string representation.

    Raises:
        CanonicalizationError: If object contains floats or non-JSON types
    """
    canonicalized = _canonicalize_value(obj)
    return json.dumps(canonicalized, sort_keys=True, ensure_ascii=False, separators=(',', ':'))


def _type_ref_json(ref: TypeRef) -> Any:
    if ref.kind == "named":
        return ref.name
    return {ref.kind: _type_ref_json(ref.of_type)}


def _field_json(field: FieldDef) -> dict:
    return {
        "name": field.name,
        "type": _type_ref_json(field.type),
        "args": [{"name": a.name, "type": _type_ref_json(a.type)} for a in field.args],
    }


def _object_json(object_type: ObjectTypeDef) -> dict:
    return {
        "name": object_type.name,
        "fields": [_field_json(f) for f in object_type.fields.values()],
    }


def schema_to_json(schema: Schema) -> dict:
    """Order-preserving JSON form of a schema (dict order becomes list order)."""
    return {
        "query": _object_json(schema.query),
        "types": [_object_json(t) for t in schema.types.values()],
        "scalars": [s.name for s in schema.scalars.values()],
    }


def schema_digest(schema: Schema) -> str:
    """Compute SHA256 digest of a schema's canonical JSON form.

    Two builds of the same entity graph produce the same digest.

    Returns:
        SHA256 hash as hex string (prefixed with "sha256:")
    """
    canonical_str = canonicalize_json(schema_to_json(schema))
    digest = hashlib.sha256(canonical_str.encode('utf-8')).hexdigest()
    return f"sha256:{digest}"
