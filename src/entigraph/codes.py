"""Issue code constants for entigraph normalization.

These constants prevent stringly-typed issue codes and ensure
client code matches on the codes the normalizer actually emits.
"""

from enum import Enum


class NormalizationCode(str, Enum):
    """Normalization issue codes."""

    # Errors (record or field rejected)
    MISSING_IDENTITY = "MISSING_IDENTITY"
    MALFORMED_RECORD = "MALFORMED_RECORD"
    UNKNOWN_FIELD_TYPE = "UNKNOWN_FIELD_TYPE"
    INVALID_NAME = "INVALID_NAME"
    DUPLICATE_ENTITY_NAME = "DUPLICATE_ENTITY_NAME"
    DUPLICATE_FIELD_NAME = "DUPLICATE_FIELD_NAME"
    RESERVED_TYPE_NAME = "RESERVED_TYPE_NAME"

    # Expected absences (dropped, not errors)
    MISSING_RELATIONSHIP_NAME = "MISSING_RELATIONSHIP_NAME"
    MISSING_CHILD_RELATIONSHIP_NAME = "MISSING_CHILD_RELATIONSHIP_NAME"
