"""Exception hierarchy for the entigraph kernel."""


class KernelError(Exception):
    """Base exception for kernel errors."""
    pass


class NormalizationError(KernelError):
    """Raised when a raw metadata record cannot be normalized.

    Carries the issue code and the names needed to report it, so callers
    that isolate per-record failures can turn it into a NormalizationIssue.
    """
    code = "MALFORMED_RECORD"

    def __init__(self, message: str, entity: str | None = None, element: str | None = None):
        self.entity = entity
        self.element = element
        super().__init__(message)


class MissingIdentityError(NormalizationError):
    """Raised when a record has no source name."""
    code = "MISSING_IDENTITY"


class UnknownFieldTypeError(NormalizationError):
    """Raised when a field declares a source type tag outside the closed mapping."""
    code = "UNKNOWN_FIELD_TYPE"

    def __init__(self, source_type: str, entity: str | None = None, element: str | None = None):
        self.source_type = source_type
        where = f"{entity}.{element}" if entity and element else (element or entity or "<unknown>")
        super().__init__(
            f"Unsupported field type '{source_type}' on {where}",
            entity=entity,
            element=element,
        )


class InvalidNameError(NormalizationError):
    """Raised when a source name yields no usable ASCII schema identifier."""
    code = "INVALID_NAME"


class DuplicateEntityError(KernelError):
    """Raised when two entities share a source name or a display name."""
    def __init__(self, duplicates: set[str], kind: str = "display"):
        self.duplicates = duplicates
        self.kind = kind
        names = ", ".join(sorted(duplicates))
        super().__init__(f"Duplicate entity {kind} names: {names}")


class FieldVariantError(KernelError, TypeError):
    """Raised when a field is narrowed to the wrong variant."""
    pass


class SchemaBuildError(KernelError):
    """Raised when the type registry is inconsistent during a build."""
    pass
