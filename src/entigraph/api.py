"""Public API for entigraph.

High-level functions that return complete, structured results.
Callers should use these functions instead of wiring the kernel by hand.
"""

from collections.abc import Iterable
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from entigraph.config import get_logger, get_settings
from entigraph.contracts import NormalizationIssue
from entigraph.kernel.builder import SchemaBuilder
from entigraph.kernel.entity import Entity
from entigraph.kernel.graph import EntityGraph
from entigraph.kernel.hash_utils import schema_digest
from entigraph.kernel.normalize import NormalizationResult, RawEntity, normalize_all
from entigraph.kernel.schema import Schema
from entigraph.kernel.sdl import print_schema

logger = get_logger(__name__)


class BuildResult(BaseModel):
    """Stable result model for a schema build."""
    graph_schema: Schema
    digest: str  # sha256 of the canonical schema form
    type_names: List[str]  # entity types, graph order
    operation_names: List[str]  # root query fields, graph order
    issues: List[NormalizationIssue] = Field(default_factory=list)  # from normalization, empty for prebuilt entities
    unresolved_references: Dict[str, List[str]] = Field(default_factory=dict)  # entity -> targets absent from the graph

    @property
    def ok(self) -> bool:
        """True if normalization rejected nothing (expected drops don't count)."""
        return not any(i.is_error for i in self.issues)


def normalize_records(records: Iterable[RawEntity], strict: Optional[bool] = None) -> NormalizationResult:
    """Normalize raw describe records into entities.

    Args:
        records: Describe records as dicts or RawEntityRecord models
        strict: Raise on the first malformed record instead of skipping it
            (defaults to settings.strict_normalization)
    """
    if strict is None:
        strict = get_settings().strict_normalization
    return normalize_all(records, strict=strict)


def build_schema(
    records: Iterable[Union[Entity, RawEntity]],
    strict: Optional[bool] = None,
    query_type_name: Optional[str] = None,
) -> BuildResult:
    """Normalize records (unless they already are Entities) and build the schema.

    Args:
        records: Describe records, or already-normalized Entity models
        strict: See normalize_records
        query_type_name: Root query type name (defaults to settings.query_type_name)

    Raises:
        DuplicateEntityError: prebuilt entities share a source or display name
        SchemaBuildError: an entity collides with the query type name
    """
    settings = get_settings()
    if query_type_name is None:
        query_type_name = settings.query_type_name

    items: List[Any] = list(records)
    issues: List[NormalizationIssue] = []
    if all(isinstance(item, Entity) for item in items):
        entities = items
    else:
        normalized = normalize_records(items, strict=strict)
        entities = normalized.entities
        issues = normalized.issues

    graph = EntityGraph(entities)
    unresolved = graph.unresolved_references()
    if unresolved:
        logger.debug("Unresolved references fall back to ID: %s", unresolved)

    schema = SchemaBuilder(graph, query_type_name=query_type_name).build_schema()

    return BuildResult(
        graph_schema=schema,
        digest=schema_digest(schema),
        type_names=list(schema.types),
        operation_names=schema.operation_names(),
        issues=issues,
        unresolved_references=unresolved,
    )


def render_sdl(schema: Union[Schema, BuildResult]) -> str:
    """Render a built schema as SDL text."""
    if isinstance(schema, BuildResult):
        schema = schema.graph_schema
    return print_schema(schema)
