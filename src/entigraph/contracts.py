"""Public result models for entigraph package."""

from typing import Optional
from pydantic import BaseModel

from entigraph.codes import NormalizationCode


class NormalizationIssue(BaseModel):
    """A record, field or relationship that did not make it into the model."""
    code: NormalizationCode
    severity: str  # "error" | "drop"
    entity: Optional[str] = None  # source name of the owning entity, when known
    element: Optional[str] = None  # source name of the field or relationship
    message: str

    @property
    def is_error(self) -> bool:
        return self.severity == "error"
