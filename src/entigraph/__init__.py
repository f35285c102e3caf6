"""entigraph: build a queryable graph schema from remote data-model metadata."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("entigraph")
except PackageNotFoundError:
    __version__ = "dev"

# Public API exports
from entigraph.api import build_schema, normalize_records, render_sdl, BuildResult
from entigraph.contracts import NormalizationIssue
from entigraph.codes import NormalizationCode

__all__ = [
    "__version__",
    "build_schema",
    "normalize_records",
    "render_sdl",
    "BuildResult",
    "NormalizationIssue",
    "NormalizationCode",
]
