"""Record projection and comparison."""

from src.projection.comparator import RecordComparator, diff_documents
from src.projection.fields import project_fields
from src.projection.service import ProjectionOptions, RecordProjector
from src.projection.sublists import DEFAULT_MAX_LINES, project_sublists

__all__ = [
    "DEFAULT_MAX_LINES",
    "ProjectionOptions",
    "RecordComparator",
    "RecordProjector",
    "diff_documents",
    "project_fields",
    "project_sublists",
]
