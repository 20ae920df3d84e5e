"""Pydantic models for Record Inspector."""

from src.models.comparison import (
    ComparisonResult,
    DiffResult,
    FieldDiff,
    MissingField,
    SublistDiff,
)
from src.models.errors import ErrorResponse
from src.models.records import (
    CellProjection,
    DocumentMetadata,
    ErrorDetail,
    FieldProjection,
    LineProjection,
    PerformanceReport,
    ProjectionResult,
    ReadFailure,
    RecordDocument,
    SublistMetadata,
    SublistProjection,
)

__all__ = [
    "CellProjection",
    "ComparisonResult",
    "DiffResult",
    "DocumentMetadata",
    "ErrorDetail",
    "ErrorResponse",
    "FieldDiff",
    "FieldProjection",
    "LineProjection",
    "MissingField",
    "PerformanceReport",
    "ProjectionResult",
    "ReadFailure",
    "RecordDocument",
    "SublistDiff",
    "SublistMetadata",
    "SublistProjection",
]
