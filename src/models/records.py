"""Pydantic models for projected records.

Wire names are camelCase. Models are dumped with ``exclude_unset`` so keys
that were never assigned (``text`` when it repeats ``value``,
``displayedLines`` on untruncated sublists, ``error`` on successful results)
are absent from the payload rather than ``null``.
"""

from __future__ import annotations

import traceback
from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, SerializerFunctionWrapHandler, model_serializer
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Immutable model with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    def to_payload(self) -> dict:
        """JSON-ready dict using wire names, omitting unassigned keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class ReadFailure(WireModel):
    """Field or cell whose value could not be read."""

    label: str
    error: str


class FieldProjection(WireModel):
    label: str
    type: str = ""
    value: Any = None
    text: Any = None
    is_mandatory: bool = False
    is_display: bool = False


class CellProjection(WireModel):
    label: str
    value: Any = None
    text: Any = None


FieldEntry = Union[FieldProjection, ReadFailure]
CellEntry = Union[CellProjection, ReadFailure]


class LineProjection(WireModel):
    """One sublist line; cells are flattened beside ``_lineNumber`` on the wire."""

    line_number: int = Field(alias="_lineNumber")
    cells: dict[str, CellEntry] = Field(default_factory=dict)

    @model_serializer(mode="wrap")
    def _flatten_cells(self, handler: SerializerFunctionWrapHandler) -> dict:
        data = handler(self)
        cells = data.pop("cells", None) or {}
        # Cells never overwrite the line number key
        data.update((key, cell) for key, cell in cells.items() if key not in data)
        return data


class SublistMetadata(WireModel):
    line_count: int
    truncated: bool = False
    displayed_lines: Optional[int] = None


class SublistProjection(WireModel):
    lines: list[LineProjection] = Field(default_factory=list)
    metadata: SublistMetadata


class DocumentMetadata(WireModel):
    loaded_at: datetime
    loaded_by: Any = None


class RecordDocument(WireModel):
    """Full projection of one record at one point in time."""

    type: str
    id: str
    metadata: DocumentMetadata
    fields: dict[str, FieldEntry] = Field(default_factory=dict)
    sublists: dict[str, SublistProjection] = Field(default_factory=dict)


class PerformanceReport(WireModel):
    total_time: float
    marks: dict[str, float] = Field(default_factory=dict)


class ErrorDetail(WireModel):
    code: str
    message: str
    details: list[str] = Field(default_factory=list)

    @classmethod
    def from_exception(cls, exc: BaseException) -> "ErrorDetail":
        """Describe ``exc``; details are the traceback of its cause, one line each."""
        origin = exc.__cause__ or exc
        if origin.__traceback__ is not None:
            formatted = "".join(traceback.format_exception(type(origin), origin, origin.__traceback__))
            details = [line for line in formatted.splitlines() if line.strip()]
        else:
            details = [repr(origin)]
        code = getattr(exc, "code", None)
        if not isinstance(code, str) or not code:
            code = type(exc).__name__
        return cls(
            code=code,
            message=str(exc) or "Unknown error",
            details=details,
        )


class ProjectionResult(WireModel):
    """Discriminated result of projecting one record."""

    success: bool
    data: Optional[RecordDocument] = None
    error: Optional[ErrorDetail] = None
    performance: Optional[PerformanceReport] = None
