"""Pydantic models for record comparison."""

from __future__ import annotations

from typing import Any, Optional, Union

from pydantic import Field

from src.models.records import FieldProjection, ReadFailure, RecordDocument, WireModel


class MissingField(WireModel):
    """Stand-in for a field one of the records does not have."""

    value: Any = None


FieldSide = Union[FieldProjection, ReadFailure, MissingField]


class FieldDiff(WireModel):
    label: str
    record1: FieldSide
    record2: FieldSide
    is_different: bool = True


class SublistDiff(WireModel):
    record1_line_count: int
    record2_line_count: int
    is_different: bool = True


class DiffResult(WireModel):
    """Sparse diff: only differing fields and sublists appear."""

    fields: dict[str, FieldDiff] = Field(default_factory=dict)
    sublists: dict[str, SublistDiff] = Field(default_factory=dict)


class ComparisonResult(WireModel):
    success: bool
    differences: Optional[DiffResult] = None
    record1: Optional[RecordDocument] = None
    record2: Optional[RecordDocument] = None
    error: Optional[str] = None
