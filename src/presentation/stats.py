"""Summary statistics for a projection result."""

from __future__ import annotations

from typing import Optional

from src.models.records import ProjectionResult, WireModel


class RecordStats(WireModel):
    record_type: str
    body_fields: int
    sublists: int
    total_lines: int
    truncated_sublists: list[str]
    load_time: Optional[float] = None
    # Phase durations in ms, None when performance tracking is off
    load_ms: Optional[float] = None
    fields_ms: Optional[float] = None
    sublists_ms: Optional[float] = None


def _phase(marks: dict[str, float], name: str) -> Optional[float]:
    start, end = marks.get(f"{name}_start"), marks.get(f"{name}_end")
    if start is None or end is None:
        return None
    return round(end - start, 3)


def build_stats(result: ProjectionResult) -> Optional[RecordStats]:
    """Stats for a successful result, else None."""
    if not result.success or result.data is None:
        return None

    document = result.data
    performance = result.performance
    marks = performance.marks if performance is not None else {}

    return RecordStats(
        record_type=document.type,
        body_fields=len(document.fields),
        sublists=len(document.sublists),
        total_lines=sum(sublist.metadata.line_count for sublist in document.sublists.values()),
        truncated_sublists=[
            sublist_id for sublist_id, sublist in document.sublists.items() if sublist.metadata.truncated
        ],
        load_time=performance.total_time if performance is not None else None,
        load_ms=_phase(marks, "load"),
        fields_ms=_phase(marks, "fields"),
        sublists_ms=_phase(marks, "sublists"),
    )
