"""Sublist projection with line truncation."""

from __future__ import annotations

import logging
from collections.abc import Collection
from typing import Optional

from src.host.source import RecordHandle
from src.models.records import (
    CellEntry,
    CellProjection,
    LineProjection,
    ReadFailure,
    SublistMetadata,
    SublistProjection,
)
from src.projection.values import OMIT, compact_text, meta_text

logger = logging.getLogger(__name__)

DEFAULT_MAX_LINES = 1000


def project_cell(handle: RecordHandle, sublist_id: str, column_id: str, line: int) -> CellEntry:
    """Project one cell; same degradation rules as body fields."""
    try:
        value = handle.get_sublist_value(sublist_id, column_id, line)
    except Exception as exc:
        logger.debug("Cell %s.%s[%d] unreadable: %s", sublist_id, column_id, line, exc)
        return ReadFailure(label=column_id, error=str(exc) or type(exc).__name__)

    kwargs = {"label": column_id, "value": value}

    try:
        text = compact_text(value, handle.get_sublist_text(sublist_id, column_id, line))
    except Exception as exc:
        logger.debug("Cell %s.%s[%d] has no text: %s", sublist_id, column_id, line, exc)
        text = OMIT
    if text is not OMIT:
        kwargs["text"] = text

    try:
        meta = handle.get_sublist_field_meta(sublist_id, column_id, line)
    except Exception as exc:
        logger.debug("Column %s.%s has no metadata: %s", sublist_id, column_id, exc)
        meta = None
    if meta is not None:
        kwargs["label"] = meta_text(meta.label) or column_id

    return CellProjection(**kwargs)


def project_line(handle: RecordHandle, sublist_id: str, line: int) -> LineProjection:
    # Column set is re-read per line; the host does not promise it is constant.
    cells = {
        column_id: project_cell(handle, sublist_id, column_id, line)
        for column_id in handle.list_sublist_columns(sublist_id)
    }
    return LineProjection(line_number=line + 1, cells=cells)


def project_sublist(handle: RecordHandle, sublist_id: str, max_lines: int = DEFAULT_MAX_LINES) -> SublistProjection:
    """Project the first ``max_lines`` lines of one sublist."""
    line_count = handle.get_line_count(sublist_id)
    displayed = max(0, min(line_count, max_lines))

    metadata = {"line_count": line_count, "truncated": False}
    if line_count > max_lines:
        logger.info(
            "Sublist %s truncated: showing %d of %d lines", sublist_id, displayed, line_count
        )
        metadata["truncated"] = True
        metadata["displayed_lines"] = displayed

    lines = [project_line(handle, sublist_id, line) for line in range(displayed)]
    return SublistProjection(lines=lines, metadata=SublistMetadata(**metadata))


def project_sublists(
    handle: RecordHandle,
    max_lines: int = DEFAULT_MAX_LINES,
    include_sublists: Optional[Collection[str]] = None,
) -> dict[str, SublistProjection]:
    """Project every sublist, in the order the record lists them.

    Args:
        handle: Loaded record
        max_lines: Line cap per sublist; the true count stays in metadata
        include_sublists: Allow-list; other sublists are skipped silently
    """
    sublists: dict[str, SublistProjection] = {}
    for sublist_id in handle.list_sublist_ids():
        if include_sublists is not None and sublist_id not in include_sublists:
            continue
        sublists[sublist_id] = project_sublist(handle, sublist_id, max_lines)
    return sublists
