"""Body field projection."""

from __future__ import annotations

import logging
from collections.abc import Collection
from typing import Optional

from src.host.source import RecordHandle
from src.models.records import FieldEntry, FieldProjection, ReadFailure
from src.projection.values import OMIT, compact_text, meta_text

logger = logging.getLogger(__name__)


def project_field(handle: RecordHandle, field_id: str) -> FieldEntry:
    """Project one body field.

    Only a failing ``get_value`` produces a ReadFailure. Text and metadata
    are read independently and fall back to defaults when unavailable.
    """
    try:
        value = handle.get_value(field_id)
    except Exception as exc:
        logger.debug("Field %s unreadable: %s", field_id, exc)
        return ReadFailure(label=field_id, error=str(exc) or type(exc).__name__)

    kwargs = {
        "label": field_id,
        "type": "",
        "value": value,
        "is_mandatory": False,
        "is_display": False,
    }

    try:
        text = compact_text(value, handle.get_text(field_id))
    except Exception as exc:
        logger.debug("Field %s has no text: %s", field_id, exc)
        text = OMIT
    if text is not OMIT:
        kwargs["text"] = text

    try:
        meta = handle.get_field_meta(field_id)
    except Exception as exc:
        logger.debug("Field %s has no metadata: %s", field_id, exc)
        meta = None
    if meta is not None:
        kwargs["label"] = meta_text(meta.label) or field_id
        kwargs["type"] = meta_text(meta.type)
        kwargs["is_mandatory"] = bool(meta.is_mandatory)
        kwargs["is_display"] = bool(meta.is_display)

    return FieldProjection(**kwargs)


def project_fields(
    handle: RecordHandle,
    include_fields: Optional[Collection[str]] = None,
) -> dict[str, FieldEntry]:
    """Project every body field, in the order the record lists them.

    Args:
        handle: Loaded record
        include_fields: Allow-list; other fields are skipped silently

    Returns:
        Mapping of field id to projection or read failure
    """
    fields: dict[str, FieldEntry] = {}
    for field_id in handle.list_field_ids():
        if include_fields is not None and field_id not in include_fields:
            continue
        fields[field_id] = project_field(handle, field_id)
    return fields
