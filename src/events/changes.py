"""Changed-field detection between two versions of a record."""

from __future__ import annotations

import logging
from typing import Any

from src.host.source import RecordHandle
from src.models.records import WireModel
from src.projection.values import OMIT, compact_text, strictly_equal

logger = logging.getLogger(__name__)


class ChangedField(WireModel):
    field_id: str
    label: str
    type: str = ""
    old_value: Any = None
    new_value: Any = None
    old_text: Any = None
    new_text: Any = None


def _text(handle: RecordHandle, field_id: str, value: Any) -> Any:
    """Compacted display text, OMIT for empty values or unreadable text."""
    if value is None:
        return OMIT
    try:
        return compact_text(value, handle.get_text(field_id))
    except Exception as exc:
        logger.debug("Field %s has no text: %s", field_id, exc)
        return OMIT


def get_changed_fields(old_record: RecordHandle, new_record: RecordHandle) -> list[ChangedField]:
    """Fields of ``new_record`` whose value differs from ``old_record``.

    Fields that cannot be read on either side are logged and skipped.
    """
    changed: list[ChangedField] = []

    for field_id in new_record.list_field_ids():
        try:
            old_value = old_record.get_value(field_id)
            new_value = new_record.get_value(field_id)
        except Exception as exc:
            logger.error("Error comparing field values: Field: %s, Error: %s", field_id, exc)
            continue

        if strictly_equal(old_value, new_value):
            continue

        label, field_type = field_id, ""
        try:
            meta = new_record.get_field_meta(field_id)
            label = meta.label or field_id
            field_type = meta.type or ""
        except Exception as exc:
            logger.debug("Field %s has no metadata: %s", field_id, exc)

        kwargs = {
            "field_id": field_id,
            "label": label,
            "type": field_type,
            "old_value": old_value,
            "new_value": new_value,
        }
        old_text = _text(old_record, field_id, old_value)
        if old_text is not OMIT:
            kwargs["old_text"] = old_text
        new_text = _text(new_record, field_id, new_value)
        if new_text is not OMIT:
            kwargs["new_text"] = new_text

        changed.append(ChangedField(**kwargs))

    return changed
