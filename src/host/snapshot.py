"""
Snapshot-backed record sources.

A snapshot is the JSON export of one record:

    {
        "type": "salesorder",
        "id": "42",
        "fields": {
            "entity": {"value": "17", "text": "ACME Corp", "label": "Customer", "type": "select"},
            "memo": {"value": "rush", "label": "Memo"},
            "custbody_broken": {"error": "Field is not readable"}
        },
        "sublists": {
            "item": {
                "columns": {"item": {"label": "Item"}, "quantity": {"label": "Quantity"}},
                "lines": [{"item": {"value": "5", "text": "Widget"}, "quantity": 3}]
            }
        }
    }

Field and cell entries may also be bare scalars (the value). A missing
``text`` means the display text equals the value. Entries carrying ``error``
fail on read; fields without ``label``/``type`` have no metadata.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Optional

from src.exceptions import CellReadError, FieldReadError, RecordNotFoundError, RecordSourceError
from src.host.source import FieldMeta

logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z0-9_\-]+$")


def _entry(raw: Any) -> dict:
    """Normalize a field/cell entry to dict form."""
    if isinstance(raw, dict):
        return raw
    return {"value": raw}


class SnapshotRecord:
    """Read-only RecordHandle over a snapshot dict."""

    def __init__(self, snapshot: dict, record_type: Optional[str] = None, record_id: Optional[str] = None):
        self.record_type = str(record_type or snapshot.get("type", ""))
        self.record_id = str(record_id or snapshot.get("id", ""))
        self._fields: dict = snapshot.get("fields") or {}
        self._sublists: dict = snapshot.get("sublists") or {}

    # ----- body fields -----

    def _field(self, field_id: str) -> dict:
        if field_id not in self._fields:
            raise FieldReadError(f"Field {field_id} does not exist on {self.record_type}")
        return _entry(self._fields[field_id])

    def list_field_ids(self) -> list[str]:
        return list(self._fields)

    def get_value(self, field_id: str) -> Any:
        entry = self._field(field_id)
        if "error" in entry:
            raise FieldReadError(entry["error"])
        return entry.get("value")

    def get_text(self, field_id: str) -> Any:
        entry = self._field(field_id)
        if "error" in entry:
            raise FieldReadError(entry["error"])
        return entry["text"] if "text" in entry else entry.get("value")

    def get_field_meta(self, field_id: str) -> FieldMeta:
        entry = self._field(field_id)
        if not entry.get("label") and not entry.get("type"):
            raise FieldReadError(f"No metadata for field {field_id}")
        return FieldMeta(
            label=entry.get("label") or "",
            type=entry.get("type") or "",
            is_mandatory=bool(entry.get("isMandatory", False)),
            is_display=bool(entry.get("isDisplay", False)),
        )

    # ----- sublists -----

    def _sublist(self, sublist_id: str) -> dict:
        if sublist_id not in self._sublists:
            raise RecordSourceError(f"Sublist {sublist_id} does not exist on {self.record_type}")
        return self._sublists[sublist_id] or {}

    def _cell(self, sublist_id: str, column_id: str, line: int) -> dict:
        lines = self._sublist(sublist_id).get("lines") or []
        if line < 0 or line >= len(lines):
            raise CellReadError(f"Line {line} out of range for sublist {sublist_id}")
        row = lines[line] or {}
        if column_id not in row:
            return {"value": None}
        return _entry(row[column_id])

    def list_sublist_ids(self) -> list[str]:
        return list(self._sublists)

    def get_line_count(self, sublist_id: str) -> int:
        return len(self._sublist(sublist_id).get("lines") or [])

    def list_sublist_columns(self, sublist_id: str) -> list[str]:
        sublist = self._sublist(sublist_id)
        if sublist.get("columns"):
            return list(sublist["columns"])
        # No declared columns: union of line keys in first-seen order
        columns: dict[str, None] = {}
        for row in sublist.get("lines") or []:
            for column_id in row or {}:
                columns.setdefault(column_id, None)
        return list(columns)

    def get_sublist_value(self, sublist_id: str, column_id: str, line: int) -> Any:
        entry = self._cell(sublist_id, column_id, line)
        if "error" in entry:
            raise CellReadError(entry["error"])
        return entry.get("value")

    def get_sublist_text(self, sublist_id: str, column_id: str, line: int) -> Any:
        entry = self._cell(sublist_id, column_id, line)
        if "error" in entry:
            raise CellReadError(entry["error"])
        return entry["text"] if "text" in entry else entry.get("value")

    def get_sublist_field_meta(self, sublist_id: str, column_id: str, line: int) -> FieldMeta:
        meta = (self._sublist(sublist_id).get("columns") or {}).get(column_id)
        if not meta:
            raise CellReadError(f"No metadata for column {sublist_id}.{column_id}")
        return FieldMeta(label=meta.get("label") or "", type=meta.get("type") or "")


class InMemoryRecordSource:
    """RecordSource over snapshots held in memory, keyed by (type, id)."""

    def __init__(self, snapshots: Optional[list[dict]] = None, user_id: Optional[str] = None):
        self._records: dict[tuple[str, str], dict] = {}
        self._user_id = user_id
        for snapshot in snapshots or []:
            self.add(snapshot)

    def add(self, snapshot: dict) -> None:
        key = (str(snapshot["type"]), str(snapshot["id"]))
        self._records[key] = snapshot

    def load(self, record_type: str, record_id: str) -> SnapshotRecord:
        snapshot = self._records.get((record_type, str(record_id)))
        if snapshot is None:
            raise RecordNotFoundError(f"Record {record_type} #{record_id} does not exist")
        return SnapshotRecord(snapshot, record_type, record_id)

    def current_user_id(self) -> Optional[str]:
        return self._user_id


class SnapshotDirectorySource:
    """RecordSource reading ``<root>/<type>/<id>.json`` snapshot files."""

    def __init__(self, root: Path, user_id: Optional[str] = None):
        self.root = Path(root)
        self._user_id = user_id

    def load(self, record_type: str, record_id: str) -> SnapshotRecord:
        record_id = str(record_id)
        if not _IDENTIFIER.match(record_type or "") or not _IDENTIFIER.match(record_id):
            raise RecordNotFoundError(f"Record {record_type} #{record_id} does not exist")

        path = self.root / record_type / f"{record_id}.json"
        if not path.is_file():
            logger.debug("Snapshot not found: %s", path)
            raise RecordNotFoundError(f"Record {record_type} #{record_id} does not exist")

        try:
            with path.open("r", encoding="utf-8") as handle:
                snapshot = json.load(handle)
        except json.JSONDecodeError as exc:
            raise RecordSourceError(f"Snapshot {path.name} is not valid JSON: {exc}") from exc

        return SnapshotRecord(snapshot, record_type, record_id)

    def current_user_id(self) -> Optional[str]:
        return self._user_id
