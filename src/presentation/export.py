"""CSV export of projected body fields."""

from __future__ import annotations

import csv
import json
from datetime import date
from io import StringIO
from typing import Any, Optional

from src.models.records import FieldProjection, RecordDocument

CSV_HEADER = ["Field ID", "Field Label", "Field Type", "Value", "Display Text"]


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, dict)):
        return json.dumps(value, ensure_ascii=False, default=str)
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def fields_to_csv(document: RecordDocument) -> str:
    """One row per body field; read failures put the error in Display Text."""
    output = StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_ALL)
    writer.writerow(CSV_HEADER)

    for field_id, entry in document.fields.items():
        if isinstance(entry, FieldProjection):
            text = entry.text if "text" in entry.model_fields_set else None
            writer.writerow([field_id, entry.label, entry.type, _cell(entry.value), _cell(text)])
        else:
            writer.writerow([field_id, entry.label, "", "", entry.error])

    return output.getvalue()


def csv_filename(record_type: str, record_id: str, today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"{record_type}_{record_id}_fields_{today.isoformat()}.csv"
