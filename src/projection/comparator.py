"""Structural comparison of two projected records.

Fields differ when either side lacks the field or the raw values are not
strictly equal; labels and display text are ignored. Sublists are compared
by line count only, so two sublists with equal line counts and different
cell values report no difference.
"""

from __future__ import annotations

import logging
from typing import Any

from src.exceptions import ComparisonLoadError
from src.models.comparison import ComparisonResult, DiffResult, FieldDiff, MissingField, SublistDiff
from src.models.records import FieldEntry, RecordDocument
from src.projection.service import RecordProjector
from src.projection.values import MISSING, strictly_equal

logger = logging.getLogger(__name__)


def _value_of(entry: FieldEntry) -> Any:
    return getattr(entry, "value", MISSING)


def _union(first: dict, second: dict) -> list[str]:
    """Keys of ``first`` in order, then keys only in ``second``."""
    return list(first) + [key for key in second if key not in first]


def diff_documents(doc1: RecordDocument, doc2: RecordDocument) -> DiffResult:
    """Sparse diff of two documents; equal entries are omitted."""
    fields: dict[str, FieldDiff] = {}
    for field_id in _union(doc1.fields, doc2.fields):
        field1 = doc1.fields.get(field_id)
        field2 = doc2.fields.get(field_id)

        if field1 is not None and field2 is not None and strictly_equal(_value_of(field1), _value_of(field2)):
            continue

        label = (
            (field1.label if field1 is not None else "")
            or (field2.label if field2 is not None else "")
            or field_id
        )
        fields[field_id] = FieldDiff(
            label=label,
            record1=field1 if field1 is not None else MissingField(value=None),
            record2=field2 if field2 is not None else MissingField(value=None),
            is_different=True,
        )

    sublists: dict[str, SublistDiff] = {}
    for sublist_id in _union(doc1.sublists, doc2.sublists):
        sublist1 = doc1.sublists.get(sublist_id)
        sublist2 = doc2.sublists.get(sublist_id)
        count1 = len(sublist1.lines) if sublist1 is not None else 0
        count2 = len(sublist2.lines) if sublist2 is not None else 0

        if count1 != count2:
            sublists[sublist_id] = SublistDiff(
                record1_line_count=count1,
                record2_line_count=count2,
                is_different=True,
            )

    return DiffResult(fields=fields, sublists=sublists)


class RecordComparator:
    """Projects two records of one type and diffs them."""

    def __init__(self, projector: RecordProjector):
        self.projector = projector

    def compare(self, record_type: str, record_id1: str, record_id2: str) -> ComparisonResult:
        """Compare two records; all-or-nothing.

        Both ids are projected under ``record_type``. If either projection
        fails the comparison fails as a whole and no partial diff is returned.
        """
        result1 = self.projector.project(record_type, record_id1)
        result2 = self.projector.project(record_type, record_id2)

        if not result1.success or not result2.success:
            failures = [
                f"{record_id}: {result.error.message}"
                for record_id, result in ((record_id1, result1), (record_id2, result2))
                if not result.success and result.error is not None
            ]
            exc = ComparisonLoadError("Failed to load one or both records")
            logger.warning("%s (%s): %s", exc, record_type, "; ".join(failures))
            return ComparisonResult(success=False, error=str(exc))

        differences = diff_documents(result1.data, result2.data)
        logger.info(
            "Compared %s #%s with #%s: %d field and %d sublist differences",
            record_type,
            record_id1,
            record_id2,
            len(differences.fields),
            len(differences.sublists),
        )
        return ComparisonResult(
            success=True,
            differences=differences,
            record1=result1.data,
            record2=result2.data,
        )
