"""Record projection: load one record and project it into a RecordDocument."""

from __future__ import annotations

import logging
from collections.abc import Collection
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from src.config import ProjectionConfig
from src.exceptions import ProjectionError, RecordLoadError, RecordValidationError
from src.host.source import RecordHandle, RecordSource
from src.models.records import DocumentMetadata, ErrorDetail, ProjectionResult, RecordDocument
from src.projection.fields import project_fields
from src.projection.performance import PerformanceTracker
from src.projection.sublists import project_sublists

logger = logging.getLogger(__name__)


@dataclass
class ProjectionOptions:
    """Per-call projection options."""

    include_fields: Optional[Collection[str]] = None
    include_sublists: Optional[Collection[str]] = None
    # Overrides ProjectionConfig.max_sublist_lines for this call
    max_sublist_lines: Optional[int] = None


class RecordProjector:
    """Projects host records into RecordDocuments.

    ``project`` never raises: validation and load failures, and anything
    unexpected, come back as ``ProjectionResult(success=False)``.
    """

    def __init__(self, source: RecordSource, config: Optional[ProjectionConfig] = None):
        self.source = source
        self.config = config or ProjectionConfig()

    def project(
        self,
        record_type: str,
        record_id: str,
        options: Optional[ProjectionOptions] = None,
    ) -> ProjectionResult:
        options = options or ProjectionOptions()
        max_lines = options.max_sublist_lines
        if max_lines is None:
            max_lines = self.config.max_sublist_lines
        perf = PerformanceTracker(self.config.track_performance)

        try:
            self._validate(record_type, record_id)
            if max_lines < 1:
                raise RecordValidationError("max_sublist_lines must be at least 1")

            perf.mark("load_start")
            handle = self._load(record_type, str(record_id))
            perf.mark("load_end")

            metadata = DocumentMetadata(
                loaded_at=datetime.now(timezone.utc),
                loaded_by=self.source.current_user_id(),
            )

            perf.mark("fields_start")
            fields = project_fields(handle, options.include_fields)
            perf.mark("fields_end")

            perf.mark("sublists_start")
            sublists = project_sublists(handle, max_lines, options.include_sublists)
            perf.mark("sublists_end")
        except ProjectionError as exc:
            logger.warning("Projection of %s #%s failed: %s", record_type, record_id, exc)
            return ProjectionResult(
                success=False,
                error=ErrorDetail.from_exception(exc),
                performance=perf.report(),
            )
        except Exception as exc:
            logger.exception("Unexpected error projecting %s #%s", record_type, record_id)
            return ProjectionResult(
                success=False,
                error=ErrorDetail.from_exception(exc),
                performance=perf.report(),
            )

        document = RecordDocument(
            type=record_type,
            id=str(record_id),
            metadata=metadata,
            fields=fields,
            sublists=sublists,
        )
        logger.info(
            "Projected %s #%s: %d fields, %d sublists",
            record_type,
            record_id,
            len(fields),
            len(sublists),
        )
        return ProjectionResult(success=True, data=document, performance=perf.report())

    @staticmethod
    def _validate(record_type: Optional[str], record_id: Optional[str]) -> None:
        if not record_type or not str(record_type).strip() or record_id is None or not str(record_id).strip():
            raise RecordValidationError("Record type and ID are required")

    def _load(self, record_type: str, record_id: str) -> RecordHandle:
        try:
            return self.source.load(record_type, record_id)
        except Exception as exc:
            code = getattr(exc, "code", None)
            raise RecordLoadError(
                str(exc) or f"Unable to load {record_type} #{record_id}",
                code=code if isinstance(code, str) else None,
            ) from exc
