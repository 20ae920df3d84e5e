"""Custom exceptions for Record Inspector."""

from typing import Optional


class InspectorError(Exception):
    """Base exception for all Record Inspector errors."""

    code = "INSPECTOR_ERROR"

    def __init__(self, message: str = "", code: Optional[str] = None):
        super().__init__(message)
        if code:
            self.code = code


class ConfigError(InspectorError):
    """Configuration-related errors."""

    code = "CONFIG_ERROR"


class RecordSourceError(InspectorError):
    """Host record source errors."""

    code = "HOST_ERROR"


class RecordNotFoundError(RecordSourceError):
    """Record does not exist on the host."""

    code = "RCRD_DSNT_EXIST"


class RecordAccessError(RecordSourceError):
    """Caller may not read the record."""

    code = "INSUFFICIENT_PERMISSION"


class HostConnectionError(RecordSourceError):
    """Connection to the host failed."""

    code = "HOST_UNAVAILABLE"


class ProjectionError(InspectorError):
    """Errors that fail a whole projection or comparison."""


class RecordValidationError(ProjectionError):
    """Record type or id missing."""

    code = "VALIDATION_ERROR"


class RecordLoadError(ProjectionError):
    """Record could not be loaded."""

    code = "LOAD_ERROR"


class ComparisonLoadError(ProjectionError):
    """One side of a comparison could not be projected."""

    code = "COMPARISON_LOAD_ERROR"


class FieldReadError(InspectorError):
    """A single body field could not be read."""

    code = "FIELD_READ_ERROR"


class CellReadError(InspectorError):
    """A single sublist cell could not be read."""

    code = "CELL_READ_ERROR"
