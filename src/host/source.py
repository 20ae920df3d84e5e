"""Record source capability supplied by the host platform.

The projectors only ever talk to these protocols. Every accessor may raise;
callers decide which failures are isolated and which abort the operation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol, runtime_checkable


@dataclass(frozen=True)
class FieldMeta:
    """Descriptive metadata of a body field or sublist column."""

    label: str = ""
    type: str = ""
    is_mandatory: bool = False
    is_display: bool = False


@runtime_checkable
class RecordHandle(Protocol):
    """A loaded, read-only record."""

    record_type: str
    record_id: str

    def list_field_ids(self) -> list[str]: ...

    def get_value(self, field_id: str) -> Any: ...

    def get_text(self, field_id: str) -> Any: ...

    def get_field_meta(self, field_id: str) -> FieldMeta: ...

    def list_sublist_ids(self) -> list[str]: ...

    def get_line_count(self, sublist_id: str) -> int: ...

    def list_sublist_columns(self, sublist_id: str) -> list[str]: ...

    def get_sublist_value(self, sublist_id: str, column_id: str, line: int) -> Any: ...

    def get_sublist_text(self, sublist_id: str, column_id: str, line: int) -> Any: ...

    def get_sublist_field_meta(self, sublist_id: str, column_id: str, line: int) -> FieldMeta: ...


@runtime_checkable
class RecordSource(Protocol):
    """Loads records by type and id."""

    def load(self, record_type: str, record_id: str) -> RecordHandle:
        """Raises RecordNotFoundError / RecordAccessError."""
        ...

    def current_user_id(self) -> Optional[str]: ...
