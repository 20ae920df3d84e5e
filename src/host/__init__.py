"""Host record source integration."""

from src.host.snapshot import InMemoryRecordSource, SnapshotDirectorySource, SnapshotRecord
from src.host.source import FieldMeta, RecordHandle, RecordSource

__all__ = [
    "FieldMeta",
    "HttpRecordSource",
    "InMemoryRecordSource",
    "RecordHandle",
    "RecordSource",
    "SnapshotDirectorySource",
    "SnapshotRecord",
]


def __getattr__(name: str):
    """Lazy import so httpx is only loaded when the HTTP source is used."""
    if name == "HttpRecordSource":
        from src.host.client import HttpRecordSource
        return HttpRecordSource
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
