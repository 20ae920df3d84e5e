"""Record lifecycle event logging."""

from src.events.changes import ChangedField, get_changed_fields
from src.events.context import EventContext, EventType, UserInfo
from src.events.handlers import RecordEventLogger, resolve_role_name

__all__ = [
    "ChangedField",
    "EventContext",
    "EventType",
    "RecordEventLogger",
    "UserInfo",
    "get_changed_fields",
    "resolve_role_name",
]
