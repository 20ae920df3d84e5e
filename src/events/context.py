"""Lifecycle event context passed in by the host's event dispatch."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from src.host.source import RecordHandle


class EventType(str, Enum):
    """Trigger types of a record lifecycle event."""

    CREATE = "create"
    EDIT = "edit"
    XEDIT = "xedit"  # inline edit
    VIEW = "view"
    DELETE = "delete"
    COPY = "copy"


@dataclass
class UserInfo:
    id: str
    name: str = ""
    role: Optional[str] = None


@dataclass
class EventContext:
    """One lifecycle invocation.

    ``form`` is the host's form object on beforeLoad; it only needs an
    ``add_button(id=..., label=..., function_name=...)`` method.
    """

    event_type: str
    new_record: RecordHandle
    user: UserInfo
    old_record: Optional[RecordHandle] = None
    execution_context: str = "USER_INTERFACE"
    script_id: str = ""
    deployment_id: str = ""
    form: Any = None
