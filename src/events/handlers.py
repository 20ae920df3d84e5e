"""
Record lifecycle event logging.

Responsibilities:
1. Log execution context for beforeLoad / beforeSubmit / afterSubmit
2. Add a "view record JSON" button to forms on view/edit
3. Summarize changed fields on edits
4. Log the full projected record after submit, one section per entry

Handlers never raise into the host; failures are logged with traceback.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from src.config import Config
from src.events.changes import get_changed_fields
from src.events.context import EventContext, EventType
from src.presentation.links import record_viewer_url
from src.projection.service import RecordProjector

logger = logging.getLogger(__name__)

RoleLookup = Callable[[str], Optional[str]]

VIEWER_BUTTON_ID = "custpage_view_record_json"
VIEWER_BUTTON_LABEL = "View Record JSON"
MASS_UPDATE_CONTEXT = "MASS_UPDATE"


def _format(obj: Any) -> str:
    return json.dumps(obj, indent=2, ensure_ascii=False, default=str)


def resolve_role_name(role_lookup: Optional[RoleLookup], role_id: Optional[str]) -> str:
    """Role name for ``role_id``, or the id itself when no name is found."""
    if role_id is None:
        return ""
    if role_lookup is None:
        return str(role_id)
    try:
        return role_lookup(str(role_id)) or str(role_id)
    except Exception as exc:
        logger.error("Error getting role name for %s: %s", role_id, exc)
        return str(role_id)


class RecordEventLogger:
    """Lifecycle handlers the host calls around record load and save."""

    def __init__(
        self,
        projector: RecordProjector,
        viewer_base_url: str = "",
        log_full_record_json: bool = True,
        role_lookup: Optional[RoleLookup] = None,
    ):
        self.projector = projector
        self.viewer_base_url = viewer_base_url
        self.log_full_record_json = log_full_record_json
        self.role_lookup = role_lookup

    @classmethod
    def from_config(
        cls,
        projector: RecordProjector,
        config: Config,
        role_lookup: Optional[RoleLookup] = None,
    ) -> "RecordEventLogger":
        """Build a logger from the ``events`` and ``viewer`` settings."""
        return cls(
            projector,
            viewer_base_url=config.viewer.base_url,
            log_full_record_json=config.events.log_full_record_json,
            role_lookup=role_lookup,
        )

    def viewer_url(self, record_type: str, record_id: str) -> str:
        if not self.viewer_base_url:
            return "#"
        return record_viewer_url(self.viewer_base_url, record_type, record_id)

    def execution_info(self, ctx: EventContext, phase: str) -> dict:
        """Build and log the execution block for one handler call."""
        record = ctx.new_record
        info: dict[str, Any] = {
            "eventType": phase,
            "executionContext": ctx.execution_context,
            "type": ctx.event_type,
            "recordType": record.record_type,
            "recordId": record.record_id,
            "userId": ctx.user.id,
            "userName": ctx.user.name,
            "userRole": ctx.user.role,
            "roleName": resolve_role_name(self.role_lookup, ctx.user.role),
            "scriptId": ctx.script_id,
            "deploymentId": ctx.deployment_id,
            "dateTime": datetime.now(timezone.utc).isoformat(),
            "recordViewerUrl": self.viewer_url(record.record_type, record.record_id),
        }

        if phase == "beforeLoad":
            info["form"] = "Form Object Present" if ctx.form is not None else "No Form Object"
            info["operation"] = ctx.event_type

        if phase in ("beforeSubmit", "afterSubmit"):
            info["hasOldRecord"] = ctx.old_record is not None
            if ctx.old_record is not None:
                info["changedFields"] = [
                    change.to_payload() for change in get_changed_fields(ctx.old_record, record)
                ]

        logger.info(
            "USER EVENT - %s | %s #%s\n%s", phase, record.record_type, record.record_id, _format(info)
        )
        return info

    def add_viewer_button(self, ctx: EventContext) -> None:
        record = ctx.new_record
        if ctx.form is None or not record.record_type or not record.record_id:
            return
        url = self.viewer_url(record.record_type, record.record_id)
        try:
            ctx.form.add_button(
                id=VIEWER_BUTTON_ID,
                label=VIEWER_BUTTON_LABEL,
                function_name=f"window.open('{url}', '_blank')",
            )
        except Exception:
            logger.exception("Error adding Record Viewer button")

    def track_changes(self, ctx: EventContext, info: dict) -> None:
        """Log a one-line summary of the changed fields."""
        if ctx.event_type not in (EventType.CREATE, EventType.EDIT, EventType.XEDIT):
            return
        if ctx.old_record is None:
            return

        changed = info.get("changedFields") or []
        record = ctx.new_record
        if not changed:
            logger.debug("No fields changed on %s #%s", record.record_type, record.record_id)
            return

        logger.info(
            "Record changes detected [%s #%s]: Changed %d field(s): %s",
            record.record_type,
            record.record_id,
            len(changed),
            ", ".join(f"{change['label']} ({change['fieldId']})" for change in changed),
        )
        logger.info("View complete record: %s", info.get("recordViewerUrl"))

    def log_full_record(self, record_type: str, record_id: str) -> bool:
        """Log the projected record in sections; False when it cannot be projected."""
        result = self.projector.project(record_type, record_id)
        if not result.success:
            logger.error(
                "Error logging full record JSON for %s #%s: %s",
                record_type,
                record_id,
                result.error.message if result.error else "unknown error",
            )
            return False

        payload = result.data.to_payload()
        logger.info("FULL RECORD JSON | %s #%s", record_type, record_id)
        # Sections are logged separately to stay under host log entry limits
        logger.info("RECORD FIELDS\n%s", _format(payload["fields"]))
        for sublist_id, sublist in payload["sublists"].items():
            logger.info("SUBLIST: %s\n%s", sublist_id, _format(sublist))
        logger.info("FULL RECORD JSON COMPLETE | %s #%s", record_type, record_id)
        return True

    # ----- host entry points -----

    def before_load(self, ctx: EventContext) -> Optional[dict]:
        try:
            if ctx.event_type in (EventType.VIEW, EventType.EDIT):
                self.add_viewer_button(ctx)
            if ctx.form is not None:
                logger.debug("Form information: title=%s", getattr(ctx.form, "title", ""))
            return self.execution_info(ctx, "beforeLoad")
        except Exception:
            logger.exception("Error in beforeLoad")
            return None

    def before_submit(self, ctx: EventContext) -> Optional[dict]:
        try:
            info = self.execution_info(ctx, "beforeSubmit")
            if ctx.event_type in (EventType.EDIT, EventType.XEDIT):
                self.track_changes(ctx, info)
            return info
        except Exception:
            logger.exception("Error in beforeSubmit")
            return None

    def after_submit(self, ctx: EventContext) -> Optional[dict]:
        try:
            info = self.execution_info(ctx, "afterSubmit")
            record = ctx.new_record
            logger.info(
                "Record Saved Successfully: %s #%s (%s) %s",
                record.record_type,
                record.record_id,
                ctx.event_type,
                info["recordViewerUrl"],
            )
            if ctx.execution_context == MASS_UPDATE_CONTEXT:
                logger.info("Mass Update Detected: triggered by a mass update script")
            if self.log_full_record_json:
                self.log_full_record(record.record_type, record.record_id)
            return info
        except Exception:
            logger.exception("Error in afterSubmit")
            return None
