"""Tests for src/projection/fields.py"""

from unittest.mock import MagicMock

import pytest

from src.exceptions import FieldReadError
from src.host.snapshot import SnapshotRecord
from src.host.source import FieldMeta
from src.models.records import FieldProjection, ReadFailure
from src.projection.fields import project_field, project_fields


@pytest.fixture
def handle(sales_order):
    return SnapshotRecord(sales_order)


def _mock_handle(field_ids):
    handle = MagicMock()
    handle.list_field_ids.return_value = list(field_ids)
    handle.get_value.side_effect = lambda field_id: f"{field_id}-value"
    handle.get_text.side_effect = lambda field_id: f"{field_id}-text"
    handle.get_field_meta.side_effect = lambda field_id: FieldMeta(label=field_id.upper(), type="text")
    return handle


class TestProjectField:
    """Single field projection and degradation."""

    def test_select_field_keeps_text(self, handle):
        entry = project_field(handle, "entity")

        assert isinstance(entry, FieldProjection)
        assert entry.to_payload() == {
            "label": "Customer",
            "type": "select",
            "value": "17",
            "text": "ACME Corp",
            "isMandatory": True,
            "isDisplay": False,
        }

    def test_identical_text_is_absent(self, handle):
        """Text equal to the value is not serialized at all (not null)."""
        payload = project_field(handle, "memo").to_payload()

        assert payload["value"] == "rush"
        assert "text" not in payload

    def test_flags_from_metadata(self, handle):
        entry = project_field(handle, "total")

        assert entry.is_display is True
        assert entry.is_mandatory is False
        assert entry.type == "currency"

    def test_missing_metadata_falls_back_to_field_id(self, handle):
        entry = project_field(handle, "custbody_legacy")

        assert isinstance(entry, FieldProjection)
        assert entry.label == "custbody_legacy"
        assert entry.type == ""
        assert entry.value == "x"
        assert entry.is_mandatory is False
        assert entry.is_display is False

    def test_unreadable_value_becomes_read_failure(self, handle):
        entry = project_field(handle, "custbody_broken")

        assert isinstance(entry, ReadFailure)
        assert entry.to_payload() == {"label": "custbody_broken", "error": "Field is not readable"}

    def test_text_failure_keeps_value(self):
        handle = _mock_handle(["status"])
        handle.get_text.side_effect = FieldReadError("no text")

        payload = project_field(handle, "status").to_payload()

        assert payload["value"] == "status-value"
        assert payload["label"] == "STATUS"
        assert "text" not in payload

    def test_metadata_failure_keeps_text(self):
        handle = _mock_handle(["status"])
        handle.get_field_meta.side_effect = RuntimeError("meta unavailable")

        entry = project_field(handle, "status")

        assert entry.label == "status"
        assert entry.type == ""
        assert entry.text == "status-text"

    def test_empty_metadata_label_falls_back(self):
        handle = _mock_handle(["status"])
        handle.get_field_meta.side_effect = None
        handle.get_field_meta.return_value = FieldMeta(label="", type="select")

        entry = project_field(handle, "status")

        assert entry.label == "status"
        assert entry.type == "select"

    def test_non_string_metadata_is_stringified(self):
        handle = SnapshotRecord(
            {"type": "t", "id": "1", "fields": {"odd": {"value": 1, "label": 123, "type": "integer"}}}
        )

        entry = project_field(handle, "odd")

        assert isinstance(entry, FieldProjection)
        assert entry.label == "123"
        assert entry.type == "integer"
        assert entry.value == 1

    def test_exception_without_message_uses_class_name(self):
        handle = _mock_handle(["status"])
        handle.get_value.side_effect = KeyError()

        entry = project_field(handle, "status")

        assert isinstance(entry, ReadFailure)
        assert entry.error == "KeyError"


class TestProjectFields:
    """Whole body projection."""

    def test_all_fields_in_host_order(self, handle):
        fields = project_fields(handle)

        assert list(fields) == [
            "tranid",
            "entity",
            "total",
            "memo",
            "custbody_legacy",
            "custbody_broken",
        ]

    def test_partial_failure_isolation(self):
        """One unreadable field yields one failure; every other field projects."""
        handle = _mock_handle(["a", "b", "c", "d"])

        def get_value(field_id):
            if field_id == "c":
                raise FieldReadError("boom")
            return field_id

        handle.get_value.side_effect = get_value

        fields = project_fields(handle)

        assert len(fields) == 4
        failures = [field_id for field_id, entry in fields.items() if isinstance(entry, ReadFailure)]
        assert failures == ["c"]
        assert fields["c"].error == "boom"
        assert fields["d"].value == "d"

    def test_allow_list_skips_other_fields(self, handle):
        fields = project_fields(handle, include_fields=["memo", "entity", "nonexistent"])

        assert list(fields) == ["entity", "memo"]

    def test_empty_allow_list_projects_nothing(self, handle):
        assert project_fields(handle, include_fields=[]) == {}

    def test_record_without_fields(self):
        handle = SnapshotRecord({"type": "note", "id": "1"})

        assert project_fields(handle) == {}
