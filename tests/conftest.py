"""Shared fixtures for Record Inspector tests."""

import json
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from src.config import ProjectionConfig
from src.host.snapshot import InMemoryRecordSource
from src.projection.comparator import RecordComparator
from src.projection.service import RecordProjector
from tests.fixtures.sample_records import (
    SAMPLE_CUSTOMER,
    make_large_order,
    make_sales_order,
)


# ============================================================================
# Record Source Fixtures
# ============================================================================


@pytest.fixture
def sales_order() -> dict:
    """Sales order 42: total 100, three item lines."""
    return make_sales_order("42", total=100, line_count=3)


@pytest.fixture
def sales_order_copy() -> dict:
    """Sales order 43: total 200, five item lines, otherwise like 42."""
    return make_sales_order("43", total=200, line_count=5)


@pytest.fixture
def record_source(sales_order, sales_order_copy) -> InMemoryRecordSource:
    """In-memory source holding orders 42, 43, 44 (clone of 42), 900 and customer 17."""
    return InMemoryRecordSource(
        [
            sales_order,
            sales_order_copy,
            make_sales_order("44", total=100, line_count=3),
            make_large_order("900", line_count=1500),
            SAMPLE_CUSTOMER,
        ],
        user_id="-5",
    )


@pytest.fixture
def snapshot_dir(tmp_path, sales_order) -> Path:
    """Snapshot directory laid out as <root>/<type>/<id>.json."""
    record_dir = tmp_path / "salesorder"
    record_dir.mkdir()
    (record_dir / "42.json").write_text(json.dumps(sales_order), encoding="utf-8")
    (record_dir / "99.json").write_text("{not json", encoding="utf-8")
    return tmp_path


@pytest.fixture
def mock_record_source() -> MagicMock:
    """Record source mock; configure ``load`` per test."""
    source = MagicMock()
    source.current_user_id.return_value = "-5"
    return source


# ============================================================================
# Projection Fixtures
# ============================================================================


@pytest.fixture
def projection_config() -> ProjectionConfig:
    return ProjectionConfig()


@pytest.fixture
def projector(record_source, projection_config) -> RecordProjector:
    return RecordProjector(record_source, projection_config)


@pytest.fixture
def comparator(projector) -> RecordComparator:
    return RecordComparator(projector)
