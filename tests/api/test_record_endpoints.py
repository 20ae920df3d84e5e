"""Tests for /api/record and /api/bookmarklet endpoints."""

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from src.api.middleware.rate_limit import setup_rate_limiting
from src.api.routers.records import router as records_router
from src.exceptions import RecordAccessError
from src.projection.service import RecordProjector


@pytest.fixture
def app_with_records(projector, comparator):
    """Create test app with the records router and an in-memory projector."""
    app = FastAPI()
    setup_rate_limiting(app)
    app.state.projector = projector
    app.state.comparator = comparator
    app.state.viewer_base_url = "https://inspector.test"
    app.include_router(records_router)
    return app


@pytest_asyncio.fixture
async def client(app_with_records):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app_with_records),
        base_url="http://test",
    ) as client:
        yield client


class TestJsonFormat:
    """format=json returns the raw projection result."""

    @pytest.mark.asyncio
    async def test_success(self, client):
        response = await client.get("/api/record", params={"recordtype": "salesorder", "recordid": "42", "format": "json"})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["data"]["fields"]["entity"]["text"] == "ACME Corp"
        assert "text" not in data["data"]["fields"]["memo"]
        assert data["data"]["sublists"]["item"]["lines"][0]["_lineNumber"] == 1
        assert set(data["performance"]["marks"]) >= {"load_start", "sublists_end"}

    @pytest.mark.asyncio
    async def test_field_and_sublist_filters(self, client):
        response = await client.get(
            "/api/record",
            params={
                "recordtype": "salesorder",
                "recordid": "42",
                "format": "json",
                "fields": "memo, entity",
                "sublists": "links",
            },
        )

        data = response.json()["data"]
        assert list(data["fields"]) == ["entity", "memo"]
        assert list(data["sublists"]) == ["links"]

    @pytest.mark.asyncio
    async def test_truncated_sublist(self, client):
        response = await client.get("/api/record", params={"recordtype": "salesorder", "recordid": "900", "format": "json"})

        sublist = response.json()["data"]["sublists"]["item"]
        assert len(sublist["lines"]) == 1000
        assert sublist["metadata"] == {"lineCount": 1500, "truncated": True, "displayedLines": 1000}

    @pytest.mark.asyncio
    async def test_not_found(self, client):
        response = await client.get("/api/record", params={"recordtype": "salesorder", "recordid": "1", "format": "json"})

        assert response.status_code == 404
        data = response.json()
        assert data["success"] is False
        assert data["error"]["code"] == "RCRD_DSNT_EXIST"
        assert data["error"]["details"]

    @pytest.mark.asyncio
    async def test_missing_parameters(self, client):
        response = await client.get("/api/record", params={"format": "json"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["message"] == "Record type and ID are required"

    @pytest.mark.asyncio
    async def test_unknown_format_rejected(self, client):
        response = await client.get("/api/record", params={"recordtype": "salesorder", "recordid": "42", "format": "xml"})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_invalid_identifier_rejected(self, client):
        response = await client.get("/api/record", params={"recordtype": "sales order", "recordid": "42"})

        assert response.status_code == 422


class TestFailureStatus:
    """Failure codes map to HTTP statuses."""

    @pytest_asyncio.fixture
    async def failing_client(self, mock_record_source, comparator):
        app = FastAPI()
        setup_rate_limiting(app)
        app.state.projector = RecordProjector(mock_record_source)
        app.state.comparator = comparator
        app.include_router(records_router)
        async with httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app),
            base_url="http://test",
        ) as client:
            yield client

    @pytest.mark.asyncio
    async def test_permission_denied(self, failing_client, mock_record_source):
        mock_record_source.load.side_effect = RecordAccessError("Permission Violation")

        response = await failing_client.get(
            "/api/record", params={"recordtype": "salesorder", "recordid": "42", "format": "json"}
        )

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "INSUFFICIENT_PERMISSION"

    @pytest.mark.asyncio
    async def test_host_failure(self, failing_client, mock_record_source):
        mock_record_source.load.side_effect = RuntimeError("socket closed")

        response = await failing_client.get(
            "/api/record", params={"recordtype": "salesorder", "recordid": "42", "format": "json"}
        )

        assert response.status_code == 502
        error = response.json()["error"]
        assert error["code"] == "LOAD_ERROR"
        assert error["message"] == "socket closed"


class TestCsvFormat:
    """format=csv returns body fields as an attachment."""

    @pytest.mark.asyncio
    async def test_csv_download(self, client):
        response = await client.get("/api/record", params={"recordtype": "salesorder", "recordid": "42", "format": "csv"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        disposition = response.headers["content-disposition"]
        assert disposition.startswith('attachment; filename="salesorder_42_fields_')
        assert disposition.endswith(".csv")
        assert response.content.startswith(b"\xef\xbb\xbf")
        assert '"Field ID","Field Label","Field Type","Value","Display Text"' in response.text
        assert '"entity","Customer","select","17","ACME Corp"' in response.text

    @pytest.mark.asyncio
    async def test_csv_failure_returns_json_error(self, client):
        response = await client.get("/api/record", params={"recordtype": "salesorder", "recordid": "1", "format": "csv"})

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "RCRD_DSNT_EXIST"


class TestViewFormat:
    """Default format: result, stats and links."""

    @pytest.mark.asyncio
    async def test_view(self, client):
        response = await client.get("/api/record", params={"recordtype": "salesorder", "recordid": "42"})

        assert response.status_code == 200
        data = response.json()
        assert data["result"]["success"] is True
        assert data["stats"]["bodyFields"] == 6
        assert data["stats"]["totalLines"] == 3
        assert data["links"] == {
            "json": "https://inspector.test/api/record?recordtype=salesorder&recordid=42&format=json",
            "csv": "https://inspector.test/api/record?recordtype=salesorder&recordid=42&format=csv",
        }

    @pytest.mark.asyncio
    async def test_view_failure_has_no_stats(self, client):
        response = await client.get("/api/record", params={"recordtype": "salesorder", "recordid": "1"})

        assert response.status_code == 404
        data = response.json()
        assert data["result"]["success"] is False
        assert data["stats"] is None


class TestCompare:
    """compareid switches to the comparison JSON."""

    @pytest.mark.asyncio
    async def test_compare(self, client):
        response = await client.get(
            "/api/record", params={"recordtype": "salesorder", "recordid": "42", "compareid": "43"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert list(data["differences"]["fields"]) == ["total"]
        assert data["differences"]["fields"]["total"]["record1"]["value"] == 100
        assert data["differences"]["fields"]["total"]["record2"]["value"] == 200
        assert data["differences"]["sublists"]["item"] == {
            "record1LineCount": 3,
            "record2LineCount": 5,
            "isDifferent": True,
        }
        assert data["record1"]["id"] == "42"
        assert data["record2"]["id"] == "43"

    @pytest.mark.asyncio
    async def test_compare_takes_priority_over_format(self, client):
        response = await client.get(
            "/api/record",
            params={"recordtype": "salesorder", "recordid": "42", "compareid": "44", "format": "csv"},
        )

        assert response.status_code == 200
        assert response.json()["differences"] == {"fields": {}, "sublists": {}}

    @pytest.mark.asyncio
    async def test_compare_failure(self, client):
        response = await client.get(
            "/api/record", params={"recordtype": "salesorder", "recordid": "42", "compareid": "404"}
        )

        assert response.status_code == 422
        assert response.json() == {"success": False, "error": "Failed to load one or both records"}


class TestBookmarklet:
    """Bookmarklet endpoint."""

    @pytest.mark.asyncio
    async def test_bookmarklet(self, client):
        response = await client.get("/api/bookmarklet")

        assert response.status_code == 200
        data = response.json()
        assert data["viewerUrl"] == "https://inspector.test/api/record"
        assert data["bookmarklet"].startswith("javascript:")
        assert "https://inspector.test/api/record?recordtype=" in data["bookmarklet"]

    @pytest.mark.asyncio
    async def test_bookmarklet_defaults_to_request_base(self, app_with_records):
        app_with_records.state.viewer_base_url = ""

        async with httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app_with_records),
            base_url="http://test",
        ) as client:
            response = await client.get("/api/bookmarklet")

        assert response.json()["viewerUrl"] == "http://test/api/record"


class TestRateLimit:
    """Endpoints are rate limited per client."""

    @pytest.mark.asyncio
    async def test_record_rate_limit(self, client):
        params = {"recordtype": "salesorder", "recordid": "42", "format": "json"}
        for _ in range(60):
            response = await client.get("/api/record", params=params)
            assert response.status_code == 200

        response = await client.get("/api/record", params=params)

        assert response.status_code == 429
        assert response.json()["error_code"] == "rate_limited"

    @pytest.mark.asyncio
    async def test_bookmarklet_rate_limit(self, client):
        for _ in range(30):
            response = await client.get("/api/bookmarklet")
            assert response.status_code == 200

        response = await client.get("/api/bookmarklet")

        assert response.status_code == 429
        assert response.json()["error_code"] == "rate_limited"
